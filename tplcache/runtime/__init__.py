from .controller import TemplateRuntime
from .diagnostics import Diagnostics, SuppressionHandler, UndefinedVariableWarning
from .make_nocache import MakeNocacheRuntime
from .output import OutputStack
from .renderer import RenderContext, TemplateRenderer

__all__ = [
    "TemplateRuntime",
    "Diagnostics",
    "SuppressionHandler",
    "UndefinedVariableWarning",
    "MakeNocacheRuntime",
    "OutputStack",
    "RenderContext",
    "TemplateRenderer",
]
