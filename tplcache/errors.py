"""
Error taxonomy of the template runtime.

All expected errors that should be displayed to the user
as clean messages (without stack traces) inherit from TplUserError.

Programming errors and bugs should NOT inherit from TplUserError;
they propagate with full tracebacks.
"""

from __future__ import annotations


class TplUserError(Exception):
    """
    Base class for all user-facing errors of the template runtime.

    These errors indicate problems the user can fix:
    wrong arguments, unknown names, invalid registrations, bad template syntax.
    """
    pass


class MissingParameterError(TplUserError):
    """No template was given and the calling object is not a template itself."""
    pass


class TypeMismatchError(TplUserError, TypeError):
    """An object was passed where a template object is required."""
    pass


class IllegalFilterTypeError(TplUserError):
    """Filter type is not one of pre/post/output/variable."""

    def __init__(self, filter_type: str):
        super().__init__(f"Illegal filter type '{filter_type}'")
        self.filter_type = filter_type


class ConstraintViolationError(TplUserError):
    """A registration target does not have the declared shape."""
    pass


class FilterNotCallableError(ConstraintViolationError):
    """A filter (or handler) target is not callable."""
    pass


class NotFoundError(TplUserError, LookupError):
    """Lookup of an unknown name (registry entry, resource, template source)."""
    pass


class LiteralConflictError(TplUserError):
    """A user-defined literal collides with the active delimiters."""

    def __init__(self, literals: list[str]):
        joined = ", ".join(f'"{x}"' for x in literals)
        super().__init__(
            f"User defined literal(s) {joined} may not be identical with left or right delimiter"
        )
        self.literals = literals


class CompilerError(TplUserError):
    """Template source could not be compiled."""

    def __init__(self, message: str, template_name: str = "", line: int = 0):
        where = f"'{template_name}'" if template_name else "template"
        if line:
            where += f" line {line}"
        super().__init__(f"Syntax error in {where}: {message}")
        self.template_name = template_name
        self.line = line


class MissingVariableError(TplUserError):
    """{make_nocache} referenced a variable that is not defined."""

    def __init__(self, name: str):
        super().__init__(f"{{make_nocache ${name}}} missing variable '${name}'")
        self.name = name


__all__ = [
    "TplUserError",
    "MissingParameterError",
    "TypeMismatchError",
    "IllegalFilterTypeError",
    "FilterNotCallableError",
    "ConstraintViolationError",
    "NotFoundError",
    "LiteralConflictError",
    "CompilerError",
    "MissingVariableError",
]
