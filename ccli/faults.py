"""
ccli faults (parse and usage errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing errors.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- CommandException: base type that carries message + options and knows how to
  render itself (rich) as a single "Error: <message>" line plus an optional hint.
- trigger(): central entry point to surface a fault with runtime options merged in.

Integration
- the parser raises faults through trigger(fault, **ctx); Interface.invoke() is the
  single place that catches them, renders contextual help plus the error line, and
  turns them into a failed outcome. Interface.run() turns that outcome into an exit.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the toolkit (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • UNKNOWN_COMMAND
    - options (1111x/1112x)
      • FLAG_ASSIGNMENT, OPTION_VALUE_REQUIRED, INVALID_VALUE
    - positionals (1112x)
      • MISSING_ARGUMENTS
    - accessors (1115x)
      • ACCESSOR_TYPE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND         = 11101

    # --- option errors ---
    FLAG_ASSIGNMENT         = 11113
    OPTION_VALUE_REQUIRED   = 11117
    INVALID_VALUE           = 11126

    # --- positional errors ---
    MISSING_ARGUMENTS       = 11125

    # --- accessor (host callback) errors ---
    ACCESSOR_TYPE           = 11151

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base class for every fatal fault raised while parsing or dispatching.

    options commonly carried
    - code: FaultCode
    - title: short lowercase title
    - hint: one actionable sentence
    - command: the Command in scope (None while selecting a command)
    - colorful: whether __rich__ applies the palette
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)
        super().__init__(message)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
            "code": "#00E5FF dim",  # neon cyan fault code
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        line = Text.assemble(text("Error", "error-label"), ": ", text(self, "error-message"))
        if self.code is not None:
            line.append_text(Text.assemble(" ", text("[%s]" % self.code.normalize(), "code")))
        if not self.hint:
            return line
        return Group(line, Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class FlagAssignmentError(CommandException): ...
class OptionValueRequiredError(CommandException): ...
class InvalidValueError(CommandException): ...
class MissingArgumentsError(CommandException): ...
class AccessorTypeError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "FlagAssignmentError",
    "OptionValueRequiredError",
    "InvalidValueError",
    "MissingArgumentsError",
    "AccessorTypeError",
    "FaultCode",
    "trigger",
)
