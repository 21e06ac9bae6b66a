"""
commandry faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every fault the engine raises or
  reports, grouped by domain (registration, lookup, parsing, warnings).
- CommandException / CommandWarning: base types carrying a message plus free
  options, able to render themselves through rich (`console.print(fault)`).
- getdoc(): optional long description for a code, supplied by the host.

Taxonomy
- registration errors reject a whole registration (InvalidLabelError,
  InfiniteArgumentError, UnknownTypeError, wrapped in CommandRegistrationError).
- lookup errors signal misuse of an explicit lookup (UnknownCommandError,
  ArgumentNotFoundError, ArgumentTypeError). A dispatch miss is never an error.
- parse failures are values (see commandry.parsing), their kinds share the
  parsing codes below so logs stay searchable.

Integration
- Hosts may expose __codes__ (FaultCode -> label), __docs__ (FaultCode -> text)
  and __styles__ (style name -> rich style) on their __main__ module.
"""
import re
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping
    - registration (211xx)
      • INVALID_LABEL, INFINITE_ARGUMENT, DUPLICATE_ARGUMENT, DUPLICATE_LABEL,
        UNKNOWN_TYPE, REGISTRATION_FAILED
    - lookup (212xx)
      • UNKNOWN_COMMAND, ARGUMENT_NOT_FOUND, ARGUMENT_TYPE_MISMATCH
    - parsing (213xx)
      • MISSING_REQUIRED, TYPE_NOT_FOUND, CONVERSION_FAILED,
        ARGUMENT_TOO_LONG, INVALID_FORMAT
    - warnings (221xx)
      • OVERRIDDEN_COMMAND
    """
    # --- registration errors (211xx) ---
    INVALID_LABEL          = 21101
    INFINITE_ARGUMENT      = 21102
    DUPLICATE_ARGUMENT     = 21103
    DUPLICATE_LABEL        = 21104
    UNKNOWN_TYPE           = 21105
    REGISTRATION_FAILED    = 21106

    # --- lookup errors (212xx) ---
    UNKNOWN_COMMAND        = 21201
    ARGUMENT_NOT_FOUND     = 21202
    ARGUMENT_TYPE_MISMATCH = 21203

    # --- parse failures (213xx) ---
    MISSING_REQUIRED       = 21301
    TYPE_NOT_FOUND         = 21302
    CONVERSION_FAILED      = 21303
    ARGUMENT_TOO_LONG      = 21304
    INVALID_FORMAT         = 21305

    # --- warnings (221xx) ---
    OVERRIDDEN_COMMAND     = 22101

    def normalize(self):
        """
        Label shown for this code: __main__.__codes__[self] when the host
        provides it, the numeric value otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _title(cls):
    return re.sub(r"(?<!^)(?=[A-Z])", " ", re.sub(r"(Error|Warning|Exception)$", "", cls.__name__)).lower()


def _render(fault, defaults):
    main = __import__("__main__")

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))

    header = Text.assemble(
        "[ ",
        Text(getattr(main, "__prog__", "commandry"), styles["prog-name"]),
        " | ",
        Text(fault.code.normalize(), styles["code"]),
        " | ",
        Text(_title(type(fault)), styles["title"]),
        " ]"
    )
    message = Text(str(fault.message or ""), styles["message"])

    body = [message]
    if (docs := getdoc(fault.code)) is not None:
        body.append(Text.assemble(Text(" → ", styles["hint-arrow"]), Text(docs, styles["hint"])))

    if fault.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")

    return Group(header, *body)


class CommandException(Exception):
    code = FaultCode.REGISTRATION_FAILED

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",

            # body
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })


class CommandRegistrationError(CommandException, ValueError):
    code = FaultCode.REGISTRATION_FAILED


class InvalidLabelError(CommandException, ValueError):
    code = FaultCode.INVALID_LABEL


class InfiniteArgumentError(CommandException, ValueError):
    code = FaultCode.INFINITE_ARGUMENT


class DuplicateArgumentError(CommandException, ValueError):
    code = FaultCode.DUPLICATE_ARGUMENT


class DuplicateLabelError(CommandException, ValueError):
    code = FaultCode.DUPLICATE_LABEL


class UnknownTypeError(CommandException, LookupError):
    code = FaultCode.UNKNOWN_TYPE


class UnknownCommandError(CommandException, LookupError):
    code = FaultCode.UNKNOWN_COMMAND


class ArgumentNotFoundError(CommandException, LookupError):
    code = FaultCode.ARGUMENT_NOT_FOUND


class ArgumentTypeError(CommandException, TypeError):
    code = FaultCode.ARGUMENT_TYPE_MISMATCH


class CommandWarning(Warning):
    code = FaultCode.OVERRIDDEN_COMMAND

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",

            # body
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })


class OverriddenCommandWarning(CommandWarning):
    code = FaultCode.OVERRIDDEN_COMMAND


def getdoc(code, /):
    """
    Hint text for code from __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "CommandException",
    "CommandRegistrationError",
    "InvalidLabelError",
    "InfiniteArgumentError",
    "DuplicateArgumentError",
    "DuplicateLabelError",
    "UnknownTypeError",
    "UnknownCommandError",
    "ArgumentNotFoundError",
    "ArgumentTypeError",
    "CommandWarning",
    "OverriddenCommandWarning",
    "getdoc",
)
