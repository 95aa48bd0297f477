"""
Sextant faults: declaration errors, parse errors, parse warnings and rendering.

Scope
- DeclarationError family: mistakes in the host program itself (duplicate
  names, misplaced positionals, parsing twice, reading a handle too early).
  They are raised on the spot and never rendered for end users.
- ParseError family: bad command lines. The parser returns them inside a
  Failed outcome; the shell layer renders them and exits with status 1.
- ParseWarning family: non-fatal notes about a command line.
- FaultCode: stable numeric identifiers for parse errors and warnings.
- trigger(): merge runtime options into a fault and surface it.

Rendering
- Plain mode prints exactly two lines:
      <message>
      See <program> --help for more information
- fancy=True wraps both lines in a panel titled "[ program — code | title ]".
- colorful=True styles the pieces; hosts may override the palette through a
  __styles__ mapping in __main__.
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes for parse errors and warnings.

    grouping
    - switches (111xx): UNKNOWN_SWITCH, UNKNOWN_SHORT_SWITCH, OPTION_VALUE_REQUIRED
    - positionals (112xx): UNEXPECTED_POSITIONAL, MISSING_POSITIONAL
    - warnings (12xxx): REPEATED_OPTION
    """
    # --- switch errors ---
    UNKNOWN_SWITCH          = 11112
    UNKNOWN_SHORT_SWITCH    = 11113
    OPTION_VALUE_REQUIRED   = 11117

    # --- positional errors ---
    UNEXPECTED_POSITIONAL   = 11121
    MISSING_POSITIONAL      = 11125

    # --- warnings ---
    REPEATED_OPTION         = 12115

    def normalize(self):
        """
        return the label shown for this code.

        a __codes__ mapping in __main__ may remap codes to friendlier labels;
        otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _palette(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class DeclarationError(Exception):
    """
    base class for inconsistent declarations and API misuse by the host program.
    """


class DuplicatedNameError(DeclarationError, ValueError): ...
class MisplacedPositionalError(DeclarationError, ValueError): ...
class ReparseError(DeclarationError, RuntimeError): ...
class PrematureAccessError(DeclarationError, RuntimeError): ...


class ParseError(Exception):
    """
    a user error found while parsing a command line.

    options (all optional, merged later through copy.replace)
    - code: FaultCode
    - title: short lowercase title used in fancy mode
    - input: the offending token or name
    - index: 1-based position of the offending token
    - hint: second line of the diagnostic
    - tool: the Parser that produced the fault
    - shell, fancy, colorful: rendering/triggering switches
    - console, exit: output sink and exit capability used by __trigger__
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint", "")

    def __rich__(self):
        styles = _palette({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint": "italic #9CE19C",
        })
        colorful = self.options.get("colorful", False)

        def text(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        message = text(self.message or "", "error-message")
        hint = text(self.hint, "hint")

        if not self.options.get("fancy", False):
            return Group(message, hint) if self.hint else message

        tool = self.options.get("tool")
        header = Text.assemble(
            "[ ",
            text(getattr(tool, "name", "?"), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "?", "code"),
            " | ",
            text(self.options.get("title", "error").title(), "error-title"),
            " ]"
        )
        return Panel(Group(message, hint), title=header, title_align="left")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self, soft_wrap=True)
        self.options.get("exit", sys.exit)(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownSwitchError(ParseError): ...
class OptionValueRequiredError(ParseError): ...
class UnexpectedPositionalError(ParseError): ...
class MissingPositionalError(ParseError): ...


class ParseWarning(Warning):
    """
    a non-fatal remark about a command line.

    outside shell mode the warning goes through the warnings module; in shell
    mode it is printed to the console as "warning: <message>".
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _palette({
            "warning-label": "bold #FFB400",
            "warning-message": "#D6D6DE",
        })
        colorful = self.options.get("colorful", False)
        return Text.assemble(
            ("warning", styles["warning-label"] if colorful else ""),
            ": ",
            (self.message or "", styles["warning-message"] if colorful else ""),
        )

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        self.options.get("console", console).print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RepeatedOptionWarning(ParseWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into a copy of the fault before it is triggered, so
      the given instance is never altered.
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
    "DeclarationError",
    "DuplicatedNameError",
    "MisplacedPositionalError",
    "ReparseError",
    "PrematureAccessError",
    "ParseError",
    "UnknownSwitchError",
    "OptionValueRequiredError",
    "UnexpectedPositionalError",
    "MissingPositionalError",
    "ParseWarning",
    "RepeatedOptionWarning",
    "FaultCode",
    "trigger",
)
