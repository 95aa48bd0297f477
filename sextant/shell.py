"""
Sextant shell layer: run a Parser against a real command line.

Parser.parse is pure: it returns Parsed, HelpRequested or Failed and leaves
printing and process termination to the caller. invoke() is that caller for
ordinary programs:

- Parsed        → returned to the program.
- HelpRequested → help printed to stdout, then exit(0).
- Failed        → the parser's fallback is called when one is registered;
                  otherwise, in shell mode, the two-line diagnostic goes to
                  stderr followed by exit(1), and outside shell mode the fault
                  is raised.
- Parse warnings are printed to stderr in shell mode and re-emitted through
  the warnings module otherwise.

Styling
- colorful=True (on the Parser) styles the help labels and switch names. Hosts
  may override the palette through a __styles__ mapping in __main__.
"""
import shlex
import sys
import warnings
from collections import defaultdict
from collections.abc import Iterable
from warnings import catch_warnings

from rich.console import Console
from rich.text import Text

from .faults import ParseWarning, trigger
from .parser import Parser, Parsed, HelpRequested, Failed
from .utils import *


def _tokens(prompt):
    """
    Normalize an invoke() prompt into a list of tokens.

    - Unset: sys.argv[1:]
    - str: shell-style split (shlex.split)
    - Iterable[str]: taken as-is, tokens are not trimmed
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("invoke() prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("invoke() prompt must be a string or an iterable of strings")


def render(parser, text, /):
    """
    Turn a help message into a Rich Text, styled when the parser is colorful.
    """
    rendered = Text(text)
    if not parser.colorful:
        return rendered

    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "options-label": "bold #FFFFFF",
        "switch-name": "bold #22C55E",
    } | getattr(__import__("__main__"), "__styles__", {}))

    rendered.highlight_regex(r"(?m)^Usage:", styles["usage-label"])
    rendered.highlight_regex(r"(?m)^Options:", styles["options-label"])
    rendered.highlight_regex(r"(?m)(?<=^Usage: )\S+", styles["program-name"])
    rendered.highlight_regex(r"(?m)(?<=^  )(-\S, )?--\S+", styles["switch-name"])
    return rendered


def invoke(parser, prompt=Unset, /, *, stdout=Unset, stderr=Unset, exit=sys.exit):
    """
    Parse a command line with `parser` and act on the outcome.

    Parameters
    - parser: Parser
    - prompt: Unset (sys.argv[1:]) | str (split like a shell) | Iterable[str]
    - stdout, stderr: rich Consoles receiving help and diagnostics
      (default: fresh consoles on the process streams).
    - exit: process-exit capability, called with 0 after help and 1 after a
      fault (default: sys.exit).

    Returns
    - the outcome (Parsed, or Failed when a fallback handled the fault, or
      whatever follows an exit capability that returns).

    Raises
    - the ParseError itself when the parser is not in shell mode and has no
      fallback.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a parser")
    tokens = _tokens(prompt)
    if stdout is Unset:
        stdout = Console()
    if stderr is Unset:
        stderr = Console(stderr=True)

    with catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        outcome = parser.parse(tokens)

    options = {
        "tool": parser,
        "shell": parser.shell,
        "fancy": parser.fancy,
        "colorful": parser.colorful,
        "console": stderr,
    }

    for warning in map(lambda x: x.message, caught):
        if isinstance(warning, ParseWarning):
            trigger(warning, **options)
        else:
            warnings.warn(warning, stacklevel=2)

    match outcome:
        case Parsed():
            return outcome
        case HelpRequested(text):
            stdout.print(render(parser, text), soft_wrap=True, highlight=False)
            exit(0)
        case Failed(fault):
            if parser._fallback is not Unset:
                parser._fallback(fault)
                return outcome
            trigger(fault, exit=exit, **options)
        case _:
            raise RuntimeError("unexpected outcome")
    return outcome


__all__ = (
    "invoke",
    "render",
)
