"""
Sextant parser: declare arguments, parse a command line once, read the results.

What this module provides
- Parser: the registry of declared switches and positionals. It owns the
  result slots, validates declarations as they are made, runs the single
  parse pass and assembles the --help text.
- Handle: read-only view over one result slot, returned by every declaration.
- Parsed / HelpRequested / Failed: the outcome of Parser.parse. The parser
  itself never prints and never exits; see sextant.shell.invoke for that.

Quick start
    from sextant import Parser, invoke

    parser = Parser("test", "A test program to test option parsing.")
    filename = parser.positional("filename", "The name of the file to ignore")
    stuff = parser.optional("stuff", "Other stuff", default="default stuff")
    some_option = parser.option("some-option", "s", "Some option")
    a_flag = parser.flag("a-flag", "f", "A very important flag")

    invoke(parser)          # parses sys.argv[1:], prints help/errors and exits
    print(filename.value, a_flag.value)

Wire syntax
- "--name" selects a switch by long name, "-c" by short name. Short flags
  bundle: "-fv" is "-f -v".
- An option takes the next whole token as its value, also inside a bundle:
  "-fs value" sets -f and gives "value" to -s. Characters after an option in
  a bundle are still read as short switches, so "-svalue" is not "-s value".
- The first bare "--" makes every later token positional, "--" included.
"""
import os.path
import sys
import warnings
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from .arguments import Arity, Flag, Option, Positional
from .faults import *
from .utils import *
from .wrapping import wrap


class Handle[_T]:
    """
    Read-only view over a result slot owned by a Parser.

    The value is meaningless until the parser has run, so reading it earlier
    raises PrematureAccessError. Variadic slots are served as tuples.
    """
    __slots__ = ("_parser", "_slot")

    def __init__(self, parser, slot, /):
        self._parser = parser
        self._slot = slot

    @property
    def slot(self):
        return self._slot

    @property
    def value(self):
        if not self._parser.parsed:
            raise PrematureAccessError("argument has been accessed before parse() was called")
        value = self._parser._slots[self._slot]
        return tuple(value) if isinstance(value, list) else value

    def __str__(self):
        return str(self.value)

    def __bool__(self):
        return bool(self.value)

    def __repr__(self):
        if not self._parser.parsed:
            return f"handle(slot={self._slot!r}, value=<unparsed>)"
        return f"handle(slot={self._slot!r}, value={self.value!r})"


class Parsed(NamedTuple):
    """
    Every token was consumed and all required positionals were matched.
    """


class HelpRequested(NamedTuple):
    """
    --help/-h was seen; parsing stopped there. `text` is the help message.
    """
    text: str


class Failed(NamedTuple):
    """
    The command line was rejected; `fault` is the ParseError describing why.
    """
    fault: ParseError

    @property
    def message(self):
        return self.fault.message


class _State:
    """
    Ephemeral state of one parse pass.

    - tokens: raw tokens not yet consumed (FIFO).
    - positionals: positionals not yet satisfied, in declaration order.
    - dashless: set by the first bare "--"; every later token is positional.
    - matched: the variadic positional at the head has taken a token.
    - seen: value options already given, for repeat warnings.
    - index: 1-based position of the token being processed.
    """
    __slots__ = ("tokens", "positionals", "dashless", "matched", "seen", "index")

    def __init__(self, tokens, positionals):
        self.tokens = deque(tokens)
        self.positionals = deque(positionals)
        self.dashless = False
        self.matched = False
        self.seen = set()
        self.index = 0

    def pop(self):
        self.index += 1
        return self.tokens.popleft()


class Parser:
    """
    Declaration registry and one-shot command-line parser.

    Layout options (keyword-only)
    - indentation: spaces before each entry of the options list (2).
    - offset: column where descriptions start (20).
    - width: total help width; descriptions wrap at width - offset (80).

    Runtime options (keyword-only, read by sextant.shell.invoke)
    - shell: print faults and exit (True) or raise them (False).
    - fancy: render faults inside a panel.
    - colorful: style help and faults.

    Lifecycle
    - declare switches and positionals, then call parse() exactly once.
    - declaring after parse() and parsing twice both raise ReparseError.
    """

    __typename__ = "parser"

    def __init__(
            self,
            name=Unset,
            descr=Unset,
            /,
            *,
            indentation=2,
            offset=20,
            width=80,
            shell=True,
            fancy=False,
            colorful=False
    ):
        name = coalesce(name, os.path.basename(sys.argv[0]))
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} 'name' must be a string")
        if not isinstance(descr, str | Unset):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")

        for option, object in (("indentation", indentation), ("offset", offset), ("width", width)):
            if not isinstance(object, int) or isinstance(object, bool):
                raise TypeError(f"{self.__typename__} {option!r} must be an integer")
        if indentation < 0:
            raise ValueError(f"{self.__typename__} 'indentation' cannot be negative")
        if offset <= indentation:
            raise ValueError(f"{self.__typename__} 'offset' must be greater than 'indentation'")
        if width <= offset:
            raise ValueError(f"{self.__typename__} 'width' must be greater than 'offset'")

        self._name = name
        self._descr = coalesce(descr, "")
        self._indentation = indentation
        self._offset = offset
        self._width = width
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        self._slots = []
        self._switches = {}
        self._shorts = {}
        self._positionals = []
        self._fallback = Unset
        self._parsed = False

        self._register(Flag, "help", "h", "Display this help message and exit", slot=self._allocate(False), helper=True)

    name = mirror("name")
    descr = mirror("descr")
    indentation = mirror("indentation")
    offset = mirror("offset")
    width = mirror("width")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    switches = mirror("switches")
    positionals = mirror("positionals")
    parsed = mirror("parsed")

    def __repr__(self):
        return f"{self.__typename__}(name={self._name!r}, switches={len(self._switches)}, positionals={len(self._positionals)})"

    # ── Declarations ───────────────────────────────────────────────────────

    def _allocate(self, initial):
        if self._parsed:
            raise ReparseError("arguments cannot be declared after parse() was called")
        self._slots.append(initial)
        return len(self._slots) - 1

    def _register(self, cls, *args, **kwargs):
        switch = cls(*args, **kwargs)
        if switch.name in self._switches:
            raise DuplicatedNameError(f"option --{switch.name} has already been defined")
        if switch.short is not None and switch.short in self._shorts:
            raise DuplicatedNameError(f"option -{switch.short} has already been defined")
        self._switches[switch.name] = switch
        if switch.short is not None:
            self._shorts[switch.short] = switch
        return switch

    def _append(self, positional):
        if self._positionals and self._positionals[-1].arity.terminal:
            raise MisplacedPositionalError("there can't be more than one optional or variadic positional argument, and it must be the last one")
        self._positionals.append(positional)
        return positional

    def _rollback(self):
        # a declaration rejected after its slot was allocated must not leave it behind
        self._slots.pop()

    def flag(self, name, short=Unset, /, descr=Unset):
        """
        Declare a presence-only switch usable as --name (and -short).

        Returns
        - Handle[bool]: True when the flag was given, False otherwise.
        """
        slot = self._allocate(False)
        try:
            self._register(Flag, name, short, descr, slot=slot)
        except Exception:
            self._rollback()
            raise
        return Handle(self, slot)

    def option(self, name, short=Unset, /, descr=Unset, default=Unset):
        """
        Declare a switch taking the next token as its value.

        Returns
        - Handle[str] holding `default` when the option is absent, if a default
          was given; otherwise Handle[str | None] holding None when absent.
        """
        slot = self._allocate(coalesce(default))
        try:
            self._register(Option, name, short, descr, coalesce(default), slot=slot)
        except Exception:
            self._rollback()
            raise
        return Handle(self, slot)

    def positional(self, name, /, descr=Unset):
        """
        Declare a required positional taking exactly one token.

        Returns
        - Handle[str]
        """
        slot = self._allocate("")
        try:
            self._append(Positional(name, descr, Arity.ONE, slot=slot))
        except Exception:
            self._rollback()
            raise
        return Handle(self, slot)

    def optional(self, name, /, descr=Unset, default=Unset):
        """
        Declare an optional positional taking zero or one token. No positional
        may be declared after it.

        Returns
        - Handle[str] when a default is given, otherwise Handle[str | None].
        """
        slot = self._allocate(coalesce(default))
        try:
            self._append(Positional(name, descr, Arity.ZERO_OR_ONE, coalesce(default), slot=slot))
        except Exception:
            self._rollback()
            raise
        return Handle(self, slot)

    def rest(self, name, /, descr=Unset, *, at_least_one=False):
        """
        Declare a positional eating up all remaining positional tokens. No
        positional may be declared after it.

        Parameters
        - at_least_one: require at least one token (ONE_OR_MORE) instead of
          accepting none (ZERO_OR_MORE).

        Returns
        - Handle[tuple[str, ...]]
        """
        arity = Arity.ONE_OR_MORE if at_least_one else Arity.ZERO_OR_MORE
        slot = self._allocate([])
        try:
            self._append(Positional(name, descr, arity, slot=slot))
        except Exception:
            self._rollback()
            raise
        return Handle(self, slot)

    def fallback(self, fallback, /):
        """
        Register a handler called by invoke() with the fault of a failed parse,
        instead of printing it and exiting.

        Rules
        - must be callable; can be set only once.

        Returns
        - the same callable, so it can be used as a decorator: @parser.fallback
        """
        if not callable(fallback):
            raise TypeError(f"{self.__typename__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{self.__typename__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    # ── Help ───────────────────────────────────────────────────────────────

    def _lines(self, descr):
        """
        Split a description into help lines without their breaks.

        Each hard-break segment is wrapped to width - offset when all of its
        words fit that column; a segment holding a longer word (a URL, a path)
        is kept whole on one line.
        """
        width = self._width - self._offset
        for segment in descr.removesuffix("\n").split("\n"):
            if segment and max(map(len, segment.split(" "))) <= width:
                yield from (line.removesuffix("\n") for line in wrap(segment, width))
            else:
                yield segment

    def _entry(self, optstring, descr):
        indent = " " * self._indentation
        margin = " " * self._offset
        column = self._offset - self._indentation

        # continuation lines, including those after hard breaks, hang at the offset
        body = "\n".join(
            line if index == 0 or not line.strip() else margin + line
            for index, line in enumerate(self._lines(descr))
        )

        if len(optstring) < column:
            return indent + optstring + " " * (column - len(optstring)) + body
        return indent + optstring + "\n" + margin + body

    def usage(self):
        """
        Assemble the --help message.

        Layout
            Usage: <name> OPTION* <positional usages>
            <descr>

            Options:
              <positionals>, "--", then every switch in declaration order
        """
        entries = [(positional.name, positional.descr) for positional in self._positionals]
        entries.append(("    --", "Treat all subsequent arguments as positional even if they start with a dash"))
        entries.extend((switch.optstring, switch.descr) for switch in self._switches.values())

        arguments = "".join(" " + positional.usage for positional in self._positionals)
        options = "\n".join(self._entry(optstring, descr) for optstring, descr in entries)
        return f"Usage: {self._name} OPTION*{arguments}\n{self._descr}\n\nOptions:\n{options}"

    # ── Parsing ────────────────────────────────────────────────────────────

    def _fault(self, cls, message, /, **options):
        return cls(message, tool=self, hint=f"See {self._name} --help for more information", **options)

    def _value(self, state, switch, input):
        if not state.tokens:
            raise self._fault(
                OptionValueRequiredError,
                f"Option {input} requires an argument.",
                code=FaultCode.OPTION_VALUE_REQUIRED,
                title="option value required",
                input=input,
                index=state.index,
            )
        if switch in state.seen:
            warnings.warn(RepeatedOptionWarning(
                f"option {input} was given more than once; the last value wins",
                code=FaultCode.REPEATED_OPTION,
                title="repeated option",
                input=input,
                index=state.index,
            ), stacklevel=4)
        state.seen.add(switch)
        self._slots[switch.slot] = state.pop()

    def _switch(self, state, switch, input):
        """
        Apply one switch. Returns True when the help flag was hit.
        """
        match switch:
            case Flag(helper=True):
                return True
            case Flag():
                self._slots[switch.slot] = True
            case Option():
                self._value(state, switch, input)
            case _:
                raise RuntimeError("unexpected argument")
        return False

    def _long(self, state, token):
        try:
            switch = self._switches[token[2:]]
        except KeyError:
            raise self._fault(
                UnknownSwitchError,
                f"Unknown option {token}",
                code=FaultCode.UNKNOWN_SWITCH,
                title="unknown option",
                input=token,
                index=state.index,
            ) from None
        return self._switch(state, switch, token)

    def _short(self, state, token):
        for char in token[1:]:
            try:
                switch = self._shorts[char]
            except KeyError:
                raise self._fault(
                    UnknownSwitchError,
                    f"Unknown short option -{char}",
                    code=FaultCode.UNKNOWN_SHORT_SWITCH,
                    title="unknown short option",
                    input="-" + char,
                    index=state.index,
                ) from None
            # an option in the bundle takes the next token; later characters are still switches
            if self._switch(state, switch, "-" + char):
                return True
        return False

    def _positional(self, state, token):
        if not state.positionals:
            raise self._fault(
                UnexpectedPositionalError,
                "Too many arguments.",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                title="too many arguments",
                input=token,
                index=state.index,
            )
        positional = state.positionals[0]
        if positional.arity.variadic:
            self._slots[positional.slot].append(token)
            state.matched = True
        else:
            self._slots[positional.slot] = token
            state.positionals.popleft()

    def parse(self, tokens, /):
        """
        Parse `tokens` (the command line without the program name).

        Returns
        - Parsed when the command line was accepted.
        - HelpRequested when --help/-h was seen (parsing stops right there).
        - Failed with the ParseError when the command line was rejected. Slots
          keep whatever was written before the offending token.

        Raises
        - ReparseError when called a second time.
        - TypeError when tokens is not an iterable of strings.
        """
        if self._parsed:
            raise ReparseError("parse() has already been called on this parser")
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")
        self._parsed = True

        state = _State(tokens, self._positionals)
        try:
            while state.tokens:
                token = state.pop()
                if state.dashless or not token.startswith("-"):
                    self._positional(state, token)
                elif token == "--":
                    state.dashless = True
                elif token.startswith("--"):
                    if self._long(state, token):
                        return HelpRequested(self.usage())
                elif self._short(state, token):
                    return HelpRequested(self.usage())

            if state.positionals and (positional := state.positionals[0]).arity.required and not state.matched:
                raise self._fault(
                    MissingPositionalError,
                    f"Missing value for {positional.name}.",
                    code=FaultCode.MISSING_POSITIONAL,
                    title="missing value",
                    input=positional.name,
                    index=state.index,
                )
        except ParseError as fault:
            return Failed(fault)
        return Parsed()


__all__ = (
    "Parser",
    "Handle",
    "Parsed",
    "HelpRequested",
    "Failed",
)
