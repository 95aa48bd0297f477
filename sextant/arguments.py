r"""
Sextant argument kinds.

Overview
- Named arguments (switches)
  • Flag: presence-only switch, e.g. -f/--a-flag. Its slot becomes True.
  • Option: value-bearing switch, e.g. -s/--some-option VALUE. Its slot
    receives the token that follows it on the command line.
- Positional arguments
  • Positional: matched by position, with an Arity telling how many tokens it
    takes (ONE, ZERO_OR_ONE, ZERO_OR_MORE, ONE_OR_MORE).

Arguments never hold parsed values. Each one carries the index of a result slot
owned by the Parser that declared it; the parse loop writes into that slot and
Handle objects read it back.

Metadata (sanitized on construction)
- name: required, non-empty, no whitespace; switch names must not start
  with '-' (the dashes are part of the wire syntax, not of the name).
- short (switches only): Unset or exactly one non-whitespace character other
  than '-'.
- descr: Unset or str; Unset becomes "" (descriptions may contain line breaks).
- slot: non-negative int.

Quick example:
    >>> Flag("a-flag", "f", descr="A very important flag", slot=0).optstring
    '-f, --a-flag'
"""
import functools
import operator
import re
from enum import Enum

from .utils import *


class ArgumentType(type):
    """
    Metaclass giving argument kinds a typename, read-only fields and stable reprs.

    Responsibilities
    - __typename__ is derived from the class name (camel-case split with
      hyphens) and used in validation messages.
    - Every name in __introspectable__ becomes a read-only property mirroring
      the private "_<name>" field.
    - __repr__ and __rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Arity(Enum):
    """
    How many command-line tokens a positional argument takes.

    The value is the suffix shown after the name in the usage line.
    """
    ONE = ""
    ZERO_OR_ONE = "?"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"

    @property
    def suffix(self):
        return self.value

    @property
    def variadic(self):
        """
        True when the positional stays eligible after taking a token.
        """
        return self in (Arity.ZERO_OR_MORE, Arity.ONE_OR_MORE)

    @property
    def required(self):
        return self in (Arity.ONE, Arity.ONE_OR_MORE)

    @property
    def terminal(self):
        """
        True when no other positional may be declared after this one.
        """
        return self is not Arity.ONE


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate 'name', 'descr' and 'slot', shared by every argument kind.

    Raises
    - TypeError: name/descr not strings, slot not an int.
    - ValueError: empty name, name containing whitespace, negative slot.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "")

    if not isinstance(slot := metadata["slot"], int) or isinstance(slot, bool):
        raise TypeError(f"{cls.__typename__} 'slot' must be an integer")
    elif slot < 0:
        raise ValueError(f"{cls.__typename__} 'slot' must be a non-negative integer")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the long and short names of a switch.

    Rules
    - the long name must not start with '-': "--some-option" is spelled
      "some-option" at declaration time.
    - the short name is Unset (becomes None) or one character that is neither
      whitespace nor '-'.
    """
    if metadata["name"].startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' must be given without leading dashes")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and (len(short) != 1 or short == "-" or short.isspace()):
        raise ValueError(f"{cls.__typename__} 'short' must be a single character other than '-'")
    metadata["short"] = coalesce(short)


class Switch(metaclass=ArgumentType):
    """
    Common base of named arguments (Flag, Option).
    """

    @property
    def optstring(self):
        """
        Names as shown in help: "-s, --name", or "    --name" without a short
        name so that long names line up.
        """
        if self.short is None:
            return "    --" + self.name
        return f"-{self.short}, --{self.name}"


class Flag(Switch):
    """
    Named, presence-only argument.

    A Flag takes no value: seeing it on the command line sets its slot to
    True. The helper flag (--help/-h, pre-registered by every Parser) ends the
    parse with a help request instead.
    """

    __introspectable__ = (
        "name",
        "short",
        "descr",
        "slot",
        "helper",
    )

    def __new__(cls, name, short=Unset, /, descr=Unset, *, slot, helper=False):
        metadata = {
            "name": name,
            "short": short,
            "descr": descr,
            "slot": slot,
            "helper": bool(helper),
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Option(Switch):
    """
    Named argument consuming exactly one following token.

    The value always comes from the next whole token: "-s value" and
    "--some-option value" work. "-svalue" does not: -s takes the next token
    and "v", "a", "l"... are looked up as further short switches.
    """

    __introspectable__ = (
        "name",
        "short",
        "descr",
        "slot",
        "default",
    )

    def __new__(cls, name, short=Unset, /, descr=Unset, default=None, *, slot):
        metadata = {
            "name": name,
            "short": short,
            "descr": descr,
            "slot": slot,
            "default": default,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        if not isinstance(metadata["default"], str | None):
            raise TypeError(f"{cls.__typename__} 'default' must be a string")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self


class Positional(metaclass=ArgumentType):
    """
    Argument identified by its position among the non-switch tokens.

    Positionals are matched in declaration order. A variadic positional
    (ZERO_OR_MORE, ONE_OR_MORE) keeps taking tokens until the input ends.
    """

    __introspectable__ = (
        "name",
        "descr",
        "arity",
        "slot",
        "default",
    )

    def __new__(cls, name, /, descr=Unset, arity=Arity.ONE, default=None, *, slot):
        metadata = {
            "name": name,
            "descr": descr,
            "arity": arity,
            "slot": slot,
            "default": default,
        }
        _sanitize_metadata(cls, metadata)
        if not isinstance(metadata["arity"], Arity):
            raise TypeError(f"{cls.__typename__} 'arity' must be an Arity")
        if metadata["arity"].variadic and metadata["default"] is not None:
            raise TypeError(f"variadic {cls.__typename__} cannot have a 'default'")
        if not isinstance(metadata["default"], str | None):
            raise TypeError(f"{cls.__typename__} 'default' must be a string")

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def usage(self):
        """
        Name with its arity suffix, as shown in the usage line ("stuff?").
        """
        return self.name + self.arity.suffix


__all__ = (
    "Arity",
    "Switch",
    "Flag",
    "Option",
    "Positional",
)

# The metaclass is an implementation detail of the argument kinds.
del ArgumentType
