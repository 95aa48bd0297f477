"""
Sextant utilities (internal helpers shared by every layer).

Overview
- UnsetType / Unset
  • Singleton sentinel for "not provided", kept apart from None because None is
    a meaningful value for options without a default.
  • Falsey, printable as "Unset", and sealed against subclassing.

- coalesce(value, default=None)
  • Materialize Unset into a concrete default; None, "" and other falsey values
    pass through untouched.

- rename(callable, name) / @rename("name")
  • Give generated callables a stable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private backing field (self._attr).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for parameters the caller did not provide.

    Characteristics
    - bool(Unset) is False, yet Unset is neither None nor "".
    - repr(Unset) is "Unset".
    - UnsetType() always returns the same instance.
    - Subclassing raises TypeError.
    """

    def __or__(self, other, /):
        """
        Allow `Unset | str` style unions inside isinstance checks.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that does.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Raises
    - TypeError on a non-callable target, a non-string name, or a wrong arity.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy containers so callers cannot mutate the backing field through a view.

    Sequences (other than str) become tuples, mappings become dicts and sets
    become frozensets; nested values are processed the same way.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return frozenset(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    Build a read-only property that serves `self._<name>` through _immortalize.

    Example
        class Record:
            name = mirror("name")   # reads self._name
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
Process-wide "not provided" marker. Materialize it with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
