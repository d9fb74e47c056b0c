"""
ccli utilities shared by the registry, command, and interface layers.

Overview
- Unset: "not provided" marker, distinct from None (which is a real default).
- coalesce(value, default=None): swap Unset for a default.
- rename("name"): decorator giving generated callables a readable __name__.
- mirror("attr"): read-only property over self._attr.
- ordinal(position): "first", "second", ... "11th" for position-first messages.

    >>> coalesce(Unset, 8)
    8
    >>> ordinal(12)
    '12th'
"""
import functools
from collections.abc import Mapping
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    type of the Unset marker; one instance per process, always falsey.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        # lets `str | Unset` work inside isinstance() checks
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    return default if object is Unset else object


def rename(name, /):
    """
    decorator: set __name__ and __qualname__ of the decorated callable to `name`.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def mirror(name, /):
    """
    read-only property for the private "_<name>" attribute.

    lists come back as tuples and dicts as mapping proxies so callers cannot
    mutate parser state through them.
    """
    attribute = "_" + name

    @rename(name)
    def getter(self):
        value = getattr(self, attribute)
        if isinstance(value, list):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        return value

    return property(getter)


_WORDS = (
    "first", "second", "third", "fourth", "fifth",
    "sixth", "seventh", "eighth", "ninth", "tenth",
)


@functools.cache
def ordinal(position, /):
    if 1 <= position <= len(_WORDS):
        return _WORDS[position - 1]
    if 10 < position % 100 < 20:
        return "%dth" % position
    return "%d%s" % (position, {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th"))


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "UnsetType",
    "Unset",
)
