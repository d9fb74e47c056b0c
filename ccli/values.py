"""
ccli runtime values.

Overview
- ValueKind: the four runtime kinds an option or argument can hold
  (NULL, NUMBER, BOOLEAN, STRING).
- Value: an immutable tagged union over those kinds. The kind decides which
  payload is meaningful; payload accessors check the kind first so a wrong read
  fails loudly instead of returning garbage.
- coerce(kind, raw): the single place where command-line text becomes a typed
  Value (number and boolean grammars live here).

Grammar
- NUMBER: optional leading '-', then digits with an optional fraction, or a
  '.' followed by digits; an exponent is accepted. At least one digit must be
  adjacent to any sign or decimal point: "5", "-5", ".5", "-.5", "1e3" are valid,
  "-", ".", "-.", "5x" are not. Parsed into a float.
- BOOLEAN: case-insensitive 't', 'f', 'true', 'false'.
- STRING: verbatim.
- NULL: takes no text at all (presence-only switches).

Quick example
    >>> coerce(ValueKind.NUMBER, "-.5").as_number()
    -0.5
    >>> coerce(ValueKind.BOOLEAN, "T").as_boolean()
    True
"""
import math
import re
from enum import Enum

__all__ = (
    "ValueKind",
    "Value",
    "coerce",
)


class ValueKind(Enum):
    """
    runtime kind of a Value (and declared kind of an option or argument).
    """
    NULL = "null"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"

    @property
    def label(self):
        """
        upper-cased label used by help output ("NUMBER", "BOOLEAN", "STRING").
        """
        return self.name

    @property
    def pytypes(self):
        """
        python types accepted as payloads for this kind.
        """
        return {
            ValueKind.NULL: (type(None),),
            ValueKind.NUMBER: (int, float),
            ValueKind.BOOLEAN: (bool,),
            ValueKind.STRING: (str,),
        }[self]

    def accepts(self, object, /):
        """
        return True when `object` is a valid payload for this kind.

        bool is an int subclass in python; it is accepted only by BOOLEAN.
        """
        if isinstance(object, bool):
            return self is ValueKind.BOOLEAN
        return isinstance(object, self.pytypes)


class Value:
    """
    Immutable tagged union: null | number | boolean | string.

    A fresh Value replaces (never mutates) the payload held by an option or an
    argument. Use the named constructors and the checked accessors.
    """
    __slots__ = ("kind", "payload")

    def __init__(self, kind, payload=None, /):
        if not isinstance(kind, ValueKind):
            raise TypeError("Value() kind must be a ValueKind")
        if not kind.accepts(payload):
            raise TypeError(f"Value() payload {payload!r} does not match kind {kind.label}")
        if kind is ValueKind.NUMBER:
            payload = float(payload)
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "payload", payload)

    @classmethod
    def null(cls):
        return cls(ValueKind.NULL)

    @classmethod
    def number(cls, number, /):
        return cls(ValueKind.NUMBER, number)

    @classmethod
    def boolean(cls, boolean, /):
        return cls(ValueKind.BOOLEAN, boolean)

    @classmethod
    def string(cls, string, /):
        return cls(ValueKind.STRING, string)

    @classmethod
    def of(cls, object, /):
        """
        lift a plain python value (None, bool, int, float, str) into a Value.
        """
        if object is None:
            return cls.null()
        if isinstance(object, bool):
            return cls.boolean(object)
        if isinstance(object, int | float):
            return cls.number(object)
        if isinstance(object, str):
            return cls.string(object)
        raise TypeError(f"Value.of() cannot represent {type(object).__name__!r}")

    @property
    def isnull(self):
        return self.kind is ValueKind.NULL

    def _expect(self, kind):
        if self.kind is not kind:
            raise TypeError(f"value is {self.kind.label}, not {kind.label}")
        return self.payload

    def as_number(self):
        return self._expect(ValueKind.NUMBER)

    def as_boolean(self):
        return self._expect(ValueKind.BOOLEAN)

    def as_string(self):
        return self._expect(ValueKind.STRING)

    def __setattr__(self, name, value, /):
        raise AttributeError("Value is immutable")

    def __delattr__(self, name, /):
        raise AttributeError("Value is immutable")

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind is other.kind and self.payload == other.payload

    def __hash__(self):
        return hash((self.kind, self.payload))

    def __repr__(self):
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        return f"Value.{self.kind.value}({self.payload!r})"

    def __str__(self):
        match self.kind:
            case ValueKind.NULL:
                return "null"
            case ValueKind.BOOLEAN:
                return "true" if self.payload else "false"
            case ValueKind.NUMBER:
                # 3.0 -> "3", 2.5 -> "2.5"
                return "%g" % self.payload
            case _:
                return self.payload


_NUMBER = re.compile(r"-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")
_BOOLEANS = {"t": True, "true": True, "f": False, "false": False}


def coerce(kind, raw, /):
    """
    convert command-line text into a Value of the given kind.

    raises
    - ValueError: when `raw` does not follow the grammar of `kind`. The message is
      short and lowercased so callers can embed it in position-first faults.
    - TypeError: when `raw` is not a string or `kind` is not a ValueKind.
    """
    if not isinstance(kind, ValueKind):
        raise TypeError("coerce() first argument must be a ValueKind")
    if not isinstance(raw, str):
        raise TypeError("coerce() second argument must be a string")

    match kind:
        case ValueKind.NULL:
            raise ValueError("doesn't take a parameter")
        case ValueKind.NUMBER:
            if not _NUMBER.fullmatch(raw):
                raise ValueError(f"{raw!r} is not a number")
            if not math.isfinite(number := float(raw)):
                raise ValueError(f"{raw!r} is out of range")
            return Value.number(number)
        case ValueKind.BOOLEAN:
            try:
                return Value.boolean(_BOOLEANS[raw.lower()])
            except KeyError:
                raise ValueError(f"{raw!r} is not a boolean (use true/false or t/f)") from None
        case ValueKind.STRING:
            return Value.string(raw)
