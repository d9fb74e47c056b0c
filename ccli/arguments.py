r"""
ccli argument specifications and per-command registries.

Overview
- Specs
  • Option: named, typed switch with a long spelling and an optional short alias
    (e.g., --number/-n). Holds the Value bound by the last parse (or its default).
  • Argument: positional, typed value; its index in the ArgumentList is its
    position on the command line.

- Registries
  • OptionRegistry: options of one command. Owns the Option records in a backing
    list; its SymbolTable maps every spelling to the index of its record, so both
    spellings of one option resolve to the same shared record.
  • ArgumentList: ordered positional arguments of one command (duplicates allowed).

Metadata (sanitized on construction)
- names: must match r"--?[^\W\d_](-?[^\W_]+)*" (unicode letters allowed).
- descr: Unset | str | Text, non-empty after trimming when provided.
- kind: a ValueKind; defaults must match it (bool is not a NUMBER, NULL takes none).

Lifecycle
- value starts as the default (or Value.null()), is replaced at most once per
  parse, and is read-only once the callback runs. reset() restores the default
  before the next parse.

Quick example
    >>> options = OptionRegistry()
    >>> number = options.add("--number", "-n", kind=ValueKind.NUMBER, default=3)
    >>> options.resolve("-n") is options.resolve("--number") is number
    True
"""
import re

from rich.text import Text

from .logger import logger
from .table import SymbolTable
from .utils import *
from .values import Value, ValueKind

__all__ = (
    "Option",
    "Argument",
    "OptionRegistry",
    "ArgumentList",
)

_NAME = re.compile(r"--?[^\W\d_](-?[^\W_]+)*")


def _sanitize_descr(typename, descr, /):
    """
    Internal: validate and normalize an optional description.

    Returns None when Unset; otherwise the trimmed, non-empty description.
    """
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{typename} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{typename} 'descr' cannot be empty")
    return coalesce(descr)


def _sanitize_name(typename, name, /):
    """
    Internal: validate a shell-style option spelling ("-x", "--name", "--long-name").
    """
    if not isinstance(name, str):
        raise TypeError(f"{typename} names must be strings")
    elif not (name := name.strip()):
        raise ValueError(f"{typename} names cannot be empty-strings")
    elif not _NAME.fullmatch(name):
        raise ValueError(f"{typename} names must be valid shell-style option names (unicodes are allowed)")
    return name


def _sanitize_kind(typename, kind, /):
    if not isinstance(kind, ValueKind):
        raise TypeError(f"{typename} 'kind' must be a ValueKind")
    return kind


class _Spec:
    """
    Internal: shared behavior of Option and Argument (kind, descr, value slot).
    """
    __typename__ = "spec"

    def __init__(self, kind, descr):
        self._kind = _sanitize_kind(self.__typename__, kind)
        self._descr = _sanitize_descr(self.__typename__, descr)
        self._default = None
        self.value = Value.null()

    kind = mirror("kind")

    @property
    def descr(self):
        return self._descr

    @descr.setter
    def descr(self, descr):
        self._descr = _sanitize_descr(self.__typename__, descr)

    @property
    def default(self):
        """
        the typed default (a Value) or None when no default was set.
        """
        return self._default

    @default.setter
    def default(self, default):
        if self._kind is ValueKind.NULL:
            raise TypeError(f"{self.__typename__} of kind {self._kind.label} takes no default")
        if not self._kind.accepts(default):
            raise TypeError(
                f"{self.__typename__} default {default!r} does not match kind {self._kind.label}"
            )
        self._default = Value(self._kind, default)
        self.value = self._default

    def bind(self, value, /):
        """
        replace the held value (called by the parser, once per parse).
        """
        if not isinstance(value, Value):
            raise TypeError("bind() argument must be a Value")
        self.value = value

    def reset(self):
        self.value = self._default if self._default is not None else Value.null()


class Option(_Spec):
    """
    Named, typed option. `long` is mandatory, `short` is an exact alias string.
    """
    __typename__ = "option"

    def __init__(self, long, short=Unset, /, kind=ValueKind.NULL, default=Unset, descr=Unset):
        super().__init__(kind, descr)
        self._long = _sanitize_name(self.__typename__, long)
        self._short = None if short is Unset or short is None else _sanitize_name(self.__typename__, short)
        if self._short == self._long:
            raise ValueError(f"{self.__typename__} names cannot contain duplicates")
        self.matched = False
        if default is not Unset:
            self.default = default

    long = mirror("long")
    short = mirror("short")

    @property
    def names(self):
        """
        declared spellings, long first.
        """
        return tuple(name for name in (self._long, self._short) if name is not None)

    def bind(self, value, /):
        super().bind(value)
        self.matched = True

    def reset(self):
        super().reset()
        self.matched = False

    def __repr__(self):
        return "option(names=%r, kind=%s, value=%r)" % (self.names, self._kind.label, self.value)


class Argument(_Spec):
    """
    Positional, typed argument.
    """
    __typename__ = "argument"

    def __init__(self, name, /, kind=ValueKind.STRING, descr=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{self.__typename__} name must be a string")
        elif not (name := name.strip()):
            raise ValueError(f"{self.__typename__} name cannot be empty")
        if kind is ValueKind.NULL:
            raise ValueError(f"{self.__typename__} kind cannot be {kind.label}")
        super().__init__(kind, descr)
        self._name = name

    name = mirror("name")

    def __repr__(self):
        return "argument(name=%r, kind=%s, value=%r)" % (self._name, self._kind.label, self.value)


class OptionRegistry:
    """
    Options of one command, keyed by every spelling.

    ownership
    - the backing list owns each Option exactly once.
    - the symbol table maps each spelling to the index of its Option in that list;
      long and short spellings of one option hold the same index.
    """

    def __init__(self):
        self._options = []
        self._table = SymbolTable()

    table = property(lambda self: self._table)

    def add(self, long=Unset, short=Unset, /, kind=ValueKind.NULL, default=Unset, descr=Unset):
        """
        register an option and return it, or None when `long` is missing.

        a missing long spelling is a configuration error: it is logged and no
        handle is returned. Spellings already seen are rebound to the new option.
        """
        if long is Unset or long is None or (isinstance(long, str) and not long.strip()):
            logger.warning("option registration ignored: every option needs a long name (short=%r)", short)
            return None

        option = Option(long, short, kind=kind, default=default, descr=descr)
        index = len(self._options)
        self._options.append(option)

        for name in option.names:
            key, new = self._table.bind(name, index)
            if not new:
                logger.debug("option spelling %r rebound to a newer option", key.chars)
        return option

    def resolve(self, name, /):
        """
        return the Option spelled `name`, or None.
        """
        if not isinstance(name, str):
            raise TypeError("resolve() argument must be a string")
        index = self._table.lookup(name)
        return None if index is None else self._options[index]

    def reset(self):
        for option in self._options:
            option.reset()

    def __iter__(self):
        """
        yield reachable options once each, in registration order.
        """
        for index in sorted(set(self._table.values())):
            yield self._options[index]

    def __len__(self):
        return len(set(self._table.values()))

    def __contains__(self, name):
        return isinstance(name, str) and name in self._table

    def __repr__(self):
        return "options(%s)" % ", ".join(map(repr, self))


class ArgumentList:
    """
    Ordered positional arguments of one command.
    """

    def __init__(self):
        self._arguments = []

    def add(self, name, /, kind=ValueKind.STRING, descr=Unset):
        argument = Argument(name, kind=kind, descr=descr)
        self._arguments.append(argument)
        return argument

    def resolve(self, key, /):
        """
        return the Argument at index `key` (int) or the first one named `key` (str), or None.
        """
        if isinstance(key, bool) or not isinstance(key, int | str):
            raise TypeError("resolve() argument must be an index or a name")
        if isinstance(key, int):
            if not 0 <= key < len(self._arguments):
                return None
            return self._arguments[key]
        return next((argument for argument in self._arguments if argument.name == key), None)

    def reset(self):
        for argument in self._arguments:
            argument.reset()

    def __getitem__(self, index):
        return self._arguments[index]

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)

    def __repr__(self):
        return "arguments(%s)" % ", ".join(map(repr, self._arguments))
