"""
ccli symbol table: interned names over an open-addressing hash table.

Overview
- fnv1a(data): 32-bit FNV-1a digest used for every key.
- InternedName: immutable (chars, hash) pair; equality is content equality.
- SymbolTable: string-keyed, open-addressing table mapping interned names to
  bound records (option indices, in practice).

Invariants
- capacity is 0 while the table is empty, otherwise a power of two >= 8.
- the load factor never exceeds 0.75: growth triggers when count + 1 > capacity * 0.75
  and doubles the capacity, rehashing every live entry in a single pass.
- probing is linear with wraparound, starting at hash & (capacity - 1), and stops
  at the first empty slot or at the slot whose key content-equals the sought one.
- count increases only when a genuinely new key is inserted; entries are never
  deleted one by one (no tombstones), only torn down together via clear().

Canonical keys
- get() takes a canonical key: the exact InternedName object stored by this table,
  obtained from find() or intern(). A look-alike name built elsewhere is a miss.
  Callers holding raw text go through intern()/bind()/lookup(), which bridge text
  to canonical keys, so the identity rule cannot be bypassed by accident.

Counting
- a record reachable through two spellings (long and short option names) occupies
  two keys and counts twice. count tracks keys, not records; the resize trigger
  depends on it.

Quick example
    >>> table = SymbolTable()
    >>> key, new = table.bind("--number", 0)
    >>> table.get(table.find("--number"))
    0
"""
from .logger import logger

__all__ = (
    "fnv1a",
    "InternedName",
    "SymbolTable",
)

_OFFSET_BASIS = 2166136261
_PRIME = 16777619
_MINIMUM_CAPACITY = 8
_MAXIMUM_LOAD = 0.75


def fnv1a(data, /):
    """
    return the 32-bit FNV-1a digest of `data` (str is hashed as UTF-8).
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    elif not isinstance(data, bytes | bytearray):
        raise TypeError("fnv1a() argument must be str or bytes")

    hash = _OFFSET_BASIS
    for byte in data:
        hash ^= byte
        hash = (hash * _PRIME) & 0xFFFFFFFF
    return hash


class InternedName:
    """
    An immutable name with its precomputed FNV-1a digest.

    Two names are equal when their text is equal; the digest is only a fast
    pre-check, collisions are settled by comparing the full text.
    """
    __slots__ = ("chars", "hash")

    def __init__(self, chars, /):
        if not isinstance(chars, str):
            raise TypeError("InternedName() argument must be a string")
        object.__setattr__(self, "chars", chars)
        object.__setattr__(self, "hash", fnv1a(chars))

    def matches(self, chars, hash, /):
        return self.hash == hash and self.chars == chars

    def __setattr__(self, name, value, /):
        raise AttributeError("InternedName is immutable")

    def __eq__(self, other):
        if not isinstance(other, InternedName):
            return NotImplemented
        return other.matches(self.chars, self.hash)

    def __hash__(self):
        return self.hash

    def __str__(self):
        return self.chars

    def __repr__(self):
        return f"InternedName({self.chars!r})"


class SymbolTable:
    """
    Open-addressing table from interned names to records.

    Slots hold either None (empty) or a (key, record) pair. See the module
    docstring for the invariants every operation keeps.
    """
    __slots__ = ("_entries", "_count", "_version")

    def __init__(self):
        self._entries = []
        self._count = 0
        self._version = 0

    @property
    def capacity(self):
        return len(self._entries)

    @property
    def count(self):
        return self._count

    @staticmethod
    def _probe(entries, chars, hash):
        """
        return the index of the slot holding `chars`, or of the empty slot where it belongs.
        """
        mask = len(entries) - 1
        index = hash & mask
        while (entry := entries[index]) is not None and not entry[0].matches(chars, hash):
            index = (index + 1) & mask
        return index

    @staticmethod
    def _normalize(name):
        if isinstance(name, InternedName):
            return name.chars, name.hash
        if isinstance(name, str):
            return name, fnv1a(name)
        raise TypeError("symbol table keys must be strings or interned names")

    def _grow(self):
        capacity = max(_MINIMUM_CAPACITY, self.capacity * 2)
        entries = [None] * capacity
        for entry in self._entries:
            if entry is not None:
                key = entry[0]
                entries[self._probe(entries, key.chars, key.hash)] = entry
        logger.debug("symbol table grown from %d to %d slots (%d keys)", self.capacity, capacity, self._count)
        self._entries = entries
        self._version += 1

    def find(self, name, /):
        """
        return the canonical key whose text equals `name`, or None.
        """
        chars, hash = self._normalize(name)
        if not self._entries:
            return None
        entry = self._entries[self._probe(self._entries, chars, hash)]
        return entry[0] if entry is not None else None

    def get(self, key, /):
        """
        return the record bound to the canonical `key`, or None when absent.

        `key` must be the object handed out by this table (find/intern/bind);
        a content-equal name built elsewhere is not a canonical key.
        """
        if not isinstance(key, InternedName):
            raise TypeError("get() argument must be an interned name")
        if not self._entries:
            return None
        entry = self._entries[self._probe(self._entries, key.chars, key.hash)]
        if entry is None or entry[0] is not key:
            return None
        return entry[1]

    def set(self, key, record, /):
        """
        bind `record` to `key`, growing first when the load factor would exceed 0.75.

        returns True when the key was not present before. Overwriting keeps the
        canonical key already stored, so references handed out earlier stay valid.
        """
        if not isinstance(key, InternedName):
            raise TypeError("set() first argument must be an interned name")
        if self._count + 1 > self.capacity * _MAXIMUM_LOAD:
            self._grow()

        index = self._probe(self._entries, key.chars, key.hash)
        self._version += 1
        if (entry := self._entries[index]) is None:
            self._entries[index] = (key, record)
            self._count += 1
            return True
        self._entries[index] = (entry[0], record)
        return False

    def intern(self, name, /):
        """
        resolve `name` to its canonical key, or create a fresh one for a later set().
        """
        if (key := self.find(name)) is not None:
            return key
        return name if isinstance(name, InternedName) else InternedName(name)

    def bind(self, name, record, /):
        """
        resolve-or-insert: intern `name` and bind `record` to it.

        returns (canonical key, True when the key is new).
        """
        key = self.intern(name)
        new = self.set(key, record)
        return self.find(key), new

    def lookup(self, name, /):
        """
        return the record bound to the text `name`, or None.
        """
        if (key := self.find(name)) is None:
            return None
        return self.get(key)

    def _live(self):
        version = self._version
        for entry in self._entries:
            if entry is not None:
                yield entry
                if self._version != version:
                    raise RuntimeError("symbol table mutated during iteration")

    def values(self):
        """
        yield live records in slot order.

        the table must not be mutated while the generator is alive; a mutation
        detected mid-iteration raises RuntimeError.
        """
        for _, record in self._live():
            yield record

    def keys(self):
        for key, _ in self._live():
            yield key

    def items(self):
        return self._live()

    def clear(self):
        """
        tear the whole table down.
        """
        self._entries = []
        self._count = 0
        self._version += 1

    def __len__(self):
        return self._count

    def __contains__(self, name):
        return self.find(name) is not None

    def __iter__(self):
        return self.keys()

    def __repr__(self):
        return f"SymbolTable(count={self._count}, capacity={self.capacity})"
