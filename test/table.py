"""
Symbol table behavioral tests.

Scope
- FNV-1a digests against published vectors.
- Canonical keys: find/intern hand out one key per spelling; get() only honors it.
- Load factor and capacity invariants across growth; growth keeps every binding.
- Deliberate over-count: two spellings of one record are two keys.
- values() iteration and the no-mutation-while-iterating rule.

Conventions
- Test method names follow CamelCase per project convention.
"""
import itertools
import unittest
from unittest import TestCase

from ccli.table import fnv1a, InternedName, SymbolTable


class TestFnv1a(TestCase):

    def testPublishedVectors(self):
        self.assertEqual(fnv1a(""), 0x811C9DC5)
        self.assertEqual(fnv1a("a"), 0xE40C292C)
        self.assertEqual(fnv1a("foobar"), 0xBF9CF968)

    def testStrIsHashedAsUtf8(self):
        self.assertEqual(fnv1a("--número"), fnv1a("--número".encode("utf-8")))

    def testRejectsOtherTypes(self):
        with self.assertRaises(TypeError):
            fnv1a(42)


class TestInternedName(TestCase):

    def testContentEquality(self):
        a, b = InternedName("--number"), InternedName("--number")
        self.assertIsNot(a, b)
        self.assertEqual(a, b)
        self.assertEqual(hash(a), fnv1a("--number"))

    def testImmutable(self):
        name = InternedName("--number")
        with self.assertRaises(AttributeError):
            name.chars = "--other"


class TestSymbolTable(TestCase):

    def setUp(self):
        self.table = SymbolTable()

    def testEmptyTable(self):
        self.assertEqual(self.table.capacity, 0)
        self.assertEqual(len(self.table), 0)
        self.assertIsNone(self.table.find("--number"))
        self.assertIsNone(self.table.lookup("--number"))
        self.assertEqual(list(self.table.values()), [])

    def testFindReturnsCanonicalKeyForEqualText(self):
        key, new = self.table.bind("--number", "record")
        self.assertTrue(new)
        self.assertIs(self.table.find("--number"), key)
        self.assertIs(self.table.find(InternedName("--number")), key)
        self.assertIs(self.table.intern("--number"), key)

    def testGetHonorsOnlyCanonicalKeys(self):
        self.table.bind("--number", "record")
        self.assertEqual(self.table.get(self.table.find("--number")), "record")
        # a look-alike that was never interned by this table is a miss
        self.assertIsNone(self.table.get(InternedName("--number")))

    def testSetThroughEitherDerivedKeyObservesSameRecord(self):
        a = self.table.intern("--number")
        self.assertTrue(self.table.set(a, 1))
        b = self.table.intern("--number")
        self.assertIs(a, b)
        self.assertFalse(self.table.set(b, 2))
        self.assertEqual(self.table.get(a), 2)
        self.assertEqual(self.table.get(b), 2)
        self.assertEqual(len(self.table), 1)

    def testOverwriteKeepsCanonicalKey(self):
        key, _ = self.table.bind("--number", 1)
        fresh = InternedName("--number")
        self.assertFalse(self.table.set(fresh, 2))
        self.assertIs(self.table.find("--number"), key)
        self.assertEqual(self.table.get(key), 2)

    def testCapacityAndLoadFactorInvariants(self):
        for count in range(1, 201):
            self.assertTrue(self.table.set(InternedName("--name-%d" % count), count))
            capacity = self.table.capacity
            self.assertEqual(len(self.table), count)
            self.assertGreaterEqual(capacity, 8)
            self.assertEqual(capacity & (capacity - 1), 0)
            self.assertLessEqual(len(self.table), capacity * 0.75)

    def testGrowthTriggerPoint(self):
        for index in range(6):
            self.table.bind("--k%d" % index, index)
        self.assertEqual(self.table.capacity, 8)
        self.table.bind("--k6", 6)
        self.assertEqual(self.table.capacity, 16)

    def testResizePreservesBindings(self):
        keys = {}
        for index in range(6):
            key, _ = self.table.bind("--before-%d" % index, index)
            keys[key] = index
        before = self.table.capacity
        for index in range(50):
            self.table.bind("--after-%d" % index, -index)
        self.assertGreater(self.table.capacity, before)
        for key, record in keys.items():
            self.assertIs(self.table.find(key.chars), key)
            self.assertEqual(self.table.get(self.table.find(key.chars)), record)

    def testCollidingSlotsAreResolvedByContent(self):
        # pick three names that start probing at the same slot of an 8-slot table
        names = []
        slot = fnv1a("--seed") & 7
        for index in itertools.count():
            if fnv1a(name := "--c%d" % index) & 7 == slot:
                names.append(name)
            if len(names) == 3:
                break
        for record, name in enumerate(names):
            self.table.bind(name, record)
        self.assertEqual(self.table.capacity, 8)
        for record, name in enumerate(names):
            self.assertEqual(self.table.lookup(name), record)
        self.assertIsNone(self.table.lookup("--absent"))

    def testTwoSpellingsCountAsTwoKeys(self):
        self.table.bind("--number", 0)
        self.table.bind("-n", 0)
        self.assertEqual(len(self.table), 2)
        self.assertEqual(set(self.table.values()), {0})

    def testValuesYieldsEveryLiveRecord(self):
        for index in range(10):
            self.table.bind("--v%d" % index, index)
        self.assertEqual(sorted(self.table.values()), list(range(10)))
        self.assertEqual(sorted(key.chars for key in self.table.keys()), sorted("--v%d" % i for i in range(10)))

    def testMutationDuringIterationRaises(self):
        self.table.bind("--a", 1)
        self.table.bind("--b", 2)
        with self.assertRaises(RuntimeError):
            for _ in self.table.values():
                self.table.bind("--c", 3)

    def testClearTearsDown(self):
        self.table.bind("--a", 1)
        self.table.clear()
        self.assertEqual(len(self.table), 0)
        self.assertEqual(self.table.capacity, 0)
        self.assertNotIn("--a", self.table)

    def testRejectsRawStringKeysForGetAndSet(self):
        with self.assertRaises(TypeError):
            self.table.get("--number")
        with self.assertRaises(TypeError):
            self.table.set("--number", 1)


if __name__ == '__main__':
    unittest.main()
