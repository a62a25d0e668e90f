"""
Tests for the internal helpers.

This module verifies semantic guarantees of `argvex.utils`:
- The `Unset` sentinel: singleton identity, falsy semantics, copying, finality.
- `coalesce` only replaces `Unset`.
- `rename` and `mirror` produce stable names and read-only frozen views.
- `ordinal` renders position labels used in messages.
"""
import copy
import unittest
from threading import Thread, Lock
from types import MappingProxyType
from unittest import TestCase

from argvex.utils import *


class TestUnset(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def setUp(self) -> None:
        self.unset: UnsetType = UnsetType()

    def testSingleton(self) -> None:
        """
        The constructor and the exported constant are the same object.
        """
        self.assertIs(self.unset, UnsetType())
        self.assertIs(self.unset, Unset)

    def testFalsyButDistinct(self) -> None:
        """
        Unset is falsy but never equal to other falsy values.
        """
        self.assertFalse(Unset)
        for value in (None, 0, "", [], False):
            self.assertIsNot(Unset, value)
            self.assertNotEqual(Unset, value)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testUnionWithTypes(self) -> None:
        """
        `str | Unset` can be used in isinstance checks.
        """
        self.assertTrue(isinstance("text", str | Unset))
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance(Unset, Unset | int))
        self.assertFalse(isinstance(1.5, str | Unset))

    def testThreadSafety(self) -> None:
        """
        Concurrent construction always yields the same instance.
        """
        instances = []
        lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                instances.append(instance)

        threads = [Thread(target=worker) for _ in range(32)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(instances), 32)
        self.assertTrue(all(instance is Unset for instance in instances))

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-841
                pass


class TestHelpers(TestCase):
    """
    Test suite for coalesce, rename, mirror and ordinal.
    """

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testRenameDirect(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("alias")
        def function():
            pass

        self.assertEqual(function.__name__, "alias")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "length")

    def testMirrorFreezesContainers(self):
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")
            tags = mirror("tags")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._mapping = {"a": 1}
                self._tags = {"x"}
                self._label = "name"

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.mapping, MappingProxyType)
        self.assertEqual(holder.tags, frozenset({"x"}))
        self.assertEqual(holder.label, "name")
        with self.assertRaises(TypeError):
            holder.mapping["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testMirrorRejectsNonString(self):
        with self.assertRaises(TypeError):
            mirror(1)

    def testOrdinalWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(2), "second")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(13), "13th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(111), "111th")
        self.assertEqual(ordinal(101), "101st")


if __name__ == "__main__":
    unittest.main()
