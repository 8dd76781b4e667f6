"""
Tests for the internal helpers.

This module verifies:
- Unset sentinel guarantees (singleton, falsy, printable, sealed).
- coalesce() replacing only Unset.
- rename() in its direct and decorator forms.
- mirror() read-only properties returning container copies.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from cronos.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(Unset, UnsetType())
        self.assertIs(UnsetType(), UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values (None/False).
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        Unset can take part in isinstance() unions on either side.
        """
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("text", Unset | str))
        self.assertFalse(isinstance(1, str | Unset))

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 16)
        for instance in results:
            self.assertIs(instance, Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), rename() and mirror().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "x"))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertEqual(coalesce("", "x"), "")

    def testRenameDirect(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self) -> None:
        @rename("decorated")
        def function():
            pass

        self.assertEqual(function.__name__, "decorated")

    def testRenameRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(print, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsCopies(self) -> None:
        class Holder:
            items = mirror("items")
            pairs = mirror("pairs")
            label = mirror("label")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._pairs = (("a", 1),)
                self._label = "label"

        holder = Holder()
        items = holder.items
        items[1].append(4)
        self.assertEqual(holder.items, [1, [2, 3]])
        self.assertIsInstance(holder.pairs, tuple)
        self.assertEqual(holder.label, "label")

        with self.assertRaises(AttributeError):
            holder.items = []


if __name__ == "__main__":
    unittest.main()
