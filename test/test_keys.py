"""
Key registry behavioral tests.

Scope
- Generated keys are unique per registry and skip keys already taken.
- Explicit keys owned by another long name raise DuplicateKeyError naming both parties.
- claim() records a key only when its block succeeds.

Conventions
- Test method names follow CamelCase per project convention.
"""
from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import KeyRegistry, DuplicateKeyError


class TestKeyRegistry(TestCase):

    def setUp(self):
        self.registry = KeyRegistry()

    def testGeneratedKeysAreDistinct(self):
        keys = [self.registry.assign(f"--param-{index}") for index in range(5)]
        self.assertEqual(keys, ["key_0", "key_1", "key_2", "key_3", "key_4"])

    def testRegistriesAreIndependent(self):
        self.registry.assign("--first")
        self.assertEqual(KeyRegistry().assign("--first"), "key_0")

    def testExplicitKeyIsRecorded(self):
        self.assertEqual(self.registry.assign("--name", "name"), "name")
        self.assertEqual(self.registry.owner("name"), "--name")
        self.assertIn("name", self.registry)

    def testExplicitKeyCollisionRaises(self):
        self.registry.assign("--first", "shared")
        with self.assertRaises(DuplicateKeyError) as context:
            self.registry.assign("--second", "shared")
        self.assertEqual(context.exception.key, "shared")
        self.assertEqual(context.exception.name, "--second")
        self.assertEqual(context.exception.owner, "--first")
        self.assertIn("--first", str(context.exception))
        self.assertIn("--second", str(context.exception))

    def testCollisionIsOrderIndependent(self):
        self.registry.assign("--second", "shared")
        with self.assertRaises(DuplicateKeyError) as context:
            self.registry.assign("--first", "shared")
        self.assertEqual(context.exception.owner, "--second")

    def testSameOwnerMayReassert(self):
        self.registry.assign("--name", "name")
        self.assertEqual(self.registry.assign("--name", "name"), "name")
        self.assertEqual(len(self.registry), 1)

    def testGeneratedKeySkipsExplicitOne(self):
        self.registry.assign("--first", "key_0")
        self.assertEqual(self.registry.assign("--second"), "key_1")

    def testExplicitKeyCannotStealGeneratedOne(self):
        self.registry.assign("--first")
        with self.assertRaises(DuplicateKeyError):
            self.registry.assign("--second", "key_0")

    def testClaimRecordsOnSuccess(self):
        with self.registry.claim("--name") as key:
            self.assertNotIn(key, self.registry)
        self.assertEqual(self.registry.owner(key), "--name")

    def testClaimDiscardsOnFailure(self):
        with self.assertRaises(RuntimeError):
            with self.registry.claim("--name", "name"):
                raise RuntimeError("declaration failed")
        self.assertNotIn("name", self.registry)
        self.assertEqual(len(self.registry), 0)
        self.assertEqual(self.registry.assign("--other", "name"), "name")

    def testKeyMustBeString(self):
        with self.assertRaises(TypeError):
            self.registry.assign("--name", 3)

    def testIteration(self):
        self.registry.assign("--first")
        self.registry.assign("--second", "two")
        self.assertEqual(list(self.registry), ["key_0", "two"])


if __name__ == "__main__":
    unittest.main()
