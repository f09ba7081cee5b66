"""
Parameter handles behavioral tests.

Scope
- Validate the value shape of every kind before and after assignment.
- Validate converters (integer coercion, custom converters, option membership).
- Validate single assignment and idempotent default filling.

Conventions
- Test method names follow CamelCase per project convention.
- Handles are built directly; providers are covered in test_providers.
"""
from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import (
    FlagDefinition,
    StringDefinition,
    StringListDefinition,
    IntegerDefinition,
    OptionDefinition,
    Parameter,
    ParameterKind,
    FlagParameter,
    StringParameter,
    StringListParameter,
    IntegerParameter,
    OptionParameter,
    ConversionError,
    ReuseError,
)
from argosy.utils import Unset


class TestParameterConstruction(TestCase):

    def testBaseCannotBeInstantiated(self):
        with self.assertRaises(TypeError):
            Parameter(StringDefinition("--name"), "key_0")

    def testDefinitionKindMustMatch(self):
        with self.assertRaises(TypeError):
            FlagParameter(StringDefinition("--name"), "key_0")

    def testKeyMustBeString(self):
        with self.assertRaises(TypeError):
            StringParameter(StringDefinition("--name"), 0)

    def testConverterMustBeCallable(self):
        with self.assertRaises(TypeError):
            StringParameter(StringDefinition("--name"), "key_0", "upper")

    def testDefinitionFieldsAreExposed(self):
        definition = StringDefinition("--name", "-n", "who to greet", required=True)
        parameter = StringParameter(definition, "key_0")
        self.assertIs(parameter.definition, definition)
        self.assertEqual(parameter.key, "key_0")
        self.assertEqual(parameter.kind, ParameterKind.STRING)
        self.assertEqual(parameter.long_name, "--name")
        self.assertEqual(parameter.short_name, "-n")
        self.assertEqual(parameter.description, "who to greet")
        self.assertTrue(parameter.required)
        self.assertIsNone(parameter.converter)

    def testRepr(self):
        parameter = StringParameter(StringDefinition("--name"), "key_0")
        parameter._set_value("Alice")
        self.assertEqual(
            repr(parameter),
            "string-parameter(kind=<ParameterKind.STRING: 'string'>, key='key_0', long_name='--name', value='Alice')"
        )


class TestParameterValues(TestCase):

    def testFlagUnassignedIsFalse(self):
        parameter = FlagParameter(FlagDefinition("--verbose"), "key_0")
        self.assertFalse(parameter.assigned)
        self.assertIs(parameter.value, False)

    def testFlagAssigned(self):
        parameter = FlagParameter(FlagDefinition("--verbose"), "key_0")
        parameter._set_value(True)
        self.assertTrue(parameter.assigned)
        self.assertIs(parameter.value, True)

    def testStringUnassignedIsNone(self):
        parameter = StringParameter(StringDefinition("--name"), "key_0")
        self.assertIsNone(parameter.value)

    def testStringListKeepsOrder(self):
        parameter = StringListParameter(StringListDefinition("--tag"), "key_0")
        self.assertEqual(parameter.value, ())
        parameter._set_value(["b", "a", "b"])
        self.assertEqual(parameter.value, ("b", "a", "b"))

    def testStringListConverterAppliesPerItem(self):
        parameter = StringListParameter(StringListDefinition("--tag"), "key_0", str.upper)
        parameter._set_value(["a", "b"])
        self.assertEqual(parameter.value, ("A", "B"))

    def testIntegerConversion(self):
        parameter = IntegerParameter(IntegerDefinition("--count"), "key_0")
        self.assertIs(parameter.converter, int)
        parameter._set_value("42")
        self.assertEqual(parameter.value, 42)

    def testIntegerConversionFailure(self):
        parameter = IntegerParameter(IntegerDefinition("--count"), "key_0")
        with self.assertRaises(ConversionError) as context:
            parameter._set_value("many")
        self.assertEqual(context.exception.name, "--count")
        self.assertEqual(context.exception.value, "many")
        self.assertFalse(parameter.assigned)

    def testOptionRejectsUnknownValue(self):
        parameter = OptionParameter(OptionDefinition("--level", options=["low", "high"]), "key_0")
        self.assertEqual(parameter.options, ("low", "high"))
        with self.assertRaises(ConversionError):
            parameter._set_value("medium")
        parameter._set_value("high")
        self.assertEqual(parameter.value, "high")

    def testCustomConverter(self):
        parameter = StringParameter(StringDefinition("--name"), "key_0", str.title)
        parameter._set_value("alice")
        self.assertEqual(parameter.value, "Alice")

    def testSecondWriteRaises(self):
        parameter = StringParameter(StringDefinition("--name"), "key_0")
        parameter._set_value("Alice")
        with self.assertRaises(ReuseError):
            parameter._set_value("Bob")
        self.assertEqual(parameter.value, "Alice")


class TestDefaultFill(TestCase):

    def testDefaultFillsUnassigned(self):
        definition = IntegerDefinition("--count", default=3)
        parameter = IntegerParameter(definition, "key_0")
        parameter._fill_default(definition.default)
        self.assertTrue(parameter.assigned)
        self.assertEqual(parameter.value, 3)

    def testDefaultFillIsIdempotent(self):
        definition = StringListDefinition("--tag", default=["x"])
        parameter = StringListParameter(definition, "key_0")
        parameter._fill_default(definition.default)
        parameter._fill_default(definition.default)
        self.assertEqual(parameter.value, ("x",))

    def testDefaultFillKeepsRealValue(self):
        definition = StringDefinition("--name", default="nobody")
        parameter = StringParameter(definition, "key_0")
        parameter._set_value("Alice")
        parameter._fill_default(definition.default)
        self.assertEqual(parameter.value, "Alice")

    def testMissingDefaultIsNoop(self):
        parameter = StringParameter(StringDefinition("--name"), "key_0")
        parameter._fill_default(Unset)
        self.assertFalse(parameter.assigned)

    def testFalseFlagDefaultAssigns(self):
        definition = FlagDefinition("--verbose", default=False)
        parameter = FlagParameter(definition, "key_0")
        parameter._fill_default(definition.default)
        self.assertTrue(parameter.assigned)
        self.assertIs(parameter.value, False)

    def testDefaultBypassesConverter(self):
        definition = IntegerDefinition("--mask", default=16)
        parameter = IntegerParameter(definition, "key_0", lambda raw: int(raw, 16))
        parameter._fill_default(definition.default)
        self.assertEqual(parameter.value, 16)

    def testRawValueUsesConverter(self):
        parameter = IntegerParameter(IntegerDefinition("--mask", default=16), "key_0", lambda raw: int(raw, 16))
        parameter._set_value("ff")
        self.assertEqual(parameter.value, 255)

    def testAssignStoresConvertedValue(self):
        parameter = IntegerParameter(IntegerDefinition("--count"), "key_0")
        parameter._assign(7)
        self.assertEqual(parameter.value, 7)
        with self.assertRaises(ReuseError):
            parameter._assign(8)


if __name__ == "__main__":
    unittest.main()
