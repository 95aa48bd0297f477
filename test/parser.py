"""
Parser tests.

Scope
- Declarations: duplicates, positional ordering, lifecycle guards.
- Parse pass: switches, bundles, "--", positionals, outcomes and faults.
- Handles: reading values before and after parse().

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from sextant import *


class TestExampleProgram(TestCase):
    """Parsing with the four-argument example program."""

    def setUp(self):
        self.parser = Parser("test", "A test program to test option parsing.")
        self.filename = self.parser.positional("filename", "The name of the file to ignore")
        self.stuff = self.parser.optional("stuff", "Other stuff", default="d")
        self.some_option = self.parser.option("some-option", "s", "Some option")
        self.a_flag = self.parser.flag("a-flag", "f", "A very important flag")

    def testFlagAndRequiredPositional(self):
        self.assertEqual(self.parser.parse(["-f", "in.txt"]), Parsed())
        self.assertIs(self.a_flag.value, True)
        self.assertEqual(self.filename.value, "in.txt")
        self.assertEqual(self.stuff.value, "d")
        self.assertIsNone(self.some_option.value)

    def testOptionalPositionalTakesSecondToken(self):
        self.assertIsInstance(self.parser.parse(["in.txt", "more"]), Parsed)
        self.assertEqual(self.filename.value, "in.txt")
        self.assertEqual(self.stuff.value, "more")
        self.assertIs(self.a_flag.value, False)

    def testLongOptionTakesNextTokenEvenIfDashed(self):
        self.assertIsInstance(self.parser.parse(["--some-option", "-x", "in.txt"]), Parsed)
        self.assertEqual(self.some_option.value, "-x")
        self.assertEqual(self.filename.value, "in.txt")

    def testShortOptionInBundle(self):
        self.assertIsInstance(self.parser.parse(["-fs", "value", "in.txt"]), Parsed)
        self.assertIs(self.a_flag.value, True)
        self.assertEqual(self.some_option.value, "value")

    def testFlagAfterOptionInBundle(self):
        self.assertIsInstance(self.parser.parse(["-sf", "val", "in.txt"]), Parsed)
        self.assertEqual(self.some_option.value, "val")
        self.assertIs(self.a_flag.value, True)
        self.assertEqual(self.filename.value, "in.txt")

    def testDoubleDashMakesDashedTokensPositional(self):
        self.assertIsInstance(self.parser.parse(["--", "-f"]), Parsed)
        self.assertEqual(self.filename.value, "-f")
        self.assertIs(self.a_flag.value, False)

    def testSecondDoubleDashIsPositional(self):
        self.assertIsInstance(self.parser.parse(["--", "a", "--"]), Parsed)
        self.assertEqual(self.filename.value, "a")
        self.assertEqual(self.stuff.value, "--")

    def testBareDashIsIgnored(self):
        self.assertIsInstance(self.parser.parse(["-", "in.txt"]), Parsed)
        self.assertEqual(self.filename.value, "in.txt")

    def testTooManyArguments(self):
        outcome = self.parser.parse(["in.txt", "more", "extra"])
        self.assertIsInstance(outcome, Failed)
        self.assertIsInstance(outcome.fault, UnexpectedPositionalError)
        self.assertEqual(outcome.message, "Too many arguments.")
        self.assertEqual(outcome.fault.code, FaultCode.UNEXPECTED_POSITIONAL)
        self.assertEqual(outcome.fault.options["input"], "extra")
        self.assertEqual(outcome.fault.options["index"], 3)

    def testMissingRequiredPositional(self):
        outcome = self.parser.parse(["-f"])
        self.assertIsInstance(outcome, Failed)
        self.assertIsInstance(outcome.fault, MissingPositionalError)
        self.assertEqual(outcome.message, "Missing value for filename.")

    def testUnknownLongOption(self):
        outcome = self.parser.parse(["--nope", "in.txt"])
        self.assertIsInstance(outcome.fault, UnknownSwitchError)
        self.assertEqual(outcome.message, "Unknown option --nope")
        self.assertEqual(outcome.fault.code, FaultCode.UNKNOWN_SWITCH)

    def testUnknownShortOption(self):
        outcome = self.parser.parse(["-fz", "in.txt"])
        self.assertIsInstance(outcome.fault, UnknownSwitchError)
        self.assertEqual(outcome.message, "Unknown short option -z")
        self.assertEqual(outcome.fault.code, FaultCode.UNKNOWN_SHORT_SWITCH)

    def testLongOptionRequiresValue(self):
        outcome = self.parser.parse(["in.txt", "--some-option"])
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        self.assertEqual(outcome.message, "Option --some-option requires an argument.")

    def testShortOptionRequiresValue(self):
        outcome = self.parser.parse(["in.txt", "-s"])
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        self.assertEqual(outcome.message, "Option -s requires an argument.")

    def testFaultCarriesHint(self):
        outcome = self.parser.parse([])
        self.assertEqual(outcome.fault.hint, "See test --help for more information")
        self.assertIs(outcome.fault.options["tool"], self.parser)

    def testFailedParseKeepsEarlierValues(self):
        outcome = self.parser.parse(["-f", "--nope"])
        self.assertIsInstance(outcome, Failed)
        self.assertIs(self.a_flag.value, True)

    def testHelpStopsParsing(self):
        outcome = self.parser.parse(["-f", "--help", "--nope"])
        self.assertIsInstance(outcome, HelpRequested)
        self.assertEqual(outcome.text, self.parser.usage())
        self.assertIs(self.a_flag.value, True)

    def testHelpInsideBundle(self):
        self.assertIsInstance(self.parser.parse(["-fh"]), HelpRequested)

    def testHelpAfterDoubleDashIsPositional(self):
        self.assertIsInstance(self.parser.parse(["--", "-h"]), Parsed)
        self.assertEqual(self.filename.value, "-h")

    def testRepeatedOptionWarnsAndLastValueWins(self):
        with self.assertWarns(RepeatedOptionWarning):
            outcome = self.parser.parse(["-s", "one", "--some-option", "two", "in.txt"])
        self.assertIsInstance(outcome, Parsed)
        self.assertEqual(self.some_option.value, "two")


class TestBundling(TestCase):
    """Short switch clusters."""

    def setUp(self):
        self.parser = Parser("prog")
        self.a = self.parser.flag("alpha", "a")
        self.b = self.parser.flag("beta", "b")
        self.c = self.parser.option("gamma", "c")

    def testBundledFlagsThenOption(self):
        self.assertIsInstance(self.parser.parse(["-abc", "val"]), Parsed)
        self.assertIs(self.a.value, True)
        self.assertIs(self.b.value, True)
        self.assertEqual(self.c.value, "val")

    def testBundleContinuesAfterOption(self):
        self.assertIsInstance(self.parser.parse(["-cab", "val"]), Parsed)
        self.assertEqual(self.c.value, "val")
        self.assertIs(self.a.value, True)
        self.assertIs(self.b.value, True)

    def testAttachedValueIsReadAsSwitches(self):
        outcome = self.parser.parse(["-cvalue", "x"])
        self.assertIsInstance(outcome.fault, UnknownSwitchError)
        self.assertEqual(outcome.message, "Unknown short option -v")
        self.assertEqual(self.c.value, "x")

    def testAttachedValueWithoutNextToken(self):
        outcome = self.parser.parse(["-cvalue"])
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        self.assertEqual(outcome.message, "Option -c requires an argument.")


class TestPositionals(TestCase):
    """Optional and variadic positionals."""

    def testRestCollectsRemainingTokens(self):
        parser = Parser("prog")
        source = parser.positional("source")
        files = parser.rest("files")
        self.assertIsInstance(parser.parse(["a", "b", "-", "c"]), Parsed)
        self.assertEqual(source.value, "a")
        self.assertEqual(files.value, ("b", "c"))

    def testRestAcceptsNothing(self):
        parser = Parser("prog")
        files = parser.rest("files")
        self.assertIsInstance(parser.parse([]), Parsed)
        self.assertEqual(files.value, ())

    def testRestAtLeastOne(self):
        parser = Parser("prog")
        parser.positional("source")
        parser.rest("files", at_least_one=True)
        outcome = parser.parse(["a"])
        self.assertIsInstance(outcome.fault, MissingPositionalError)
        self.assertEqual(outcome.message, "Missing value for files.")

    def testRestInterleavedWithSwitches(self):
        parser = Parser("prog")
        files = parser.rest("files", at_least_one=True)
        verbose = parser.flag("verbose", "v")
        self.assertIsInstance(parser.parse(["a", "-v", "b"]), Parsed)
        self.assertEqual(files.value, ("a", "b"))
        self.assertIs(verbose.value, True)

    def testOptionalWithoutDefaultIsNone(self):
        parser = Parser("prog")
        stuff = parser.optional("stuff")
        self.assertIsInstance(parser.parse([]), Parsed)
        self.assertIsNone(stuff.value)

    def testOptionDefault(self):
        parser = Parser("prog")
        level = parser.option("level", default="info")
        self.assertIsInstance(parser.parse([]), Parsed)
        self.assertEqual(level.value, "info")

    def testNoPositionalsRejectsAnyToken(self):
        parser = Parser("prog")
        self.assertIsInstance(parser.parse(["x"]).fault, UnexpectedPositionalError)


class TestDeclarations(TestCase):
    """Declaration rules and lifecycle guards."""

    def setUp(self):
        self.parser = Parser("prog")

    def testDuplicateLongName(self):
        self.parser.flag("verbose")
        with self.assertRaises(DuplicatedNameError) as context:
            self.parser.option("verbose")
        self.assertIsInstance(context.exception, ValueError)
        self.assertEqual(str(context.exception), "option --verbose has already been defined")

    def testDuplicateShortName(self):
        self.parser.flag("verbose", "v")
        with self.assertRaisesRegex(DuplicatedNameError, "option -v has already been defined"):
            self.parser.flag("version", "v")

    def testHelpIsReserved(self):
        with self.assertRaises(DuplicatedNameError):
            self.parser.flag("help")
        with self.assertRaises(DuplicatedNameError):
            self.parser.option("host", "h")

    def testRejectedDeclarationReleasesSlot(self):
        first = self.parser.flag("verbose")
        with self.assertRaises(DuplicatedNameError):
            self.parser.flag("verbose")
        self.assertEqual(self.parser.flag("quiet").slot, first.slot + 1)

    def testInvalidNameIsRejected(self):
        with self.assertRaises(ValueError):
            self.parser.flag("--verbose")
        with self.assertRaises(ValueError):
            self.parser.positional("two words")
        with self.assertRaises(TypeError):
            self.parser.option("level", default=3)

    def testPositionalAfterOptionalIsRejected(self):
        self.parser.optional("stuff")
        with self.assertRaises(MisplacedPositionalError):
            self.parser.positional("filename")

    def testPositionalAfterRestIsRejected(self):
        self.parser.rest("files")
        with self.assertRaises(MisplacedPositionalError):
            self.parser.optional("stuff")

    def testRequiredPositionalsMayFollowEachOther(self):
        self.parser.positional("source")
        self.parser.positional("target")
        self.parser.rest("extra")
        self.assertEqual([p.name for p in self.parser.positionals], ["source", "target", "extra"])

    def testSwitchesKeepDeclarationOrder(self):
        self.parser.flag("zeta")
        self.parser.option("alpha")
        self.assertEqual(list(self.parser.switches), ["help", "zeta", "alpha"])

    def testParseTwice(self):
        self.parser.parse([])
        with self.assertRaises(ReparseError):
            self.parser.parse([])

    def testDeclareAfterParse(self):
        self.parser.parse([])
        with self.assertRaises(ReparseError):
            self.parser.flag("late")
        self.assertTrue(self.parser.parsed)

    def testPrematureAccess(self):
        verbose = self.parser.flag("verbose")
        with self.assertRaises(PrematureAccessError):
            verbose.value
        self.assertIn("<unparsed>", repr(verbose))

    def testHandleConversions(self):
        name = self.parser.option("name", "n")
        verbose = self.parser.flag("verbose", "v")
        self.parser.parse(["-n", "sextant"])
        self.assertEqual(str(name), "sextant")
        self.assertFalse(verbose)
        self.assertEqual(repr(name), "handle(slot=1, value='sextant')")

    def testParseRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            self.parser.parse("-v")
        with self.assertRaises(TypeError):
            self.parser.parse(["-v", 1])
        self.assertFalse(self.parser.parsed)

    def testFallbackRules(self):
        with self.assertRaises(TypeError):
            self.parser.fallback("not callable")
        handler = self.parser.fallback(print)
        self.assertIs(handler, print)
        with self.assertRaises(TypeError):
            self.parser.fallback(print)


if __name__ == "__main__":
    unittest.main()
