"""
Interface parsing and dispatch behavioral tests.

Scope
- Command selection, global help, unknown commands.
- Option forms (--name=value, --name value), switch semantics, boolean/number grammar.
- --help precedence, positional arity, extra tokens, unknown flags.
- Accessors from inside callbacks, including the wrong-type fault.
- run() as the single place that exits the process.

Conventions
- Test method names follow CamelCase per project convention.
- Output streams are captured with StringIO; no process is forked.
"""
import unittest
from io import StringIO
from unittest import TestCase

from ccli import (
    Interface,
    Status,
    ValueKind,
    UnknownCommandError,
    FlagAssignmentError,
    OptionValueRequiredError,
    InvalidValueError,
    MissingArgumentsError,
    AccessorTypeError,
    FaultCode,
)


class TestInterface(TestCase):

    def setUp(self):
        self.stdout = StringIO()
        self.stderr = StringIO()
        self.cli = Interface("prog", descr="test program", stream=self.stdout, errstream=self.stderr)
        self.received = {}

        @self.cli.command("hello", descr="say hello")
        def hello(interface):
            self.received["number"] = interface.get_int("--number")
            self.received["verbose"] = interface.get_flag("--verbose")
            return "hello"

        self.hello = hello
        hello.option("--number", "-n", kind=ValueKind.NUMBER, default=3)
        hello.option("--verbose", "-v")

        @self.cli.command("copy", descr="copy things")
        def copy(interface):
            self.received["source"] = interface.get_arg_string(0)
            self.received["count"] = interface.get_arg_number("count")
            self.received["force"] = interface.get_boolean("--force")
            self.received["label"] = interface.get_string("--label")

        copy.option("--force", "-f", kind=ValueKind.BOOLEAN)
        copy.option("--label", kind=ValueKind.STRING)
        copy.argument("source", kind=ValueKind.STRING)
        copy.argument("count", kind=ValueKind.NUMBER)

    # --- selection ---

    def testNoCommandPrintsGlobalHelp(self):
        outcome = self.cli.invoke([])
        self.assertIs(outcome.status, Status.HELP)
        self.assertEqual(outcome.exitcode, 0)
        self.assertEqual(self.received, {})
        self.assertIn("hello", self.stdout.getvalue())
        self.assertIn("copy", self.stdout.getvalue())

    def testLeadingHelpPrintsGlobalHelp(self):
        outcome = self.cli.invoke(["--help", "hello"])
        self.assertIs(outcome.status, Status.HELP)
        self.assertIsNone(outcome.command)
        self.assertEqual(self.received, {})

    def testUnknownCommandFails(self):
        outcome = self.cli.invoke(["helo"])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertEqual(outcome.exitcode, 1)
        self.assertIsInstance(outcome.fault, UnknownCommandError)
        self.assertIs(outcome.fault.code, FaultCode.UNKNOWN_COMMAND)
        self.assertIn("hello", outcome.fault.options["suggestions"])
        errors = self.stderr.getvalue()
        self.assertIn("Error: unrecognized command 'helo'", errors)
        self.assertIn("copy", errors)

    def testStringArgvIsShellSplit(self):
        outcome = self.cli.invoke("hello --number=7")
        self.assertIs(outcome.status, Status.DISPATCHED)
        self.assertEqual(outcome.result, "hello")
        self.assertIs(self.cli.invoked, self.hello)

    def testNonStringTokensRejected(self):
        with self.assertRaises(TypeError):
            self.cli.invoke(["hello", 7])

    # --- options ---

    def testNumberRoundTrip(self):
        self.cli.invoke(["hello", "--number=5"])
        self.assertEqual(self.received["number"], (5, True))
        self.cli.invoke(["hello"])
        self.assertEqual(self.received["number"], (3, True))

    def testSpacedAndShortForms(self):
        self.cli.invoke(["hello", "--number", "9"])
        self.assertEqual(self.received["number"], (9, True))
        self.cli.invoke(["hello", "-n=4"])
        self.assertEqual(self.received["number"], (4, True))
        self.cli.invoke(["hello", "-n", "-2"])
        self.assertEqual(self.received["number"], (-2, True))

    def testSwitchBindsTrue(self):
        self.cli.invoke(["hello", "--verbose"])
        self.assertEqual(self.received["verbose"], (True, True))
        self.cli.invoke(["hello"])
        self.assertEqual(self.received["verbose"], (False, False))

    def testSwitchRejectsInlineValue(self):
        outcome = self.cli.invoke(["hello", "--verbose=yes"])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertIsInstance(outcome.fault, FlagAssignmentError)
        self.assertIn("doesn't take a parameter", str(outcome.fault))
        self.assertNotIn("verbose", self.received)

    def testBooleanGrammar(self):
        for raw, expected in (("true", True), ("T", True), ("false", False), ("F", False)):
            with self.subTest(raw=raw):
                outcome = self.cli.invoke(["copy", "--force=%s" % raw, "a", "1"])
                self.assertIs(outcome.status, Status.DISPATCHED)
                self.assertEqual(self.received["force"], (expected, True))

    def testBooleanRejectsYes(self):
        outcome = self.cli.invoke(["copy", "--force=yes", "a", "1"])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertIsInstance(outcome.fault, InvalidValueError)
        self.assertIn("Error:", self.stderr.getvalue())
        self.assertNotIn("source", self.received)

    def testNumberRejectsGarbage(self):
        for raw in ("abc", "-", ".", "-.", "5x"):
            with self.subTest(raw=raw):
                outcome = self.cli.invoke(["hello", "--number=%s" % raw])
                self.assertIsInstance(outcome.fault, InvalidValueError)

    def testOverflowingNumberFailsTheRun(self):
        outcome = self.cli.invoke(["hello", "--number=" + "9" * 400])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertIsInstance(outcome.fault, InvalidValueError)
        self.assertNotIn("number", self.received)
        self.assertIn("out of range", str(outcome.fault))
        self.assertIn("Error:", self.stderr.getvalue())

    def testNumberGrammarAcceptsDecimals(self):
        self.cli.invoke(["copy", "a", ".5"])
        self.assertEqual(self.received["count"], (0.5, True))
        self.cli.invoke(["copy", "a", "-.5"])
        self.assertEqual(self.received["count"], (-0.5, True))

    def testValueRequired(self):
        outcome = self.cli.invoke(["copy", "--label"])
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)
        # the next token is an option spelling of this command, not a value
        outcome = self.cli.invoke(["copy", "--label", "--force=t", "a", "1"])
        self.assertIsInstance(outcome.fault, OptionValueRequiredError)

    def testStringValueVerbatim(self):
        self.cli.invoke(["copy", "--label=a=b c", "src", "2"])
        self.assertEqual(self.received["label"], ("a=b c", True))
        self.cli.invoke(["copy", "--label=", "src", "2"])
        self.assertEqual(self.received["label"], ("", True))

    def testUnknownFlagsAreSkipped(self):
        outcome = self.cli.invoke(["hello", "--unknown", "--other=1", "--number=8"])
        self.assertIs(outcome.status, Status.DISPATCHED)
        self.assertEqual(self.received["number"], (8, True))

    def testValuesResetBetweenRuns(self):
        self.cli.invoke(["hello", "--number=5", "-v"])
        self.cli.invoke(["hello"])
        self.assertEqual(self.received["number"], (3, True))
        self.assertEqual(self.received["verbose"], (False, False))

    # --- help precedence ---

    def testCommandHelpWinsOverOtherFlags(self):
        outcome = self.cli.invoke(["hello", "--number=5", "--help"])
        self.assertIs(outcome.status, Status.HELP)
        self.assertIs(outcome.command, self.hello)
        self.assertEqual(self.received, {})
        self.assertIn("usage: prog hello [OPTIONS]", self.stdout.getvalue())

    def testCommandHelpSkipsArityCheck(self):
        outcome = self.cli.invoke(["copy", "-h"])
        self.assertIs(outcome.status, Status.HELP)

    def testInvalidOptionBeforeHelpStillFails(self):
        outcome = self.cli.invoke(["hello", "--number=x", "--help"])
        self.assertIs(outcome.status, Status.FAILED)

    # --- positionals ---

    def testArityTooFew(self):
        outcome = self.cli.invoke(["copy", "only"])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertIsInstance(outcome.fault, MissingArgumentsError)
        self.assertIn("requires 2 arguments, 1 given", str(outcome.fault))
        errors = self.stderr.getvalue()
        self.assertIn("usage: prog copy [OPTIONS] <source> <count>", errors)
        self.assertIn("requires 2 arguments, 1 given", errors)

    def testArityExactBindsInOrder(self):
        outcome = self.cli.invoke(["copy", "--force", "f", "from.txt", "12"])
        self.assertIs(outcome.status, Status.DISPATCHED)
        self.assertEqual(self.received["source"], ("from.txt", True))
        self.assertEqual(self.received["count"], (12.0, True))
        self.assertEqual(self.received["force"], (False, True))

    def testArgumentTypeChecked(self):
        outcome = self.cli.invoke(["copy", "from.txt", "twelve"])
        self.assertIsInstance(outcome.fault, InvalidValueError)
        self.assertIn("argument 'count'", str(outcome.fault))

    def testExtraTokensIgnored(self):
        with self.assertLogs("ccli", level="DEBUG") as logs:
            outcome = self.cli.invoke(["copy", "a", "1", "extra", "more"])
        self.assertIs(outcome.status, Status.DISPATCHED)
        self.assertTrue(any("extra token" in line for line in logs.output))

    def testOptionsStopAtFirstPositional(self):
        # flags after the first positional are positional tokens, not options
        outcome = self.cli.invoke(["copy", "a", "--force=t"])
        self.assertIsInstance(outcome.fault, InvalidValueError)

    # --- accessors ---

    def testWrongAccessorFailsTheRun(self):
        @self.cli.command("broken")
        def broken(interface):
            interface.get_string("--number")

        broken.option("--number", kind=ValueKind.NUMBER, default=1)
        outcome = self.cli.invoke(["broken"])
        self.assertIs(outcome.status, Status.FAILED)
        self.assertIsInstance(outcome.fault, AccessorTypeError)
        self.assertIn("Error: option '--number' is NUMBER, not STRING", self.stderr.getvalue())

    def testAccessorsOutsideDispatchRaise(self):
        with self.assertRaises(RuntimeError):
            self.cli.get_int("--number")

    # --- run ---

    def testRunExitsOnFailure(self):
        with self.assertRaises(SystemExit) as context:
            self.cli.run(["nope"])
        self.assertEqual(context.exception.code, 1)

    def testRunReturnsOnSuccess(self):
        outcome = self.cli.run(["hello"])
        self.assertIs(outcome.status, Status.DISPATCHED)
        self.assertTrue(outcome)


if __name__ == '__main__':
    unittest.main()
