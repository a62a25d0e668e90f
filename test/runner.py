"""
Runner behavioral tests (dispatch, positional arity, delegation, shell mode).

Scope
- Validate handler dispatch in argv order and the final callback.
- Validate prompt handling (sys.argv, shell-like strings, token lists).
- Validate positional arity faults and delegated handler faults.
- Validate shell mode exit statuses.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (option, program, Program, invoke, OptionSpec).
"""

from __future__ import annotations

import io
import sys
import unittest
import warnings
from unittest import TestCase, mock

from rich.console import Console

from argvex import (
    OptionSpec,
    OptionTable,
    OneOf,
    UnsignedInteger,
    ExitStatus,
    Program,
    program,
    invoke,
    option,
    UnknownOptionError,
    MissingValueError,
    InvalidValueShapeError,
    UnexpectedPositionalError,
    MissingPositionalsError,
    DelegatedError,
    DelegatedWarning,
)


class TestProgramDispatch(TestCase):
    """Handlers, callback and prompt handling."""

    def setUp(self):
        self.calls = calls = []

        @option("-v", "--verbose", repeatable=True)
        def verbose():
            calls.append(("verbose",))

        @option("-o", "--output", takes_value=True)
        def output(value):
            calls.append(("output", value))

        self.verbose = verbose
        self.output = output

    def testHandlersRunInArgvOrder(self):
        results = []

        @program([self.verbose, self.output])
        def tool(result):
            results.append(result)

        status = invoke(tool, ["-v", "-o", "a.txt", "-vv", "in.txt"])
        self.assertEqual(status, ExitStatus.SUCCESS)
        self.assertEqual(self.calls, [
            ("verbose",), ("output", "a.txt"), ("verbose",), ("verbose",)
        ])
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].values["verbose"], 3)
        self.assertEqual(results[0].positionals, ("in.txt",))

    def testBundleFeedsHandlers(self):
        tool = Program([self.verbose, self.output])
        invoke(tool, ["-vvo", "result.txt", "input.txt"])
        self.assertEqual(self.calls, [("verbose",), ("verbose",), ("output", "result.txt")])

    def testStringPromptIsShellSplit(self):
        results = []
        tool = Program([self.output], results.append)
        invoke(tool, "-o 'my file.txt' input")
        self.assertEqual(results[0].values["output"], "my file.txt")
        self.assertEqual(results[0].positionals, ("input",))

    def testDefaultPromptReadsSysArgv(self):
        results = []
        tool = Program([self.verbose], results.append)
        with mock.patch.object(sys, "argv", ["tool", "-v", "x"]):
            invoke(tool)
        self.assertEqual(results[0].positionals, ("x",))

    def testEmptyTokensAreKept(self):
        results = []
        tool = Program([self.output], results.append)
        invoke(tool, ["-o", "", ""])
        self.assertEqual(results[0].values["output"], "")
        self.assertEqual(results[0].positionals, ("",))

    def testWithoutCallback(self):
        tool = Program(OptionTable(self.verbose))
        self.assertEqual(invoke(tool, ["-v"]), ExitStatus.SUCCESS)
        self.assertEqual(self.calls, [("verbose",)])

    def testPlainSpecsNeedNoHandler(self):
        results = []
        tool = Program([OptionSpec("--mode", takes_value=True, shape=OneOf("fast", "safe"))], results.append)
        invoke(tool, ["--mode", "fast"])
        self.assertEqual(results[0].get("mode"), "fast")

    def testNameDefaultsToCallback(self):
        @program([])
        def tool(result):
            pass

        self.assertEqual(tool.name, "tool")
        self.assertEqual(Program([], name="renamed").name, "renamed")

    def testPromptValidation(self):
        tool = Program([self.verbose])
        with self.assertRaises(TypeError):
            invoke(tool, 42)
        with self.assertRaises(TypeError):
            invoke(tool, ["-v", 1])

    def testInvokeRejectsNonPrograms(self):
        with self.assertRaises(TypeError):
            invoke(object())

    def testConstructionValidation(self):
        with self.assertRaises(TypeError):
            Program([], callback=42)
        with self.assertRaises(ValueError):
            Program([], name="  ")
        with self.assertRaises(TypeError):
            Program([], positionals="1")
        with self.assertRaises(TypeError):
            Program([], positionals=True)
        with self.assertRaises(ValueError):
            Program([], positionals=-1)
        with self.assertRaises(ValueError):
            Program([], positionals=range(2, 2))
        with self.assertRaises(ValueError):
            Program([], positionals=range(0, 4, 2))
        with self.assertRaises(TypeError):
            program([])(42)


class TestProgramFaults(TestCase):
    """Parse faults, positional arity and delegated handler faults."""

    def testParseFaultRaisedInLibraryMode(self):
        tool = Program([OptionSpec("-v")])
        with self.assertRaises(UnknownOptionError) as context:
            invoke(tool, ["-vx"])
        self.assertEqual(context.exception.token, "-vx")
        self.assertEqual(context.exception.options["prog"], tool.name)

    def testParseFaultSkipsHandlers(self):
        calls = []

        @option("-v")
        def verbose():
            calls.append("v")

        tool = Program([verbose, OptionSpec("--depth", takes_value=True, shape=UnsignedInteger)])
        with self.assertRaises(InvalidValueShapeError):
            invoke(tool, ["-v", "--depth", "01"])
        self.assertEqual(calls, [])

    def testMissingValueRaisedInLibraryMode(self):
        tool = Program([OptionSpec("--output", "-o", takes_value=True)])
        with self.assertRaises(MissingValueError) as context:
            invoke(tool, ["-o", "-v"])
        self.assertEqual(context.exception.status, ExitStatus.INVALID_ARGUMENT)

    def testExactPositionals(self):
        tool = Program([], positionals=1)
        self.assertEqual(tool.positionals, range(1, 2))
        self.assertEqual(invoke(tool, ["one"]), ExitStatus.SUCCESS)
        with self.assertRaises(UnexpectedPositionalError) as context:
            invoke(tool, ["one", "two", "three"])
        self.assertEqual(context.exception.token, "two")
        self.assertIn("second", context.exception.message)
        with self.assertRaises(MissingPositionalsError):
            invoke(tool, [])

    def testPositionalRange(self):
        tool = Program([], positionals=range(1, 3))
        invoke(tool, ["a"])
        invoke(tool, ["a", "b"])
        with self.assertRaises(UnexpectedPositionalError):
            invoke(tool, ["a", "b", "c"])

    def testNoPositionals(self):
        tool = Program([OptionSpec("-v")], positionals=0)
        with self.assertRaises(UnexpectedPositionalError):
            invoke(tool, ["-v", "stray"])

    def testAnyPositionalCount(self):
        tool = Program([])
        self.assertIsNone(tool.positionals)
        self.assertEqual(invoke(tool, ["a"] * 20), ExitStatus.SUCCESS)

    def testHandlerExceptionIsDelegated(self):
        @option("--depth", takes_value=True, shape=UnsignedInteger)
        def depth(value):
            raise ValueError("too deep: %s" % value)

        tool = Program([depth])
        with self.assertRaises(DelegatedError) as context:
            invoke(tool, ["a", "--depth", "9"])
        fault = context.exception
        self.assertIsInstance(fault.exception, ValueError)
        self.assertEqual(fault.token, "--depth")
        self.assertEqual(fault.index, 2)
        self.assertEqual(fault.status, ExitStatus.FAILURE)
        self.assertIn("too deep: 9", fault.hint)

    def testHandlerWarningIsDelegated(self):
        @option("-f", "--force")
        def force():
            warnings.warn("forcing is risky")

        results = []
        tool = Program([force], results.append)
        with self.assertWarns(DelegatedWarning) as context:
            status = invoke(tool, ["-f"])
        self.assertEqual(status, ExitStatus.SUCCESS)
        self.assertEqual(context.warning.hint, "forcing is risky")
        self.assertEqual(len(results), 1)


class TestShellMode(TestCase):
    """Printed faults and process exit statuses."""

    def setUp(self):
        self.console = Console(file=io.StringIO(), color_system=None, width=120)
        self.patch = mock.patch("argvex.faults.console", self.console)
        self.patch.start()
        self.addCleanup(self.patch.stop)

    def assertExits(self, tool, prompt, status):
        with self.assertRaises(SystemExit) as context:
            invoke(tool, prompt)
        self.assertEqual(context.exception.code, int(status))

    def testUnknownOptionExitsWithUsage(self):
        tool = Program([OptionSpec("-v")], name="tool", shell=True)
        self.assertExits(tool, ["-vx"], ExitStatus.USAGE)
        self.assertIn("[ tool — 11112 | Unknown Option ]", self.console.file.getvalue())

    def testParseFaultStopsBeforeCallback(self):
        results = []
        tool = Program([OptionSpec("-v")], results.append, shell=True)
        self.assertExits(tool, ["-"], ExitStatus.USAGE)
        self.assertEqual(results, [])

    def testMissingValueExitsWithInvalidArgument(self):
        tool = Program([OptionSpec("--depth", takes_value=True, shape=UnsignedInteger)], shell=True)
        self.assertExits(tool, ["--depth"], ExitStatus.INVALID_ARGUMENT)

    def testPositionalFaultExitsWithUsage(self):
        tool = Program([], positionals=0, shell=True)
        self.assertExits(tool, ["stray"], ExitStatus.USAGE)

    def testDelegatedErrorExitsWithFailure(self):
        @option("-x")
        def explode():
            raise RuntimeError("boom")

        tool = Program([explode], name="tool", shell=True, fancy=True)
        self.assertExits(tool, ["-x"], ExitStatus.FAILURE)
        self.assertIn("boom", self.console.file.getvalue())

    def testSuccessDoesNotExit(self):
        tool = Program([OptionSpec("-v")], shell=True)
        self.assertEqual(invoke(tool, ["-v"]), ExitStatus.SUCCESS)
        self.assertEqual(self.console.file.getvalue(), "")

    def testMissingValueIsReportedNotRaised(self):
        tool = Program([OptionSpec("-o", takes_value=True)], shell=True)
        with self.assertRaises(SystemExit):
            invoke(tool, ["-o"])
        self.assertIn("requires a value", self.console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
