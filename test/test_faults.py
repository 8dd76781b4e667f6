"""
Usage-error rendering and triggering.
"""
import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from rich.console import Console
from rich.panel import Panel

from cronos.faults import *


def render(renderable):
    console = Console(color_system=None, force_terminal=False, width=200)
    with console.capture() as capture:
        console.print(renderable, soft_wrap=True)
    return capture.get()


class FaultCodeTest(TestCase):

    def testNormalize(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testCodesAreUnique(self):
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))


class CommandExceptionTest(TestCase):

    def testMessageIsStr(self):
        self.assertEqual(str(UnknownOptionError("unknown option: 'x'")), "unknown option: 'x'")

    def testRenderOneLine(self):
        self.assertEqual(
            render(UnknownOptionError("unknown option: 'x'")),
            "[ cronos — 11112 | unknown option ] unknown option: 'x'\n"
        )

    def testRenderFancy(self):
        fault = MissingRequiredError("required parameter 'message' is missing", fancy=True, hint="pass -m")
        self.assertIsInstance(fault.__rich__(), Panel)
        output = render(fault)
        self.assertIn("required parameter 'message' is missing", output)
        self.assertIn("pass -m", output)

    def testReplaceKeepsMessageAndCause(self):
        fault = DelegatedCommandError("command 'x' failed: boom")
        fault.__cause__ = RuntimeError("boom")
        clone = fault.__replace__(shell=False)
        self.assertIsInstance(clone, DelegatedCommandError)
        self.assertEqual(clone.message, fault.message)
        self.assertIs(clone.__cause__, fault.__cause__)
        self.assertFalse(clone.options["shell"])


class TriggerTest(TestCase):

    def testRaiseWhenNotShell(self):
        with self.assertRaises(InvalidValueError) as context:
            trigger(InvalidValueError("bad"), shell=False)
        self.assertEqual(context.exception.options["shell"], False)

    def testExitWhenShell(self):
        with redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as context:
                trigger(NoCommandError("no command has been registered"), shell=True)
        self.assertEqual(context.exception.code, EXIT_FAILURE)
        self.assertIn("no command has been registered", stderr.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


if __name__ == "__main__":
    unittest.main()
