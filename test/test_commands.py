"""
Command declarations and command descriptors.

Scope
- @command metadata validation and attachment.
- CommandInfo index building and declaration errors.
- Per-command help block layout.
"""
import unittest
from unittest import TestCase

from cronos import Kind, Messages, Parameter, Shape, command
from cronos.commands import *
from cronos.formatting import format_option


@command("tool", descrs=("Tool does things",), notes=("A note", "Another note"))
class Tool:
    verbose = Parameter("-v", "--verbose", kind=Kind.BOOLEAN, descr="Be verbose")
    everything = Parameter("-a", "--all", kind=Kind.BOOLEAN, descr="Everything")
    token = Parameter("--token", hidden=True)

    def run(self, params):
        pass


class CommandSpecTest(TestCase):

    def testDecoratorAttachesSpec(self):
        spec = Tool.__command__
        self.assertIsInstance(spec, CommandSpec)
        self.assertEqual(spec.name, "tool")
        self.assertEqual(spec.descrs, ("Tool does things",))
        self.assertEqual(spec.notes, ("A note", "Another note"))

    def testSingleStringIsOneEntry(self):
        self.assertEqual(CommandSpec("x", "only one").descrs, ("only one",))

    def testInvalidNames(self):
        with self.assertRaises(TypeError):
            CommandSpec(1)
        for name in ("", "  ", "two words"):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    CommandSpec(name)

    def testInvalidTexts(self):
        with self.assertRaises(TypeError):
            CommandSpec("x", descrs=(1,))
        with self.assertRaises(TypeError):
            CommandSpec("x", notes=1)

    def testInvalidShape(self):
        with self.assertRaises(TypeError):
            CommandSpec("x", shape="positional")

    def testDecoratorRequiresClass(self):
        with self.assertRaises(TypeError):
            command("x")(lambda: None)

    def testCommandOfRequiresOwnDecoration(self):
        class Plain:
            pass

        class Derived(Tool):
            pass

        self.assertIs(command_of(Tool), Tool.__command__)
        with self.assertRaisesRegex(TypeError, "must be declared with @command"):
            command_of(Plain)
        with self.assertRaises(TypeError):
            command_of(Derived)


class CommandInfoTest(TestCase):

    def testIndex(self):
        info = CommandInfo(Tool())
        self.assertEqual(info.name, "tool")
        self.assertEqual(set(info.index), {"v", "verbose", "a", "all", "token"})
        self.assertIs(info.lookup("all").parameter, Tool.everything)
        self.assertIsNone(info.lookup("missing"))
        self.assertIn("verbose", info)
        self.assertEqual([binding.name for binding in info.bindings], ["verbose", "everything", "token"])

    def testInferredShape(self):
        self.assertIs(CommandInfo(Tool()).shape, Shape.POSITIONAL)

    def testEmptyNamesRejected(self):
        @command("broken")
        class Broken:
            nothing = Parameter()

        with self.assertRaisesRegex(ValueError, "'nothing' must declare at least one option"):
            CommandInfo(Broken())

    def testRequiredHiddenRejected(self):
        @command("broken")
        class Broken:
            secret = Parameter("--key", required=True, hidden=True)

        with self.assertRaisesRegex(ValueError, "required option --key of parameter 'secret' cannot be hidden"):
            CommandInfo(Broken())

    def testConflictingTokensRejected(self):
        @command("broken")
        class Broken:
            first = Parameter("-v", "--verbose", kind=bool)
            second = Parameter("-verbose", kind=bool)

        with self.assertRaisesRegex(ValueError, "option -verbose of parameter 'second' conflicts with parameter 'first'"):
            CommandInfo(Broken())

    def testLocalizedDeclarationErrors(self):
        @command("broken")
        class Broken:
            nothing = Parameter()

        messages = Messages({"CLI_PARAMETER_OPTIONS_EMPTY": "parâmetro {0} sem opções"})
        with self.assertRaisesRegex(ValueError, "parâmetro nothing sem opções"):
            CommandInfo(Broken(), messages=messages)

    def testExplicitShapeRequiresRun(self):
        @command("broken", shape=Shape.POSITIONAL)
        class Broken:
            pass

        with self.assertRaises(TypeError):
            CommandInfo(Broken())

    def testResetAndMissing(self):
        @command("commit")
        class Commit:
            message = Parameter("-m", required=True)

        info = CommandInfo(Commit())
        self.assertEqual([binding.name for binding in info.missing()], ["message"])
        info.lookup("m").assign("text")
        self.assertEqual(info.missing(), [])
        info.reset()
        self.assertEqual(len(info.missing()), 1)


class CommandHelpTest(TestCase):

    def testHelpWithoutNotes(self):
        self.assertEqual(
            CommandInfo(Tool()).help(),
            "Tool does things\n"
            "\n" + format_option(("-a", "--all"), "Everything") +
            "\n" + format_option(("-v", "--verbose"), "Be verbose")
        )

    def testHelpWithNotes(self):
        self.assertTrue(CommandInfo(Tool()).help(True).endswith("Be verbose\n\nA note\nAnother note"))

    def testHiddenOptionsAreOmitted(self):
        self.assertNotIn("--token", CommandInfo(Tool()).help(True))

    def testDescriptionsAreResolved(self):
        @command("tool", descrs=("TOOL_DESCR",))
        class Keyed:
            verbose = Parameter("-v", kind=bool, descr="TOOL_VERBOSE")

        messages = Messages({"TOOL_DESCR": "Resolved description", "TOOL_VERBOSE": "Resolved option"})
        rendered = CommandInfo(Keyed(), messages=messages).help()
        self.assertTrue(rendered.startswith("Resolved description\n"))
        self.assertIn("Resolved option", rendered)


if __name__ == "__main__":
    unittest.main()
