"""
Commands module behavioral tests (resolution, inheritance, faults, usage).

Scope
- Validate option value consumption (inline, spaced, dash-prefixed next token, flags).
- Validate subcommand descent and option inheritance through the shared scope.
- Validate unknown option/subcommand handling in shell, non-shell and fallback modes.
- Validate the generated usage text.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured by redirecting standard output.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase

from clitree import Command, Option, UnknownOptionError, UnknownSubcommandError, FaultCode


def _capture(command, prompt):
    with contextlib.redirect_stdout(buffer := io.StringIO()):
        command.__invoke__(prompt)
    return buffer.getvalue()


class TestOptionResolution(TestCase):
    """Value consumption rules for options and flags."""

    def setUp(self):
        self.calls = []
        self.root = Command("tool", self.calls.append)
        self.url = self.root.option("url", "u", "https://example.com", "Remote address.")
        self.display = self.root.option("name", "n", "anonymous", "Display name.")
        self.verbose = self.root.option("verbose", "V", "", "Talk more.", flag=True)
        self.child = self.root.command("sync", self.calls.append)

    def testInlineValue(self):
        _capture(self.root, ["--url=https://example.org"])
        self.assertEqual(self.url.value, "https://example.org")
        self.assertTrue(self.url.present)
        self.assertEqual(self.calls, [self.root])

    def testInlineValueLeavesNextTokenAlone(self):
        _capture(self.root, ["--url=one", "sync"])
        self.assertEqual(self.url.value, "one")
        self.assertEqual(self.calls, [self.child])

    def testSpacedValue(self):
        _capture(self.root, ["--url", "one", "sync"])
        self.assertEqual(self.url.value, "one")
        self.assertEqual(self.calls, [self.child])

    def testAliasInlineAndSpaced(self):
        _capture(self.root, ["-u=one", "-n", "two"])
        self.assertEqual(self.url.value, "one")
        self.assertEqual(self.display.value, "two")

    def testDashPrefixedNextTokenIsConsumedWithoutValue(self):
        _capture(self.root, ["--url", "--name=two"])
        self.assertEqual(self.url.value, "https://example.com")
        self.assertTrue(self.url.present)
        # the slot was swallowed, so --name never got parsed
        self.assertEqual(self.display.value, "anonymous")
        self.assertFalse(self.display.present)
        self.assertEqual(self.calls, [self.root])

    def testValueOptionAtEndKeepsDefault(self):
        _capture(self.root, ["--url"])
        self.assertEqual(self.url.value, "https://example.com")
        self.assertTrue(self.url.present)

    def testSeveralEqualSignsFallBackToNextToken(self):
        _capture(self.root, ["--url=a=b", "c"])
        self.assertEqual(self.url.value, "c")

    def testEmptyInlineValue(self):
        _capture(self.root, ["--name="])
        self.assertEqual(self.display.value, "")

    def testFlagDoesNotConsume(self):
        _capture(self.root, ["-V", "sync"])
        self.assertTrue(self.verbose.present)
        self.assertEqual(self.verbose.value, "")
        self.assertEqual(self.calls, [self.child])

    def testFlagIgnoresInlineValue(self):
        _capture(self.root, ["--verbose=yes"])
        self.assertTrue(self.verbose.present)
        self.assertEqual(self.verbose.value, "")

    def testLookupUsesNamesForLongAndAliasesForShort(self):
        self.assertIs(self.root.lookup("--url"), self.url)
        self.assertIs(self.root.lookup("-u=x"), self.url)
        self.assertIsNone(self.root.lookup("--u"))
        self.assertIsNone(self.root.lookup("-url"))
        self.assertIsNone(self.root.lookup("-"))
        self.assertIsNone(self.root.lookup("--"))
        self.assertIsNone(self.root.lookup("--=x"))

    def testFirstDeclaredAliasWins(self):
        shadow = self.root.option("universe", "u", "", "Same alias as url.")
        self.assertIs(self.root.lookup("-u"), self.url)
        self.assertIsNot(self.root.lookup("-u"), shadow)

    def testOptionStoredUnderCustomKey(self):
        self.root.options["local"] = Option("", "l")
        _capture(self.root, ["--local", "yes"])
        self.assertEqual(self.root.options["local"].value, "yes")


class TestDescent(TestCase):
    """Subcommand dispatch and option inheritance."""

    def setUp(self):
        self.seen = {}
        self.root = Command("tool", self._record("root"))
        self.config = self.root.option("config", "c", "", "Config file.")
        self.root.option("url", "u", "root-default", "Root url.")
        self.push = self.root.command("push", usage="Push the source code.")
        self.origin = self.push.command("origin", self._record("origin"), "Push to the origin.")
        self.origin.option("url", "u", "child-default", "Origin url.")
        self.origin.option("tag", "t", "", "Tag to push.")

    def _record(self, label):
        def handler(command):
            self.seen[label] = {name: option.value for name, option in command.scope.items()}
        return handler

    def testChildSeesParentAndOwnOptions(self):
        _capture(self.root, ["--config=prod.toml", "push", "origin", "--tag=v1"])
        self.assertEqual(self.seen["origin"]["config"], "prod.toml")
        self.assertEqual(self.seen["origin"]["tag"], "v1")

    def testChildDeclarationWinsOnNameCollision(self):
        _capture(self.root, ["--url=overridden", "push", "origin"])
        self.assertEqual(self.seen["origin"]["url"], "child-default")
        # the root's own option still received the value
        self.assertEqual(self.root.options["url"].value, "overridden")

    def testParentHandlerNeverRunsAfterDescent(self):
        _capture(self.root, ["push", "origin"])
        self.assertEqual(set(self.seen), {"origin"})

    def testIntermediateNodeWithoutHandlerShowsUsage(self):
        output = _capture(self.root, ["push"])
        self.assertEqual(self.seen, {})
        self.assertTrue(output.startswith("Usage: push [origin]"))

    def testParentOptionsAreNotLookedUpInChild(self):
        output = _capture(self.root, ["push", "origin", "--config=x"])
        self.assertIn("Unknown option: --config=x", output)
        self.assertIn("Usage: origin", output)
        self.assertEqual(self.seen, {})

    def testValuesPersistOnDeclaringCommands(self):
        _capture(self.root, ["push", "origin", "--url", "https://example.org"])
        self.assertEqual(self.origin.options["url"].value, "https://example.org")
        self.assertIs(self.origin.scope["url"], self.origin.options["url"])

    def testDeclaredOptionsAreNotPolluted(self):
        _capture(self.root, ["push", "origin"])
        self.assertEqual(list(self.root.options), ["config", "url"])
        self.assertEqual(list(self.push.options), [])

    def testScopeIsSharedAlongTheDescent(self):
        scope = dict(self.root.options)
        with contextlib.redirect_stdout(io.StringIO()):
            self.root.resolve(scope, ["push", "origin"])
        self.assertIn("tag", scope)
        self.assertIs(scope["url"], self.origin.options["url"])

    def testFirstMatchingSiblingWins(self):
        calls = []
        self.root.command("dup", lambda command: calls.append("first"))
        self.root.command("dup", lambda command: calls.append("second"))
        _capture(self.root, ["dup"])
        self.assertEqual(calls, ["first"])

    def testResetRestoresDefaults(self):
        _capture(self.root, ["--config=x", "push", "origin", "--tag=v1"])
        self.root.reset()
        self.assertEqual(self.config.value, "")
        self.assertFalse(self.config.present)
        self.assertEqual(self.origin.options["tag"].value, "")
        self.assertEqual(dict(self.origin.scope), {})


class TestFaults(TestCase):
    """Unknown option and unknown subcommand handling."""

    def setUp(self):
        self.calls = []
        self.root = Command("tool", self.calls.append)
        self.root.option("verbose", "V", "", "Talk more.", flag=True)
        self.root.command("list", self.calls.append)

    def testUnknownSubcommandPrintsMessageAndUsage(self):
        output = _capture(self.root, ["frobnicate"])
        lines = output.splitlines()
        self.assertEqual(lines[0], "Unknown sub command: frobnicate")
        self.assertEqual(lines[1], "")
        self.assertEqual(lines[2], "Usage: tool [--verbose|-V] [list]")
        self.assertEqual(self.calls, [])

    def testUnknownOptionStopsTheWalk(self):
        output = _capture(self.root, ["--verbos", "list"])
        self.assertTrue(output.startswith("Unknown option: --verbos\n"))
        self.assertIn("Usage: tool", output)
        self.assertEqual(self.calls, [])

    def testBareDashesAreUnknownOptions(self):
        self.assertTrue(_capture(self.root, ["-"]).startswith("Unknown option: -\n"))
        self.assertTrue(_capture(self.root, ["--"]).startswith("Unknown option: --\n"))

    def testNonShellRaisesUnknownOption(self):
        self.root.shell = False
        with self.assertRaises(UnknownOptionError) as context:
            self.root.__invoke__(["--verbos"])
        self.assertEqual(context.exception.token, "--verbos")
        self.assertIs(context.exception.command, self.root)
        self.assertEqual(context.exception.code, FaultCode.UNKNOWN_OPTION)
        self.assertIn("--verbose", context.exception.suggestions)

    def testNonShellRaisesUnknownSubcommand(self):
        root = Command("tool", shell=False)
        root.command("list")
        with self.assertRaises(UnknownSubcommandError) as context:
            root.__invoke__(["lst"])
        self.assertEqual(context.exception.suggestions, ["list"])

    def testChildrenInheritShellFlag(self):
        root = Command("tool", shell=False)
        child = root.command("list")
        self.assertFalse(child.shell)
        with self.assertRaises(UnknownOptionError):
            root.__invoke__(["list", "--nope"])

    def testFallbackReceivesFault(self):
        faults = []
        self.root.fallback(faults.append)
        output = _capture(self.root, ["nope"])
        self.assertEqual(output, "")
        self.assertIsInstance(faults[0], UnknownSubcommandError)
        self.assertEqual(faults[0].message, "Unknown sub command: nope")

    def testFallbackCannotBeOverridden(self):
        self.root.fallback(print)
        with self.assertRaises(TypeError):
            self.root.fallback(print)


class TestUsage(TestCase):
    """Generated usage text."""

    def testSynopsisOptionsAndCommands(self):
        root = Command("tool")
        root.option("verbose", "V", "", "Talk more.", flag=True)
        root.option("config", "", "", "Config file.")
        root.command("list", usage="List the configuration.")
        root.command("push", usage="Push the source code.")

        self.assertEqual(root.usage_text(), "\n".join((
            "Usage: tool [--verbose|-V] [--config] [list|push]",
            "",
            "Options:",
            "  config:  Config file.",
            "  verbose: Talk more.",
            "",
            "Commands:",
            "  list: List the configuration.",
            "  push: Push the source code.",
        )))

    def testAliasOnlyEntry(self):
        root = Command("tool")
        root.options[""] = Option("", "q", "", "Quiet.")
        self.assertTrue(root.usage_text().startswith("Usage: tool [-q]\n"))

    def testNamelessChildrenAreSkipped(self):
        root = Command("tool")
        root.command("list")
        root.add(Command(""))
        root.command("push")
        first = root.usage_text().splitlines()[0]
        self.assertEqual(first, "Usage: tool [list|push]")

    def testEmptyOptionsStillShowHeader(self):
        self.assertEqual(Command("tool").usage_text(), "Usage: tool\n\nOptions:")

    def testShowUsagePrintsText(self):
        root = Command("tool")
        root.option("config", "c", "", "Config file.")
        with contextlib.redirect_stdout(buffer := io.StringIO()):
            root.show_usage()
        self.assertEqual(buffer.getvalue(), root.usage_text() + "\n")

    def testTabsAreExpandedBeforePrinting(self):
        root = Command("tool")
        root.option("verbose", "V", "", "Talk\tmore.", flag=True)
        root.command("list", usage="List\tentries.")
        text = root.usage_text()
        self.assertNotIn("\t", text)
        self.assertIn("  verbose: Talk more.", text.splitlines())
        with contextlib.redirect_stdout(buffer := io.StringIO()):
            root.show_usage()
        self.assertEqual(buffer.getvalue(), text + "\n")

    def testHandlerlessCommandShowsUsage(self):
        root = Command("tool")
        self.assertEqual(_capture(root, []), root.usage_text() + "\n")


class TestConstruction(TestCase):
    """Builder validation."""

    def testNameMustBeString(self):
        with self.assertRaises(TypeError):
            Command(1)

    def testNameCannotLookLikeAnOption(self):
        with self.assertRaises(ValueError):
            Command("--push")

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("tool", "not callable")

    def testActionDecorator(self):
        root = Command("tool")

        @root.action
        def run(command):
            pass

        self.assertIs(root.handler, run)

    def testAddRejectsNonCommands(self):
        with self.assertRaises(TypeError):
            Command("tool").add("list")

    def testNameIsReadOnly(self):
        with self.assertRaises(AttributeError):
            Command("tool").name = "other"

    def testSetDefaultConfigOption(self):
        root = Command("tool")
        option = root.set_default_config_option()
        self.assertIs(root.options["config"], option)
        self.assertEqual(option.alias, "c")

    def testPromptStringIsShellSplit(self):
        root = Command("tool", lambda command: None)
        config = root.option("config", "c")
        _capture(root, '--config "my file.toml"')
        self.assertEqual(config.value, "my file.toml")

    def testPromptRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            Command("tool").__invoke__([1, 2])

    def testReprShowsName(self):
        self.assertTrue(repr(Command("tool")).startswith("command(name='tool'"))


if __name__ == "__main__":
    unittest.main()
