"""
clitree top-level CLI: the root command, reserved flags and the entry point.

What this module provides
- CLI: owns the root Command (named after the running executable), the version
  string, and the run() entry point.
- invoke(object, prompt): convenience runner for anything exposing __invoke__.

Reserved options
- --help / -h and --version / -v are injected into the root command's options.
- run() looks for an exact --help/-h token anywhere in the arguments before any
  parsing, then for --version/-v, so both short-circuit regardless of position.
- --config / -c is available on demand: cli.command.set_default_config_option().

Quick start
    from clitree import CLI

    def main(command):
        for name, option in command.scope.items():
            print(name, option.value)

    cli = CLI(main)
    cli.set_version("1.2.0")
    cli.command.set_default_config_option()
    cli.run()

Exit behavior
- Every path (handler, help, version, unknown option or subcommand) writes to
  standard output and returns normally.
"""
import os.path
import sys

from rich.console import Console
from rich.text import Text

from .commands import Command, _tokenize
from .options import *
from .utils import *


class CLI:
    """
    Top-level wrapper around a root Command.

    Parameters
    - handler: callable(command) run when the root is invoked without a
      subcommand (including with no arguments at all), or Unset/None.
    - name: display name of the root; defaults to __main__.__prog__ when the host
      defines it, else the executable's basename.
    - version: version string shown by --version; see set_version().
    - shell: forwarded to the root command (True prints faults, False raises).
    """

    def __init__(self, handler=Unset, /, *, name=Unset, version=Unset, shell=True):
        self._execname = coalesce(name, getattr(sys.modules.get("__main__"), "__prog__", os.path.basename(sys.argv[0])))
        self._version = Unset
        self.command = Command(self._execname, handler, shell=shell)
        self.command.options[OPTION_HELP_NAME] = help_option()
        self.command.options[OPTION_VERSION_NAME] = version_option()
        if version is not Unset:
            self.set_version(version)

    @property
    def name(self):
        return self._execname

    @property
    def version(self):
        """
        The version printed by --version.

        Falls back to the reserved option's default when set_version() was never called.
        """
        return coalesce(self._version, OPTION_VERSION_VALUE)

    def set_version(self, version, /):
        if not isinstance(version, str):
            raise TypeError("set_version() argument must be a string")
        self._version = version
        # keep the reserved option's value in sync for handlers reading it
        if (option := self.command.options.get(OPTION_VERSION_NAME)) is not None:
            option.value = version

    def run(self, prompt=Unset):
        """
        Parse the arguments and dispatch.

        Steps
        1. no arguments: run the root handler, or show the root usage without one.
        2. an exact --help/-h anywhere: show the root usage.
        3. an exact --version/-v anywhere: print "Version: <version>".
        4. otherwise resolve from the root with a scope seeded from its options.

        Parameters
        - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.
        """
        tokens = _tokenize(prompt)

        if not tokens:
            # nothing to parse: the walk ends on the root right away
            self.command.resolve(dict(self.command.options), ())
            return

        if _contains(tokens, OPTION_HELP_NAME, OPTION_HELP_ALIAS):
            self.command.show_usage()
            return

        if _contains(tokens, OPTION_VERSION_NAME, OPTION_VERSION_ALIAS):
            Console().print(Text("Version: %s" % self.version), soft_wrap=True)
            return

        self.command.resolve(dict(self.command.options), tokens)

    __invoke__ = run

    def __repr__(self):
        return "cli(name=%r, version=%r, command=%r)" % (self.name, self.version, self.command)


def _contains(tokens, name, alias):
    return any(token == "--" + name or token == "-" + alias for token in tokens)


def invoke(object, prompt=Unset, /):
    """
    Run a CLI or a Command (anything implementing __invoke__).

    Parameters
    - object: CLI | Command.
    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.

    Raises
    - TypeError when object does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        object.__invoke__(prompt)
        return

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "CLI",
    "invoke",
)
