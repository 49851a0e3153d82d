"""
clitree faults (user-facing parse errors) and their rendering.

Scope
- FaultCode: stable numeric identifiers for the two recognized failures.
- CommandException: base type carrying a message plus options; knows how to render
  itself (rich) and how to surface itself (__trigger__).
- UnknownOptionError / UnknownSubcommandError: the error taxonomy of the resolver.
- trigger(): central entry point to surface a fault.

Surfacing
- Shell mode (the default for commands built by clitree): the one-line message is
  printed to standard output followed by a blank line, and control returns to the
  caller. The command that raised it then prints its usage.
- Non-shell mode: the fault is raised so embedding code and tests can catch it.

Options carried by every fault
- token: the offending command-line token.
- command: the Command whose walk stopped.
- code: the FaultCode.
- suggestions: close matches (difflib) among the names the command would accept.
- shell: surfacing mode.
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_SUBCOMMAND
    - options (1111x): UNKNOWN_OPTION
    """
    # --- routing errors ---
    UNKNOWN_SUBCOMMAND = 11102

    # --- option errors ---
    UNKNOWN_OPTION     = 11112


class CommandException(Exception):
    """
    Base class of every parse fault.

    The positional message is the exact line shown to the user; everything else
    travels in the read-only options mapping.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # expose options (token, command, code, ...) as attributes
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __rich__(self):
        return Text(str(self.message))

    def __trigger__(self):
        if not self.options.get("shell", True):
            raise self from None
        console = Console()
        console.print(self, soft_wrap=True)
        console.print()

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(CommandException): ...
class UnknownSubcommandError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see CommandException).
    - options are merged into a copy of the fault before triggering.
    - shell=True prints the message; shell=False raises the fault.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownOptionError",
    "UnknownSubcommandError",
    "trigger",
)
