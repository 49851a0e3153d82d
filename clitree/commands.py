"""
clitree command layer: declare a command tree, resolve arguments, render usage.

What this module provides
- Command: a node of the command tree with:
  • an optional handler (any callable taking the resolved Command),
  • its own options (name -> Option, declaration ordered),
  • ordered children (subcommands),
  • a short usage/description string shown in the parent's help.

- Resolution (Command.resolve)
  • Walks the tokens left to right. Dash-prefixed tokens are options of the
    current node; the first bare token is a subcommand and causes an immediate,
    non-backtracking descent.
  • Options declared by ancestors stay visible to descendants through the scope:
    a single mapping shared along the descent into which every entered child merges
    its own options (child entries win on name collisions).
  • Once the tokens are exhausted the node's handler runs, or its usage is shown
    when it has none.

- Usage (Command.show_usage / Command.usage_text)
  • "Usage:" synopsis with bracketed option spellings and child names.
  • "Options:" section sorted by name, "Commands:" section in declaration order.

Quick start
    from clitree import Command

    root = Command("tool")
    push = root.command("push", usage="Push the source code.")
    origin = push.command("origin", usage="Push the source code to the origin.")
    origin.option("url", "u", "https://example.com", "Remote address.")

    @origin.action
    def push_origin(command):
        print(command.scope["url"].value)

    root.__invoke__("push origin --url=https://example.org")

Design notes
- Option lookup always targets the current node's own options; inherited options
  are only reachable from the scope handed to the handler.
- The two recognized failures (unknown option, unknown subcommand) are faults from
  clitree.faults: in shell mode they print a line plus usage and stop the walk.
"""
import difflib
import shlex
import sys
from collections.abc import Iterable, MutableMapping
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .faults import *
from .options import Option, OPTION_CONFIG_NAME, config_option
from .utils import *


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:].
    - str: shell-like string split with shlex.split.
    - Iterable[str]: used as-is (each element must be a string).
    """
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("prompt must be a string or an iterable of strings")


def _align(entries):
    """
    Render (key, text) pairs as indented "key: text" lines with aligned texts.
    """
    entries = [(key.expandtabs(), text) for key, text in entries]
    width = max((len(key) + 1 for key, _ in entries), default=0)
    return ["  %s %s" % ((key + ":").ljust(width), text) for key, text in entries]


class Command(metaclass=IntrospectableType):
    """
    A node of the command tree.

    Fields
    - name: matched exactly against bare tokens by the parent. Empty for an
      anonymous root; such nodes are left out of the parent's synopsis.
    - handler: callable(command) or None. Assignable at any time.
    - usage: short description listed in the parent's "Commands:" section.
    - options: dict name -> Option. Mutable; the key is the --name spelling.
    - children: list of Command. Lookup takes the first child with a matching
      name, so duplicate sibling names shadow each other silently.
    - shell: True prints faults then usage; False raises them.
    - scope: read-only view of the option mapping accumulated by the last
      resolution that ended on this node (ancestors' options plus its own).

    Lifecycle
    - Built with Command(...) or parent.command(...).
    - Option values are rewritten in place while resolving; reset() restores the
      declared defaults for the whole subtree.
    """

    __introspectable__ = (
        "name",
        "scope",
    )

    __displayable__ = (
        "name",
        "usage",
        "options",
        "children",
        "shell",
    )

    def __init__(self, name="", /, handler=Unset, usage=Unset, *, shell=True):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__typename__} 'name' must be a string")
        elif (name := name.strip()).startswith("-"):
            raise ValueError(f"{type(self).__typename__} 'name' cannot start with '-'")
        if not callable(handler) and handler not in (Unset, None):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")
        if not isinstance(usage, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'usage' must be a string")

        self._name = name
        self._scope = MappingProxyType({})
        self._fallback = Unset
        self.handler = coalesce(handler)
        self.usage = coalesce(usage, "")
        self.options = {}
        self.children = []
        self.shell = bool(shell)

    def option(self, name, alias="", value="", description="", /, *, flag=False):
        """
        Declare (or replace) an option on this command and return it.

        Example
        - command.option("url", "u", "https://example.com", "Remote address.")
        """
        option = Option(name, alias, value, description, flag=flag)
        if not option.name:
            raise ValueError(f"{type(self).__typename__} option 'name' cannot be empty")
        self.options[option.name] = option
        return option

    def set_default_config_option(self):
        """
        Install the reserved --config/-c option on this command.

        The option only carries the path; loading it is up to the host program.
        """
        option = self.options[OPTION_CONFIG_NAME] = config_option()
        return option

    def command(self, name, /, handler=Unset, usage=Unset):
        """
        Create a child command, append it and return it.

        The child inherits this command's shell flag.
        """
        return self.add(type(self)(name, handler, usage, shell=self.shell))

    def add(self, child, /):
        """
        Append an existing command as the last child and return it.
        """
        if not isinstance(child, Command):
            raise TypeError(f"{type(self).__typename__} child must be a command")
        if child is self:
            raise ValueError(f"{type(self).__typename__} cannot be its own child")
        self.children.append(child)
        return child

    def action(self, handler, /):
        """
        Set the handler; returns it unchanged so it works as a decorator.

            @command.action
            def run(command): ...
        """
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} handler must be callable")
        self.handler = handler
        return handler

    def fallback(self, fallback, /):
        """
        Register a one-time fault handler for this command.

        Contract
        - fallback(fault) is called instead of printing the fault and the usage
          (or raising it outside shell mode). The fault carries the token, the
          command, its code and suggestions.
        - Can be set only once per command.

        Returns
        - The same callable, so it can be used as @command.fallback.
        """
        if not callable(fallback):
            raise TypeError(f"{type(self).__typename__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{type(self).__typename__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def reset(self):
        """
        Restore every option of this subtree to its default and clear scopes.
        """
        for option in self.options.values():
            option.reset()
        self._scope = MappingProxyType({})
        for child in self.children:
            child.reset()

    def trigger(self, fault, /, **options):
        """
        Surface a fault raised while walking this command.

        Binds the command and its shell flag onto the fault, then either hands it
        to the registered fallback or triggers it and prints this command's usage.
        Outside shell mode trigger() raises, so the usage is not printed.
        """
        fault = fault.__replace__(**options, command=self, shell=self.shell)
        if self._fallback is not Unset:
            return self._fallback(fault)
        trigger(fault)
        self.show_usage()

    def lookup(self, token):
        """
        Find the own option a dash-prefixed token refers to, or None.

        - "--name[=...]" compares the text before the first '=' with option keys.
        - "-alias[=...]" compares it with aliases; the first declared match wins.
        - An empty name or alias ("-", "--", "--=x") never matches.
        """
        if token.startswith("--"):
            if key := token[2:].split("=", 1)[0]:
                return self.options.get(key)
        elif token.startswith("-"):
            if key := token[1:].split("=", 1)[0]:
                return next((option for option in self.options.values() if option.alias == key), None)
        return None

    def resolve(self, scope, tokens, /):
        """
        Resolve tokens against this node and dispatch to a handler.

        parameters
        - scope: MutableMapping name -> Option accumulated from the ancestors.
          it is updated in place when descending, never copied.
        - tokens: remaining argument tokens.

        behavior
        - option token with no match → UnknownOptionError, usage, stop.
        - value option: 'name=value' (exactly one '=') sets the value inline;
          otherwise the next token, when there is one, is consumed. it only becomes
          the value when it does not start with '-'.
        - flag: marked present, consumes nothing.
        - bare token matching a child → merge the child's options into the scope,
          resolve the rest in the child and return.
        - bare token matching nothing → UnknownSubcommandError, usage, stop.
        - tokens exhausted → record the scope, run the handler (or show usage).
        """
        if not isinstance(scope, MutableMapping):
            raise TypeError("resolve() scope must be a mutable mapping")
        tokens = list(tokens)

        index = 0
        while index < len(tokens):
            token = tokens[index]

            if token.startswith("-"):
                option = self.lookup(token)
                if option is None:
                    return self.trigger(UnknownOptionError(
                        "Unknown option: %s" % token,
                        code=FaultCode.UNKNOWN_OPTION,
                        token=token,
                        suggestions=difflib.get_close_matches(token.split("=", 1)[0], self._spellings()),
                    ))

                if option.flag:
                    option.assign(Unset)
                elif token.count("=") == 1:
                    option.assign(token.split("=", 1)[1])
                elif index + 1 < len(tokens):
                    # the next slot is consumed even when it looks like an option
                    index += 1
                    option.assign(Unset if tokens[index].startswith("-") else tokens[index])
                else:
                    option.assign(Unset)
            else:
                for child in self.children:
                    if child.name == token:
                        scope.update(child.options)
                        return child.resolve(scope, tokens[index + 1:])

                return self.trigger(UnknownSubcommandError(
                    "Unknown sub command: %s" % token,
                    code=FaultCode.UNKNOWN_SUBCOMMAND,
                    token=token,
                    suggestions=difflib.get_close_matches(token, [child.name for child in self.children if child.name]),
                ))

            index += 1

        self._scope = MappingProxyType(scope)
        if self.handler is None:
            self.show_usage()
        else:
            self.handler(self)

    def _spellings(self):
        spellings = []
        for name, option in self.options.items():
            spellings.append("--" + name)
            if option.alias:
                spellings.append("-" + option.alias)
        return spellings

    def usage_text(self):
        """
        Build the help text of this command.

        Layout
        - "Usage: <name> [--opt|-o] ... [child|child]"
          options in declaration order; nameless children are skipped.
        - blank line, "Options:", own options sorted by name.
        - blank line, "Commands:", named children in declaration order (only when
          there are any).
        """
        synopsis = ["Usage: " + self.name]
        for name, option in self.options.items():
            if name and option.alias:
                synopsis.append("[--%s|-%s]" % (name, option.alias))
            elif name:
                synopsis.append("[--%s]" % name)
            elif option.alias:
                synopsis.append("[-%s]" % option.alias)

        children = [child for child in self.children if child.name]
        if self.children:
            synopsis.append("[%s]" % "|".join(child.name for child in children))

        lines = [" ".join(synopsis), "", "Options:"]
        lines.extend(_align([(name, self.options[name].description) for name in sorted(self.options)]))

        if children:
            lines.extend(["", "Commands:"])
            lines.extend(_align([(child.name, child.usage) for child in children]))

        return "\n".join(line.rstrip().expandtabs() for line in lines)

    def show_usage(self):
        """
        Print usage_text() to standard output.
        """
        Console().print(Text(self.usage_text()), soft_wrap=True)

    def __invoke__(self, prompt=Unset):
        """
        Resolve a prompt from this command with a fresh scope.

        The scope starts as a copy of this command's own options, so running a
        command never adds entries to its declared options mapping.

        Parameters
        - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.
        """
        self.resolve(dict(self.options), _tokenize(prompt))


__all__ = (
    # Public API surface for consumers of clitree.commands.
    "Command",
)
