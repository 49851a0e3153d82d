"""
clitree option model and reserved options.

Overview
- Option
  • A named value slot declared on a command, addressable on the command line as
    --name[=value], --name value, -alias[=value] or -alias value.
  • flag=True makes it presence-only: it never consumes a value token.
  • value and present are the only mutable fields; the resolver writes them while
    walking the arguments, handlers read them afterwards.

- Reserved options
  • help (-h), version (-v) are injected into the root command by clitree.cli.CLI.
  • config (-c) is installable on any command via Command.set_default_config_option().
    It only reserves the name; reading the file is left to the host program.

Introspection
- IntrospectableType (clitree.utils) publishes the names listed in
  __introspectable__ as read-only properties and derives __repr__/__rich_repr__.

Quick example:
    >>> url = Option("url", "u", "https://example.com", "Remote address.")
    >>> url.value
    'https://example.com'
    >>> verbose = Option("verbose", "V", flag=True)
    >>> verbose.present
    False
"""
from .utils import *


OPTION_CONFIG_NAME = "config"
OPTION_CONFIG_ALIAS = "c"
OPTION_CONFIG_DESCR = "Specify the configuration file to use. Supported formats: JSON, YAML, TOML."

OPTION_HELP_NAME = "help"
OPTION_HELP_ALIAS = "h"
OPTION_HELP_DESCR = "Display a list of available commands and global options."

OPTION_VERSION_NAME = "version"
OPTION_VERSION_ALIAS = "v"
OPTION_VERSION_DESCR = "Show the version of the CLI tool."
OPTION_VERSION_VALUE = "1.0.0"


class Option(metaclass=IntrospectableType):
    """
    A command option: identity, description, default and the parsed state.

    Fields
    - name: informational long name. The resolver matches --name against the key
      the option is stored under in Command.options, which Command.option() keeps
      equal to this field.
    - alias: single-character short name matched by -alias. May be empty.
    - description: help text, fixed at construction.
    - flag: presence-only when True.
    - default: the value given at construction, restored by reset().
    - value: current value (str), rewritten by the resolver.
    - present: whether the option was seen on the command line.

    Aliases are not checked for uniqueness; within one command the first option
    declared with a given alias wins.
    """

    __introspectable__ = (
        "name",
        "alias",
        "description",
        "flag",
        "default",
    )

    __displayable__ = (
        "name",
        "alias",
        "value",
        "description",
        "flag",
        "present",
    )

    def __init__(self, name="", alias="", value="", description="", /, *, flag=False):
        for field, object in (("name", name), ("alias", alias), ("value", value), ("description", description)):
            if not isinstance(object, str):
                raise TypeError(f"{type(self).__typename__} '{field}' must be a string")

        name = name.strip().lstrip("-")
        alias = alias.strip().lstrip("-")
        if "=" in name or "=" in alias:
            raise ValueError(f"{type(self).__typename__} name and alias cannot contain '='")

        self._name = name
        self._alias = alias
        self._description = description
        self._flag = bool(flag)
        self._default = value
        self.value = value
        self.present = False

    def __bool__(self):
        """
        An option is truthy once it has been seen on the command line.
        """
        return self.present

    def assign(self, value):
        """
        Record a command-line occurrence, optionally carrying a value.

        Flags ignore the value; passing Unset marks presence only.
        """
        self.present = True
        if not self.flag and value is not Unset:
            self.value = value

    def reset(self):
        """
        Restore the construction default and forget presence.
        """
        self.value = self._default
        self.present = False


def help_option():
    return Option(OPTION_HELP_NAME, OPTION_HELP_ALIAS, "", OPTION_HELP_DESCR)


def version_option():
    return Option(OPTION_VERSION_NAME, OPTION_VERSION_ALIAS, OPTION_VERSION_VALUE, OPTION_VERSION_DESCR)


def config_option():
    return Option(OPTION_CONFIG_NAME, OPTION_CONFIG_ALIAS, "", OPTION_CONFIG_DESCR)


__all__ = (
    # Types
    "Option",

    # Factories
    "help_option",
    "version_option",
    "config_option",

    # Constants
    "OPTION_CONFIG_NAME",
    "OPTION_CONFIG_ALIAS",
    "OPTION_CONFIG_DESCR",
    "OPTION_HELP_NAME",
    "OPTION_HELP_ALIAS",
    "OPTION_HELP_DESCR",
    "OPTION_VERSION_NAME",
    "OPTION_VERSION_ALIAS",
    "OPTION_VERSION_DESCR",
    "OPTION_VERSION_VALUE",
)
