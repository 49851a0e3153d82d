from clitree import *


def main(command):
    print_table(("OPTION", "VALUE"), ((name, option.value) for name, option in command.scope.items()))


cli = CLI(main, version="1.0.0")
cli.command.set_default_config_option()

listing = cli.command.command("list", usage="List the configuration.")
listing.option("local", "l", flag=True)


@listing.action
def list_(command):
    print("Started list func.")
    print_table(("OPTION", "VALUE", "PRESENT"), (
        (name, option.value, option.present) for name, option in command.scope.items()
    ))


push = cli.command.command("push", usage="Push the source code.")
origin = push.command("origin", usage="Push the source code to the origin.")
origin.option("url", "u", "https://example.com")


@origin.action
def push_origin(command):
    print("Started push origin func.")
    print_table(("OPTION", "VALUE"), ((name, option.value) for name, option in command.scope.items()))


if __name__ == '__main__':
    cli.run()
