import shlex
from types import SimpleNamespace

from rich.pretty import pprint

from commandry import *
from commandry import logs

__messages__ = {
    "no_permission": "You are not allowed to do that.",
}


@command(aliases=["w"], arguments=[Argument("name", str, lambda context: ["home", "spawn"])])
def warp(sender, arguments):
    """Teleport to a named warp."""
    print(f"{sender.name} warped to {arguments["name"]}")


@warp.command(name="set", permission="warp.set", arguments=[("name", str)])
def set_warp(sender, arguments):
    print(f"{sender.name} set warp {arguments["name"]}")


@command(arguments=[("message", "infinite")])
def say(sender, arguments):
    print(f"<{sender.name}> {arguments["message"]}")


if __name__ == '__main__':
    logs.install()
    dispatcher = Dispatcher(ConsolePlatform(), debug=True)
    dispatcher.register_command(warp)
    dispatcher.register_command(say)
    pprint(warp)

    player = SimpleNamespace(name="alice", permissions=set(), in_context=True)
    while line := input("> ").strip():
        label, *arguments = shlex.split(line)
        if label.endswith("?"):
            pprint(dispatcher.suggest(player, label[:-1], arguments or [""]))
        elif not dispatcher.invoke(player, label, arguments):
            print(f"unknown command {label!r}")
