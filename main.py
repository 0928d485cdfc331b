import sys

from rich.console import Console
from rich.pretty import pprint

from theseus import *

__prog__ = "demo"

demo = Command(
    "demo",
    options=[
        CommandOption("debug", aliases="d"),
        CommandOption("times", aliases="t", arguments=Argument(validator=int, default="1")),
    ],
    children=[
        Command("get", arguments=[Argument.one_or_more("keys")], options=[
            CommandOption("format", aliases="f", arguments=Argument(choices=("json", "text"))),
        ]),
        Command("remote", children=[
            Command("add", arguments=[Argument("name"), Argument("url")]),
        ]),
    ],
)


if __name__ == '__main__':
    try:
        result = parse(Context(demo, help=True, version=Version(version="0.1.0")), sys.argv[1:])
    except ParseError as error:
        Console(stderr=True).print(error)
        sys.exit(2)
    pprint(result)
