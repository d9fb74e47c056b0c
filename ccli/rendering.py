"""
ccli rendering: help screens and colored output (rich-based, color-aware).

Overview
- Color: the six named colors hosts may use with echo().
- console(stream, colorful): build a rich Console for a stream. Color codes are
  emitted only for the default stdout stream and only when it is a terminal;
  any explicitly passed stream is rendered as plain text.
- echo(message, color, stream): print one line, optionally colored.
- global_help(interface): usage line, description, and the command table.
- command_help(interface, command): usage line, description, options (with
  =NUMBER/=BOOLEAN/=STRING annotations and defaults), and positional arguments.

Palette keys
- usage-label, program-name, usage-section, description-section
- group-label, option-name, metavar, argument-name, argument-description
- commands-title, commands-table, command-name, command-description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Define __prog__ in __main__ to override the program name shown in usage lines.
- When colorful is False, styling is suppressed entirely.
"""
from collections import defaultdict
from enum import Enum

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .utils import *
from .values import ValueKind

__all__ = (
    "Color",
    "console",
    "echo",
    "global_help",
    "command_help",
)


class Color(Enum):
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"


def console(stream=Unset, /, colorful=True, *, stderr=False):
    """
    build a Console for `stream` (default: stdout, or stderr when `stderr` is set).

    only the default streams may carry color, and rich strips it by itself when
    they are redirected; explicit streams always get plain text.
    """
    if stream is Unset or stream is None:
        return Console(stderr=stderr, no_color=not colorful, highlight=False)
    return Console(file=stream, color_system=None, highlight=False, soft_wrap=False)


def echo(message, /, color=Unset, *, stream=Unset):
    """
    print `message` to `stream` (stdout by default), in `color` when the stream allows it.
    """
    if not isinstance(color, Color | Unset):
        raise TypeError("echo() color must be a Color")
    style = "" if color is Unset else color.value
    console(stream).print(Text(str(message), style))


def _palette(colorful):
    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Groups / arguments ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "option-name": "bold #00E6FF",  # CYAN for options
        "metavar": "bold #FFD600",  # AMBER for parameters
        "argument-name": "bold #22C55E",  # GREEN for positionals
        "argument-description": "#9CA3AF",  # Muted gray

        # === Commands table ===
        "commands-title": "bold #FFFFFF",
        "commands-table": "#4B5563",  # Slate border
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _program(interface):
    return getattr(__import__("__main__"), "__prog__", interface.name)


def _usage(styler, *segments):
    usage = Text()
    usage.append("usage", styler("usage-label")).append(": ")
    for index, (segment, style) in enumerate(segments):
        if index:
            usage.append(" ")
        usage.append(segment, styler(style))
    return usage


def global_help(interface, /, colorful=True):
    """
    return the global help renderable: usage, description, and every command.
    """
    styler = _palette(colorful)
    renders = [
        _usage(
            styler,
            (_program(interface), "program-name"),
            ("<command> [OPTIONS] [ARGUMENTS]", "usage-section"),
        ).append("\n")
    ]

    if interface.descr:
        renders.append(Text(interface.descr, styler("description-section")).append("\n"))

    if interface.commands:
        table = Table(
            "name", "help",
            title=Text("commands", styler("commands-title")),
            box=ROUNDED,
            style=styler("commands-table"),
            header_style=styler("commands-title"),
        )
        for command in interface.commands:
            # Prefer explicit descr; otherwise point at the per-command help
            if command.descr:
                help = Text(command.descr, styler("command-description"))
            else:
                help = Text("no description — run '%s %s --help' for details" % (
                    _program(interface), command.name
                ), styler("command-description"))
            table.add_row(Text(command.name, styler("command-name")), help)
        renders.append(table)
    else:
        renders.append(Text("no commands registered", styler("description-section")))

    return Group(*renders)


def _annotation(kind):
    return "" if kind is ValueKind.NULL else "=" + kind.label


def command_help(interface, command, /, colorful=True):
    """
    return the detailed help renderable of one command.
    """
    styler = _palette(colorful)

    segments = [(_program(interface), "program-name"), (command.name, "program-name")]
    if command.options:
        segments.append(("[OPTIONS]", "usage-section"))
    segments.extend(("<%s>" % argument.name, "usage-section") for argument in command.arguments)
    renders = [_usage(styler, *segments).append("\n")]

    if command.descr:
        renders.append(Text(command.descr, styler("description-section")).append("\n"))

    if command.options:
        grid = Table.grid(padding=(0, 4))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for option in command.options:
            names = Text(" | ").join(
                Text(name, styler("option-name")) for name in sorted(option.names, key=len)
            )
            names.append(_annotation(option.kind), styler("metavar"))
            descr = Text(str(coalesce(option.descr, "")), styler("argument-description"))
            if option.default is not None:
                descr.append(("  " if descr else "") + "(default: %s)" % option.default)
            grid.add_row(Text("  ").append_text(names), descr)
        renders.append(Text("options", styler("group-label")).append(":"))
        renders.append(grid)

    if command.arguments:
        grid = Table.grid(padding=(0, 4))
        grid.add_column(no_wrap=True)
        grid.add_column()
        for argument in command.arguments:
            name = Text.assemble(
                "  ",
                Text("<%s>" % argument.name, styler("argument-name")),
                " ",
                Text(argument.kind.label, styler("metavar")),
            )
            grid.add_row(name, Text(str(coalesce(argument.descr, "")), styler("argument-description")))
        if command.options:
            renders.append(Text(""))
        renders.append(Text("arguments", styler("group-label")).append(":"))
        renders.append(grid)

    return Group(*renders)
