"""
ccli command layer: named commands, their registries, and typed accessors.

What this module provides
- Command: a named callback owning an OptionRegistry and an ArgumentList.
  • Every command owns a reserved --help (-h) option of kind NULL.
  • option(...)/argument(...) register typed options and positionals.
  • get_*/get_arg_* accessors read the values bound by the last parse.
- CommandRegistry: ordered, linearly scanned collection of commands.
- command(...): factory/decorator building a Command from a callable.

Accessor contract
- every accessor returns (value, found).
  • found is False when the option is unknown to the command, or when it was
    neither supplied nor given a default; value is then None (get_flag: False).
  • asking for a kind other than the declared one is a programming error in the
    host callback: it raises AccessorTypeError, which the interface turns into a
    failed run with a descriptive message.

Quick start
    from ccli import Interface, ValueKind

    cli = Interface("prog", descr="demo")

    @cli.command("hello", descr="say hello")
    def hello(interface):
        number, found = interface.get_int("--number")
        print("hello", number)

    hello.option("--number", "-n", kind=ValueKind.NUMBER, default=3)
    cli.run()
"""
import inspect
import math

from .arguments import OptionRegistry, ArgumentList
from .faults import *
from .utils import *
from .values import ValueKind

__all__ = (
    "Command",
    "CommandRegistry",
    "command",
)


def _sanitize_command_name(name, /):
    if not isinstance(name, str):
        raise TypeError("command name must be a string")
    elif not (name := name.strip()):
        raise ValueError("command name cannot be empty")
    elif name.startswith("-") or any(char.isspace() for char in name):
        raise ValueError("command name cannot start with '-' or contain whitespace")
    return name


class Command:
    """
    A named command: callback + options + positional arguments.

    Lifecycle
    - built once at setup time; only option/argument values change afterwards,
      and only while the interface parses a command line.
    - the callback receives the Interface as its single argument.
    """

    def __init__(self, name, callback, /, descr=Unset):
        if not callable(callback):
            raise TypeError("command callback must be callable")
        self._name = _sanitize_command_name(name)
        self._callback = callback
        if not isinstance(descr, str | Unset):
            raise TypeError("command 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError("command 'descr' cannot be empty")
        self._descr = coalesce(descr)
        self._options = OptionRegistry()
        self._arguments = ArgumentList()
        self._helper = self._options.add("--help", "-h", descr="show this help and exit")

    name = mirror("name")
    descr = mirror("descr")
    callback = mirror("callback")
    options = property(lambda self: self._options)
    arguments = property(lambda self: self._arguments)
    helper = property(lambda self: self._helper)

    def option(self, long=Unset, short=Unset, /, kind=ValueKind.NULL, default=Unset, descr=Unset):
        """
        register an option; returns it, or None when the long spelling is missing.

        --help and -h stay bound to the reserved help option.
        """
        for name in (long, short):
            if isinstance(name, str) and self._options.resolve(name) is self._helper:
                raise ValueError("option %r is reserved for the command help" % name)
        return self._options.add(long, short, kind=kind, default=default, descr=descr)

    def argument(self, name, /, kind=ValueKind.STRING, descr=Unset):
        """
        append a positional argument; its position is its registration order.
        """
        return self._arguments.add(name, kind=kind, descr=descr)

    def reset(self):
        """
        restore every option and argument to its default before a new parse.
        """
        self._options.reset()
        self._arguments.reset()

    def _access(self, spec, kind, subject):
        if spec is None:
            return None, False
        if spec.kind is not kind:
            trigger(AccessorTypeError(
                "%s is %s, not %s" % (subject, spec.kind.label, kind.label),
                title="wrong accessor",
                code=FaultCode.ACCESSOR_TYPE,
                hint="read %s with the accessor matching its declared kind" % subject,
                command=self,
            ))
        if spec.value.isnull:
            return None, False
        return spec.value.payload, True

    def get_number(self, name, /):
        return self._access(self._options.resolve(name), ValueKind.NUMBER, "option %r" % name)

    def get_int(self, name, /):
        number, found = self.get_number(name)
        return (math.trunc(number), True) if found else (None, False)

    def get_boolean(self, name, /):
        return self._access(self._options.resolve(name), ValueKind.BOOLEAN, "option %r" % name)

    def get_string(self, name, /):
        return self._access(self._options.resolve(name), ValueKind.STRING, "option %r" % name)

    def get_flag(self, name, /):
        """
        return (True, True) when the switch was given, (False, False) otherwise.
        """
        if (option := self._options.resolve(name)) is None:
            return False, False
        self._access(option, ValueKind.NULL, "option %r" % name)
        return option.matched, option.matched

    def _argument(self, key):
        if (argument := self._arguments.resolve(key)) is None:
            return None, None
        if isinstance(key, str):
            return argument, "argument %r" % key
        return argument, "%s argument %r" % (ordinal(key + 1), argument.name)

    def get_arg_number(self, key, /):
        argument, subject = self._argument(key)
        return self._access(argument, ValueKind.NUMBER, subject)

    def get_arg_int(self, key, /):
        number, found = self.get_arg_number(key)
        return (math.trunc(number), True) if found else (None, False)

    def get_arg_boolean(self, key, /):
        argument, subject = self._argument(key)
        return self._access(argument, ValueKind.BOOLEAN, subject)

    def get_arg_string(self, key, /):
        argument, subject = self._argument(key)
        return self._access(argument, ValueKind.STRING, subject)

    def __call__(self, interface, /):
        return self._callback(interface)

    def __repr__(self):
        return "command(name=%r, options=%d, arguments=%d)" % (self._name, len(self._options), len(self._arguments))


class CommandRegistry:
    """
    Ordered commands of an interface; lookups are linear scans by exact name.
    """

    def __init__(self):
        self._commands = []

    def add(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("add() argument must be a command")
        if self.find(command.name) is not None:
            raise ValueError(f"command name {command.name!r} is already in use")
        self._commands.append(command)
        return command

    def find(self, name, /):
        for command in self._commands:
            if command.name == name:
                return command
        return None

    def names(self):
        return [command.name for command in self._commands]

    def __iter__(self):
        return iter(self._commands)

    def __len__(self):
        return len(self._commands)

    def __contains__(self, name):
        return self.find(name) is not None


def command(name=Unset, /, descr=Unset):
    """
    Create a decorator that wraps a callable into a Command.

    - name: defaults to the function name (underscores become hyphens).
    - descr: defaults to the first line of the function docstring, when present.

    Usage
        @command("hello", descr="say hello")
        def hello(interface): ...
    """
    if callable(name):
        return command()(name)

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        title = coalesce(name, getattr(callback, "__name__", "").strip("_").replace("_", "-"))
        summary = descr
        if summary is Unset and (doc := inspect.getdoc(callback)):
            summary = doc.splitlines()[0]
        return Command(title, callback, descr=summary)

    return wrapper
