"""
ccli interface: the context object hosts build once and run once.

What this module provides
- Interface: program name, description, command registry, and the per-run parse
  state (tokens, cursor, invoked command). Parsing and dispatch live here.
- Outcome / Status: the result of one run. invoke() never exits the process;
  run() is the single place that turns a failed outcome into sys.exit().

Parse phases
- select: no tokens or a leading --help → global help. Otherwise the first token
  must name a registered command (linear scan) or the run fails with
  UnknownCommandError and the command listing.
- options: while the current token starts with '-', split it at the first '='
  into a name and an optional inline value.
  • unknown names are skipped silently (logged at debug level).
  • NULL options are switches: they bind true and reject an inline value.
  • BOOLEAN/NUMBER/STRING options need a value: the inline one, or else the next
    token when it is not itself one of this command's option spellings.
- help: a matched --help wins over everything else once options are parsed.
- arguments: exactly len(arguments) tokens are bound in order; fewer is an error,
  extra trailing tokens are ignored (logged at debug level).
- dispatch: callback(interface). Accessors on the interface forward to the
  invoked command.

Every fault is fatal: the command's detailed help (or the global help while no
command is selected) goes to the error stream, followed by an "Error: ..." line.

Quick start
    from ccli import Interface, ValueKind

    cli = Interface("prog", descr="Simple CLI showcasing ccli")

    @cli.command("hello", descr="greet")
    def hello(interface):
        number, _ = interface.get_int("--number")
        print("hello #%d" % number)

    hello.option("--number", "-n", kind=ValueKind.NUMBER, default=3)

    if __name__ == "__main__":
        cli.run()
"""
import copy
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable
from enum import Enum

from . import rendering
from .commands import Command, CommandRegistry, command as _command
from .faults import *
from .logger import logger
from .utils import *
from .values import Value, ValueKind, coerce

__all__ = (
    "Interface",
    "Outcome",
    "Status",
)


class Status(Enum):
    HELP = "help"
    DISPATCHED = "dispatched"
    FAILED = "failed"


class Outcome:
    """
    result of one Interface.invoke().

    - status: HELP (help printed), DISPATCHED (callback ran), FAILED (fault reported).
    - command: the selected command, when one was selected.
    - fault: the CommandException behind a FAILED outcome.
    - result: whatever the callback returned.
    """
    __slots__ = ("status", "command", "fault", "result")

    def __init__(self, status, /, command=None, fault=None, result=None):
        self.status = status
        self.command = command
        self.fault = fault
        self.result = result

    @property
    def exitcode(self):
        return 1 if self.status is Status.FAILED else 0

    def __bool__(self):
        return self.status is not Status.FAILED

    def __repr__(self):
        return "outcome(status=%s, command=%r, fault=%r)" % (
            self.status.value, getattr(self.command, "name", None), self.fault
        )


def _delegate(name):
    """
    build an accessor forwarding to the invoked command's method of the same name.
    """
    @rename(name)
    def accessor(self, key, /):
        return getattr(self._active(), name)(key)

    accessor.__doc__ = f"forward {name}() to the invoked command; returns (value, found)."
    return accessor


class Interface:
    """
    Top-level context: registered commands plus the state of the current run.

    Configuration
    - name: program name in usage lines (defaults to basename of sys.argv[0];
      __prog__ in __main__ overrides it in rendered help).
    - descr: program description for the global help.
    - stream / errstream: help output and error output (stdout / stderr by default).
      Only the default streams may carry color.
    - colorful: apply the palette (overridable through __styles__ in __main__).
    """

    def __init__(self, name=Unset, /, descr=Unset, *, stream=Unset, errstream=Unset, colorful=True):
        name = coalesce(name, os.path.basename(sys.argv[0]) or "cli")
        if not isinstance(name, str) or not (name := name.strip()):
            raise ValueError("interface name must be a non-empty string")
        if not isinstance(descr, str | Unset):
            raise TypeError("interface 'descr' must be a string")
        self._name = name
        self._descr = coalesce(descr)
        self._stream = stream
        self._errstream = errstream
        self._colorful = bool(colorful)
        self._commands = CommandRegistry()
        self._tokens = []
        self._cursor = 0
        self._invoked = None

    name = mirror("name")
    descr = mirror("descr")
    tokens = mirror("tokens")
    cursor = mirror("cursor")
    invoked = mirror("invoked")
    colorful = mirror("colorful")
    stream = mirror("stream")
    commands = property(lambda self: self._commands)

    @property
    def description(self):
        return self._descr

    @description.setter
    def description(self, descr):
        if not isinstance(descr, str):
            raise TypeError("interface 'descr' must be a string")
        self._descr = descr.strip() or None

    def add(self, command, /):
        """
        register an already built Command.
        """
        return self._commands.add(command)

    def command(self, source=Unset, /, descr=Unset):
        """
        register a command.

        modes
        - command(Command): register it as-is.
        - command(callable): wrap it (name from the function) and register it.
        - command("name", descr=...): return a decorator doing the same.
        """
        if isinstance(source, Command):
            return self.add(source)
        if callable(source):
            return self.add(_command(descr=descr)(source))

        @rename("command")
        def wrapper(callback, /):
            return self.add(_command(source, descr=descr)(callback))

        return wrapper

    def help(self, command=Unset, /, *, stderr=False):
        """
        print the global help, or the detailed help of `command`.
        """
        stream = self._errstream if stderr else self._stream
        output = rendering.console(stream, self._colorful, stderr=stderr)
        if command is Unset or command is None:
            output.print(rendering.global_help(self, colorful=self._colorful))
        else:
            output.print(rendering.command_help(self, command, colorful=self._colorful))

    def _report(self, fault, command):
        self.help(command, stderr=True)
        output = rendering.console(self._errstream, self._colorful, stderr=True)
        output.print(copy.replace(fault, colorful=self._colorful))

    @staticmethod
    def _tokenize(argv):
        if argv is Unset:
            return sys.argv[1:]
        if isinstance(argv, str):
            return shlex.split(argv)
        if isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("invoke() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    def _current(self):
        try:
            return self._tokens[self._cursor]
        except IndexError:
            return None

    def _select(self):
        if not self._tokens or self._tokens[0] in ("--help", "-h"):
            return None

        name = self._tokens[0]
        if (command := self._commands.find(name)) is None:
            suggestions = difflib.get_close_matches(name, self._commands.names(), 3)
            try:
                hint = "did you mean %r? run '%s --help' to list all commands" % (suggestions[0], self._name)
            except IndexError:
                hint = "run '%s --help' to list all commands" % self._name
            trigger(UnknownCommandError(
                "unrecognized command %r" % name,
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                hint=hint,
                input=name,
                suggestions=suggestions,
                command=None,
            ))

        self._cursor = 1
        return command

    def _coerce(self, command, spec, raw, subject, position):
        try:
            return coerce(spec.kind, raw)
        except ValueError as error:
            trigger(InvalidValueError(
                "invalid value for %s at %s position: %s" % (subject, ordinal(position), error),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                hint="run '%s %s --help' to see the expected types" % (self._name, command.name),
                input=raw,
                index=position,
                command=command,
            ))

    def _spaced(self, command):
        """
        take the next token as an option value, unless it is an option spelling itself.
        """
        if (token := self._current()) is None or token.partition("=")[0] in command.options:
            return None
        self._cursor += 1
        return token

    def _parse_options(self, command):
        while (token := self._current()) is not None and token.startswith("-"):
            position = self._cursor + 1
            name, separator, inline = token.partition("=")
            inline = inline if separator else None
            self._cursor += 1

            if (option := command.options.resolve(name)) is None:
                logger.debug("skipping unknown option %r at %s position", name, ordinal(position))
                continue

            if option.kind is ValueKind.NULL:
                if inline is not None:
                    trigger(FlagAssignmentError(
                        "option %r doesn't take a parameter" % name,
                        title="option takes no value",
                        code=FaultCode.FLAG_ASSIGNMENT,
                        hint="remove everything from '=' (for example: %s)" % name,
                        input=name,
                        index=position,
                        command=command,
                    ))
                option.bind(Value.boolean(True))
                continue

            if (raw := inline if inline is not None else self._spaced(command)) is None:
                trigger(OptionValueRequiredError(
                    "option %r at %s position requires a %s value" % (
                        name, ordinal(position), option.kind.label.lower()
                    ),
                    title="missing option value",
                    code=FaultCode.OPTION_VALUE_REQUIRED,
                    hint="pass it inline (%s=<%s>) or after a space" % (name, option.kind.label),
                    input=name,
                    index=position,
                    command=command,
                ))
            option.bind(self._coerce(command, option, raw, "option %r" % name, position))

    def _parse_arguments(self, command):
        expected = len(command.arguments)
        if (given := len(self._tokens) - self._cursor) < expected:
            trigger(MissingArgumentsError(
                "command %r requires %d argument%s, %d given" % (
                    command.name, expected, "" if expected == 1 else "s", given
                ),
                title="missing arguments",
                code=FaultCode.MISSING_ARGUMENTS,
                hint="run '%s %s --help' to see the expected order" % (self._name, command.name),
                expected=expected,
                given=given,
                command=command,
            ))

        for argument in command.arguments:
            position = self._cursor + 1
            raw = self._tokens[self._cursor]
            self._cursor += 1
            argument.bind(self._coerce(command, argument, raw, "argument %r" % argument.name, position))

        if self._cursor < len(self._tokens):
            logger.debug("ignoring %d extra token(s) after %r arguments", len(self._tokens) - self._cursor, command.name)

    def invoke(self, argv=Unset, /):
        """
        parse `argv` and dispatch; never exits the process.

        argv
        - Unset: sys.argv[1:].
        - str: split with shlex.split.
        - Iterable[str]: used as-is.
        """
        self._tokens = self._tokenize(argv)
        self._cursor = 0
        self._invoked = None

        command = None
        try:
            if (command := self._select()) is None:
                self.help()
                return Outcome(Status.HELP)

            command.reset()
            self._invoked = command
            self._parse_options(command)

            if command.helper.matched:
                self.help(command)
                return Outcome(Status.HELP, command)

            self._parse_arguments(command)
            logger.debug("dispatching %r", command.name)
            result = command(self)
        except CommandException as fault:
            logger.debug("run failed: %s", fault)
            self._report(fault, command)
            return Outcome(Status.FAILED, command, fault)

        return Outcome(Status.DISPATCHED, command, result=result)

    def run(self, argv=Unset, /):
        """
        invoke() and terminate the process with status 1 when the run failed.
        """
        outcome = self.invoke(argv)
        if outcome.status is Status.FAILED:
            sys.exit(outcome.exitcode)
        return outcome

    def _active(self):
        if self._invoked is None:
            raise RuntimeError("accessors are only available once a command has been invoked")
        return self._invoked

    get_number = _delegate("get_number")
    get_int = _delegate("get_int")
    get_boolean = _delegate("get_boolean")
    get_string = _delegate("get_string")
    get_flag = _delegate("get_flag")
    get_arg_number = _delegate("get_arg_number")
    get_arg_int = _delegate("get_arg_int")
    get_arg_boolean = _delegate("get_arg_boolean")
    get_arg_string = _delegate("get_arg_string")

    def __repr__(self):
        return "interface(name=%r, commands=%r)" % (self._name, self._commands.names())
