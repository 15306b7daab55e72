"""
argtree command layer: declare command trees and parse inputs against them.

What this module provides
- TupleChars: the delimiter pairs available for explicit value tuples.
- Command: a node of the command tree holding arguments and subcommands.
  • Fluent configuration: add_argument(), add_command(), set_error_code(),
    set_tuple_chars() validate immediately and return the command.
  • error_code, tuple_chars, colorful and fancy are inherited from the nearest
    ancestor that sets them.
- ArgumentParser: the root command; parse(input) runs the whole pipeline
  (tokenize, bind, dispatch callbacks, aggregate) and returns a ParseReport.
- ParseReport: everything a caller needs after a parse: values, diagnostics,
  rendered messages and the exit code.

Quick start
    from argtree import ArgumentParser, Argument, Command, Boolean

    parser = ArgumentParser("tool").add_argument(Argument("-v", "--verbose", type=Boolean))
    build = Command("build", error_code=3).add_argument(Argument("--jobs", "-j", type=int))
    parser.add_command(build)

    report = parser.parse("-v build --jobs 4")
    report.exit_if_errors()
    print(report.parsed.get("build.jobs"))

Design notes
- The tree is a declaration only: every parse builds fresh tokenizer and
  parser state, so one tree can be parsed any number of times.
- Input errors never raise; they are diagnostics in the report. Definition
  errors raise TypeError/ValueError right where the tree is built.
"""
import os.path
import sys
import warnings
from collections.abc import Iterable
from enum import Enum

from rich.console import Group

from .aggregator import ErrorAggregator
from .arguments import Argument
from .faults import (
    DelegatedCallbackError,
    DelegatedCallbackWarning,
    Level,
    Outcome,
    ParseFailure,
    console,
)
from .logs import get_logger
from .parser import parse as consume
from .tokenizer import QUOTES, tokenize
from .utils import *

logger = get_logger(__name__)


class TupleChars(Enum):
    """
    Delimiter pairs for explicit value tuples ("--files [a.txt b.txt]").
    """
    SQUARE_BRACKETS = ("[", "]")
    PARENTHESIS = ("(", ")")
    BRACES = ("{", "}")
    ANGLE_BRACKETS = ("<", ">")

    @property
    def opener(self):
        return self.value[0]

    @property
    def closer(self):
        return self.value[1]

    def __iter__(self):
        return iter(self.value)


def _sanitize_name(cls, name, /, strict=True):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif strict and not name.isalpha():
        raise ValueError(f"{cls.__typename__} 'name' must only contain letters")
    elif any(char.isspace() for char in name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespaces")
    return name


def _sanitize_error_code(cls, error_code, /):
    if error_code is Unset:
        return error_code
    if not isinstance(error_code, int) or isinstance(error_code, bool):
        raise TypeError(f"{cls.__typename__} 'error_code' must be an integer")
    elif error_code <= 0:
        raise ValueError(f"{cls.__typename__} 'error_code' must be greater than zero")
    return error_code


def _sanitize_tuple_chars(cls, tuple_chars, /):
    if tuple_chars is Unset or isinstance(tuple_chars, TupleChars):
        return tuple_chars
    try:
        return TupleChars(tuple(tuple_chars))
    except (TypeError, ValueError):
        raise ValueError(f"{cls.__typename__} 'tuple_chars' must be one of the tuple-chars pairs") from None


def _sanitize_options(cls, metadata, /):
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    for name in ("colorful", "fancy"):
        if metadata[name] is not Unset:
            metadata[name] = bool(metadata[name])

    if not callable(callback := metadata["callback"]) and callback is not Unset:
        raise TypeError(f"{cls.__typename__} 'callback' must be callable")


class Command(metaclass=IntrospectableType):
    """
    Node of a command tree.

    Responsibilities
    - Hold the declared arguments (named and positional, in declaration order).
    - Hold subcommands by name; the tokenizer delegates the rest of the input
      to a subcommand when its name appears.
    - Resolve inherited settings (error_code, tuple_chars, colorful, fancy).
    - Run its callback with the ParsedArguments of its level.
    """

    __introspectable__ = (
        "name",
        "descr",
        "parent",
        "children",
        "arguments",
        "callback",
    )

    __displayable__ = (
        "name",
        "descr",
        "arguments",
        "children",
        "error_code",
    )

    def __init__(
            self,
            name,
            /,
            descr=Unset,
            *,
            error_code=Unset,
            tuple_chars=Unset,
            callback=Unset,
            colorful=Unset,
            fancy=Unset
    ):
        """
        Parameters
        - name: str, letters only for subcommands.
        - descr: short description.
        - error_code: int > 0, exit code when this command is the innermost one
          of a failed parse (inherited, 1 at the root).
        - tuple_chars: TupleChars or an (opener, closer) pair (inherited,
          square brackets at the root).
        - callback: Callable[[ParsedArguments], Any], run when the level parsed
          without errors.
        - colorful/fancy: rendering of diagnostics (inherited).
        """
        metadata = {
            "descr": descr,
            "callback": callback,
            "colorful": colorful,
            "fancy": fancy,
        }
        _sanitize_options(type(self), metadata)

        self._name = _sanitize_name(type(self), name, strict=not isinstance(self, ArgumentParser))
        self._error_code = _sanitize_error_code(type(self), error_code)
        self._tuple_chars = _sanitize_tuple_chars(type(self), tuple_chars)
        self._parent = None
        self._children = {}
        self._arguments = ()
        for key, object in metadata.items():
            setattr(self, "_" + key, object)

    def _inherited(self, name, default, /):
        command = self
        while command is not None:
            if (value := getattr(command, "_" + name)) is not Unset:
                return value
            command = command._parent
        return default

    @property
    def error_code(self):
        return self._inherited("error_code", 1)

    @property
    def tuple_chars(self):
        return self._inherited("tuple_chars", TupleChars.SQUARE_BRACKETS)

    @property
    def colorful(self):
        return self._inherited("colorful", True)

    @property
    def fancy(self):
        return self._inherited("fancy", False)

    @property
    def root(self):
        command = self
        while command._parent is not None:
            command = command._parent
        return command

    @property
    def path(self):
        """
        Names from the root down to this command.
        """
        return tuple(command._name for command in self._lineage())

    def set_error_code(self, error_code, /):
        self._error_code = _sanitize_error_code(type(self), error_code)
        return self

    def set_tuple_chars(self, tuple_chars, /):
        self._tuple_chars = _sanitize_tuple_chars(type(self), tuple_chars)
        return self

    def add_argument(self, argument, /, *names, **options):
        """
        Declare an argument.

        Forms
        - add_argument(Argument("-v", "--verbose", type=Boolean))
        - add_argument(decorated), where decorated comes from @argument(...)
        - add_argument("-v", "--verbose", type=Boolean): shorthand building the Argument
        """
        if isinstance(argument, str):
            argument = Argument(argument, *names, **options)
        elif names or options:
            raise TypeError("add_argument() takes extra names and options only with a string name")
        elif hasattr(argument, "__argument__"):
            argument = argument.__argument__()

        if not isinstance(argument, Argument):
            raise TypeError("add_argument() argument must be an argument")
        for other in self._arguments:
            if argument.conflicts(other):
                raise ValueError(
                    f"{type(self).__typename__} {self._name!r} already has an argument named like {argument.display()!r}"
                )

        self._arguments += (argument,)
        logger.debug("%s: added %r", self._name, argument)
        return self

    def add_command(self, command, /):
        if not isinstance(command, Command):
            raise TypeError("add_command() argument must be a command")
        elif isinstance(command, ArgumentParser):
            raise TypeError("add_command() argument cannot be an argument-parser")
        elif command._parent is not None:
            raise ValueError(f"{type(command).__typename__} {command._name!r} already belongs to {command._parent._name!r}")
        elif command in self._lineage():
            raise ValueError(f"{type(command).__typename__} {command._name!r} cannot be its own subcommand")
        elif self._children.setdefault(command._name, command) is not command:
            raise ValueError(f"{type(self).__typename__} subcommand name {command._name!r} is already in use")

        command._parent = self
        return self

    def _lineage(self):
        commands = []
        command = self
        while command is not None:
            commands.append(command)
            command = command._parent
        return tuple(reversed(commands))

    def command(self, name, /, *args, **kwargs):
        """
        Create a subcommand, attach it and return it.
        """
        self.add_command(command := Command(name, *args, **kwargs))
        return command

    def argument(self, *args, **kwargs):
        """
        Decorator declaring an argument whose callback is the decorated function.

        Usage
            @parser.argument("--threads", "-t", type=int)
            def on_threads(threads): ...
        """
        if "callback" in kwargs:
            raise TypeError("@argument() binds the decorated function as callback")

        @rename("argument")
        def wrapper(callback, /):
            if not callable(callback):
                raise TypeError("@argument() must be applied to a callable")
            self.add_argument(Argument(*args, callback=callback, **kwargs))
            return callback

        return wrapper

    def handle(self, callback, /):
        """
        Bind the command callback; usable as a decorator.
        """
        if not callable(callback):
            raise TypeError(f"{type(self).__typename__} 'callback' must be callable")
        self._callback = callback
        return callback

    def invoke(self, arguments, /, **context):
        """
        Run the command callback with the ParsedArguments of its level.
        """
        if self._callback is Unset:
            return Outcome.success()

        try:
            with warnings.catch_warnings(record=True) as captured:
                warnings.simplefilter("always")
                self._callback(arguments)
        except Exception as exception:
            return Outcome.failure(DelegatedCallbackError(
                "something occurred in the callback of command %r: %s" % (self._name, exception),
                exception=exception,
                hint="check additional logs for more details",
                **context
            ))

        return Outcome.success(None, *(
            DelegatedCallbackWarning(
                "the callback of command %r warned: %s" % (self._name, warning.message),
                warning=warning.message,
                hint="check additional logs for more details",
                **context
            )
            for warning in captured
        ))


def _quote(item):
    if item and not any(char.isspace() or char in QUOTES for char in item):
        return item
    return '"%s"' % item.replace("\\", "\\\\").replace('"', '\\"')


def _join(input):
    """
    Normalize a parse input into one string.

    - Unset: sys.argv[1:].
    - str: used as-is.
    - Iterable[str]: items joined by spaces, quoting the ones that hold
      whitespaces or quotes (or are empty) so they stay single values.
    """
    if input is Unset:
        input = sys.argv[1:]
    if isinstance(input, str):
        return input
    if isinstance(input, Iterable):
        parts = []
        for item in input:
            if not isinstance(item, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
            parts.append(_quote(item))
        return " ".join(parts)
    raise TypeError("parse() argument must be a string or an iterable of strings")


class ParseReport:
    """
    Result of ArgumentParser.parse().

    Properties
    - parsed: ParsedArguments of the root (always available, defaults fill in
      arguments that failed).
    - diagnostics: every diagnostic, ordered by depth then token index.
    - messages: rendered diagnostics at or above the display level.
    - has_errors / error_code: whether the parse failed, and the exit code.
    - outcome: Outcome of parsed (failure carries the failing diagnostics).
    - tokens: flattened token list with SUB_COMMAND markers.
    - forward_value: text after "--" at the deepest level that had one.
    """

    def __init__(self, aggregator, /, console=console):
        self._aggregator = aggregator
        self._console = console

    @property
    def parsed(self):
        return self._aggregator.parsed.arguments

    @property
    def diagnostics(self):
        return self._aggregator.diagnostics

    @property
    def messages(self):
        return self._aggregator.messages

    @property
    def has_errors(self):
        return self._aggregator.has_errors

    @property
    def error_code(self):
        return self._aggregator.error_code

    @property
    def tokens(self):
        return self._aggregator.tokens

    @property
    def forward_value(self):
        forward = None
        for level in self._aggregator.levels:
            if level.arguments.forward is not None:
                forward = level.arguments.forward
        return forward

    @property
    def outcome(self):
        if self.has_errors:
            return Outcome.failure(*self._aggregator.failing)
        return Outcome.success(self.parsed, *self.diagnostics)

    def print_errors(self):
        for diagnostic in self._aggregator.displayed:
            self._console.print(diagnostic)

    def exit_if_errors(self):
        """
        Print the diagnostics and exit with error_code when the parse failed.
        """
        if self.has_errors:
            self.print_errors()
            sys.exit(self.error_code)

    def raise_if_errors(self):
        if self.has_errors:
            raise ParseFailure(self._aggregator.failing, self.error_code)

    def __rich__(self):
        return Group(*self._aggregator.displayed)

    def __repr__(self):
        return "parse-report(error_code=%r, diagnostics=%d)" % (self.error_code, len(self.diagnostics))


class ArgumentParser(Command):
    """
    Root command of a tree; entry point of every parse.

    Options (on top of Command)
    - exit_level: Level, diagnostics at or above it make the parse fail (ERROR,
      WARNING makes warnings fatal too).
    - display_level: Level, diagnostics below it are not rendered (INFO).
    """

    def __init__(
            self,
            name=Unset,
            /,
            descr=Unset,
            *,
            exit_level=Level.ERROR,
            display_level=Level.INFO,
            **options
    ):
        super().__init__(coalesce(name, os.path.basename(sys.argv[0]) or "prog"), descr, **options)
        try:
            self._exit_level = Level(exit_level)
            self._display_level = Level(display_level)
        except ValueError:
            raise ValueError(f"{type(self).__typename__} 'exit_level' and 'display_level' must be levels") from None
        if self._exit_level < Level.WARNING:
            raise ValueError(f"{type(self).__typename__} 'exit_level' must be WARNING or ERROR")

    @property
    def exit_level(self):
        return self._exit_level

    @property
    def display_level(self):
        return self._display_level

    def parse(self, input=Unset, /):
        """
        Parse input against the tree.

        Parameters
        - input: Unset (sys.argv[1:]) | str | Iterable[str]

        Returns
        - ParseReport, whatever the input: errors are reported, never raised.
        """
        content = _join(input)
        logger.debug("%s: parsing %r", self._name, content)

        parsed = consume(tokenize(self, content))
        return ParseReport(ErrorAggregator(parsed, self._exit_level, self._display_level))


__all__ = (
    "TupleChars",
    "Command",
    "ArgumentParser",
    "ParseReport",
)
