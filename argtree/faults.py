"""
argtree diagnostics (errors, warnings, infos) and their rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- Level: severity of a diagnostic (INFO < WARNING < ERROR, aligned with logging levels).
- Diagnostic: immutable record of one tokenizing/parsing problem. It carries the
  token index local to the command level that detected it, the depth of that
  level, the argument involved (if any) and the captured value count (if any),
  and knows how to render itself through rich.
- Outcome: composable success-or-diagnostics result used by value types,
  arguments and the parser.
- ParseFailure: raised by ParseReport.raise_if_errors() when a parse failed.
- ArgumentValueError / ValueNotice: what value types raise/warn to report
  problems with the values they receive.

UX goals
- Position-first messages: the renderer adds the ordinal position of the
  offending token in the whole input (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single hint.
- Styling is configurable via __styles__ in __main__; fault labels via __codes__.

Lifecycle
- Diagnostics are created where a problem is detected, stored by the level
  that detected it, never mutated, and finally copied (copy.replace) by the
  aggregator to attach the flattened token list and the global index.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, ordinal

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping (by high-level domain)
    - tokenizing (1120x)
      • TUPLE_ALREADY_OPEN, UNEXPECTED_TUPLE_CLOSE, TUPLE_NOT_CLOSED, STRING_NOT_CLOSED
    - binding (1121x)
      • ARGUMENT_NOT_FOUND, INCORRECT_VALUE_NUMBER, UNMATCHED_TOKEN,
        NAME_LIST_TAKE_VALUES, REQUIRED_ARGUMENT, REPEATED_ARGUMENT
    - values (1122x / 1222x)
      • INVALID_VALUE, TYPE_NOTICE
    - delegated callbacks (11131 / 12131)
      • DELEGATED_ERROR, DELEGATED_WARNING

    the host application can remap codes to its own labels through a __codes__
    mapping in __main__ (see normalize()).
    """
    # --- tokenizing errors (112xx) ---
    TUPLE_ALREADY_OPEN          = 11201
    UNEXPECTED_TUPLE_CLOSE      = 11202
    TUPLE_NOT_CLOSED            = 11203
    STRING_NOT_CLOSED           = 11204

    # --- binding errors (112xx) ---
    ARGUMENT_NOT_FOUND          = 11211
    INCORRECT_VALUE_NUMBER      = 11212
    UNMATCHED_TOKEN             = 11213
    NAME_LIST_TAKE_VALUES       = 11214
    REQUIRED_ARGUMENT           = 11215
    REPEATED_ARGUMENT           = 11216

    # --- value errors (112xx) ---
    INVALID_VALUE               = 11221

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- warnings / notices (12xxx) ---
    TYPE_NOTICE                 = 12221
    DELEGATED_WARNING           = 12131

    def normalize(self):
        """
        return a host-normalized string for this code.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Level(IntEnum):
    """
    severity of a diagnostic; values match the logging module levels.
    """
    INFO = 20
    WARNING = 30
    ERROR = 40

    @property
    def label(self):
        return self.name.lower()


_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",  # near-white program name
    "code": "bold #00E5FF",  # neon cyan fault code
    "error-title": "bold #FF4DA6",  # friendly pinky title
    "warning-title": "bold #FFB400",  # amber title for warnings
    "info-title": "bold #7FD4FF",  # soft blue title for infos

    # body
    "message": "#C8C8D0",  # soft light gray message
    "input": "#8A8FA0",  # dimmed echo of the input
    "error-token": "bold reverse #FF4DA6",  # offending token
    "warning-token": "bold reverse #FFB400",
    "info-token": "bold reverse #7FD4FF",
    "hint-arrow": "#9CE19C dim",  # gentle green arrow
    "hint": "italic #9CE19C",  # gentle green hint text
}


class Diagnostic:
    """
    Base type for every structured tokenizing/parsing problem.

    Subclasses only pin the class attributes below; the concrete message and
    hint are written at the detection site.

    Options
    - index: int, token index local to the command level (len(tokens) = “at the end”)
    - depth: int, nesting depth of that level (root = 0)
    - command: Command that detected the problem
    - argument: Argument involved, if any
    - count: captured value count, if any
    - hint: one-sentence suggestion
    - level: Level override (defaults to the class level)
    - tokens/position: flattened token list and global index, attached by the aggregator
    - colorful/fancy/prog: rendering options
    """
    __code__ = Unset
    __title__ = "diagnostic"
    __level__ = Level.ERROR

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return type(self).__code__

    @property
    def title(self):
        return type(self).__title__

    @property
    def level(self):
        return Level(self.options.get("level", type(self).__level__))

    @property
    def index(self):
        return self.options.get("index", 0)

    @property
    def depth(self):
        return self.options.get("depth", 0)

    @property
    def command(self):
        return self.options.get("command")

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def count(self):
        return self.options.get("count")

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def position(self):
        """
        global index in the flattened token list (falls back to the local index).
        """
        return self.options.get("position", self.index)

    def where(self):
        tokens = self.options.get("tokens")
        if tokens is None:
            return ""
        if self.position >= len(tokens):
            return "at the end of the input"
        return "at %s position" % ordinal(self.position + 1)

    def _context(self, styler):
        """
        Echo the flattened input with the offending token marked.

        Returns the rich Text and the caret line used in plain renders.
        """
        tokens = self.options.get("tokens")
        if tokens is None:
            return None, ""

        prog = self._prog()
        line = Text(prog, styler("input"))
        carets = " " * len(prog)
        marked = min(self.position, len(tokens))

        for index, token in enumerate(tokens):
            shown = token.display()
            line.append(" ")
            carets += " "
            if index == marked:
                line.append(shown, styler(self.level.label + "-token"))
                carets += "^" * max(len(shown), 1)
            else:
                line.append(shown, styler("input"))
                carets += " " * len(shown)

        if marked == len(tokens):
            line.append(" ")
            line.append(" ", styler(self.level.label + "-token"))
            carets += " ^"

        return line, carets.rstrip()

    def _prog(self):
        main = __import__("__main__")
        return str(getattr(main, "__prog__", self.options.get("prog", "")) or "")

    def _styler(self):
        styles = defaultdict(str, _STYLES | getattr(__import__("__main__"), "__styles__", {}))
        colorful = self.options.get("colorful", True)
        return lambda style: styles[style] if colorful else ""

    def _header(self, styler):
        return Text.assemble(
            "[ ",
            Text(self._prog() or self.level.label, styler("prog-name")),
            " — ",
            Text(self.code.normalize() if self.code else self.level.label, styler("code")),
            " | ",
            Text(self.title.title(), styler(self.level.label + "-title")),
            " ]",
        )

    def _body(self):
        where = self.where()
        return f"{self.message} {where}" if where else self.message

    def __rich__(self):
        styler = self._styler()
        parts = [Text(self._body(), styler("message"))]
        context, _ = self._context(styler)
        if context is not None:
            parts.append(context)
        if self.hint:
            parts.append(Text.assemble(Text(" → ", styler("hint-arrow")), Text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=self._header(styler), title_align="left")
        return Group(self._header(styler), *parts)

    def render(self):
        """
        Plain-text rendering (no colors), one string per diagnostic.
        """
        styler = lambda style: ""
        lines = [self._header(styler).plain, self._body()]
        context, carets = self._context(styler)
        if context is not None:
            lines.append(context.plain)
            lines.append(carets)
        if self.hint:
            lines.append(" → " + self.hint)
        return "\n".join(lines)

    def __str__(self):
        return self.render()

    def __repr__(self):
        return "%s(%r, index=%r, depth=%r, level=%s)" % (
            type(self).__name__, self.message, self.index, self.depth, self.level.name
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# --- tokenizing ---
class TupleAlreadyOpenError(Diagnostic):
    __code__ = FaultCode.TUPLE_ALREADY_OPEN
    __title__ = "tuple already open"

class UnexpectedTupleCloseError(Diagnostic):
    __code__ = FaultCode.UNEXPECTED_TUPLE_CLOSE
    __title__ = "unexpected tuple close"

class TupleNotClosedError(Diagnostic):
    __code__ = FaultCode.TUPLE_NOT_CLOSED
    __title__ = "tuple not closed"

class StringNotClosedError(Diagnostic):
    __code__ = FaultCode.STRING_NOT_CLOSED
    __title__ = "string not closed"

# --- binding ---
class ArgumentNotFoundError(Diagnostic):
    __code__ = FaultCode.ARGUMENT_NOT_FOUND
    __title__ = "argument not found"

class IncorrectValueNumberError(Diagnostic):
    __code__ = FaultCode.INCORRECT_VALUE_NUMBER
    __title__ = "incorrect number of values"

class UnmatchedTokenError(Diagnostic):
    __code__ = FaultCode.UNMATCHED_TOKEN
    __title__ = "unmatched token"

class NameListTakeValuesError(Diagnostic):
    __code__ = FaultCode.NAME_LIST_TAKE_VALUES
    __title__ = "clustered argument takes values"

class RequiredArgumentError(Diagnostic):
    __code__ = FaultCode.REQUIRED_ARGUMENT
    __title__ = "missing required argument"

class RepeatedArgumentError(Diagnostic):
    __code__ = FaultCode.REPEATED_ARGUMENT
    __title__ = "repeated argument"

# --- values and callbacks ---
class InvalidValueError(Diagnostic):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"

class TypeNotice(Diagnostic):
    __code__ = FaultCode.TYPE_NOTICE
    __title__ = "value notice"
    __level__ = Level.WARNING

class DelegatedCallbackError(Diagnostic):
    __code__ = FaultCode.DELEGATED_ERROR
    __title__ = "delegated callback error"

class DelegatedCallbackWarning(Diagnostic):
    __code__ = FaultCode.DELEGATED_WARNING
    __title__ = "delegated callback warning"
    __level__ = Level.WARNING


class ArgumentValueError(ValueError):
    """
    Raised by value types to reject the values they received.

    offset points at the offending value, relative to the first value of the
    argument (0 by default).
    """

    def __init__(self, message, /, offset=0):
        super().__init__(message)
        self.offset = offset


class ValueNotice(UserWarning):
    """
    Warned by value types to report a non-fatal remark on their values.

    The parser turns it into a diagnostic with the given level (WARNING by
    default, INFO never affects the exit code).
    """

    def __init__(self, message, /, level=Level.WARNING, offset=0):
        super().__init__(message)
        self.level = Level(level)
        self.offset = offset


class Outcome:
    """
    Either a success carrying a value, or a non-empty set of diagnostics.

    A success may still carry notes (diagnostics below ERROR). merge() keeps
    the left value when both sides succeeded and concatenates diagnostics
    otherwise.
    """
    __slots__ = ("_ok", "_value", "_diagnostics")

    def __init__(self, ok, value, diagnostics, /):
        self._ok = ok
        self._value = value
        self._diagnostics = tuple(diagnostics)

    @classmethod
    def success(cls, value=None, /, *notes):
        for note in notes:
            if not isinstance(note, Diagnostic):
                raise TypeError("outcome notes must be diagnostics")
            if note.level >= Level.ERROR:
                raise ValueError("a successful outcome cannot carry errors")
        return cls(True, value, notes)

    @classmethod
    def failure(cls, *diagnostics):
        if not diagnostics:
            raise ValueError("a failed outcome needs at least one diagnostic")
        if not all(isinstance(diagnostic, Diagnostic) for diagnostic in diagnostics):
            raise TypeError("outcome diagnostics must be diagnostics")
        return cls(False, Unset, diagnostics)

    @property
    def ok(self):
        return self._ok

    @property
    def diagnostics(self):
        return self._diagnostics

    def unpack(self, default=Unset, /):
        """
        Return the value of a success; for a failure return default, or raise
        ParseFailure when no default was given.
        """
        if self._ok:
            return self._value
        if default is not Unset:
            return default
        raise ParseFailure(self._diagnostics)

    def merge(self, other, /):
        if not isinstance(other, Outcome):
            raise TypeError("merge() argument must be an outcome")
        if self._ok and other._ok:
            return Outcome(True, self._value, self._diagnostics + other._diagnostics)
        return Outcome(False, Unset, self._diagnostics + other._diagnostics)

    def __bool__(self):
        return self._ok

    def __repr__(self):
        if self._ok:
            return f"outcome.success({self._value!r}, notes={len(self._diagnostics)})"
        return f"outcome.failure({len(self._diagnostics)} diagnostics)"


class ParseFailure(Exception):
    """
    A failed parse: every diagnostic at or above the exit level, plus the exit code.
    """

    def __init__(self, diagnostics, /, code=1):
        self.diagnostics = tuple(diagnostics)
        self.code = code
        super().__init__("parse failed with %d diagnostic%s" % (
            len(self.diagnostics), "" if len(self.diagnostics) == 1 else "s"
        ))

    def __rich__(self):
        return Group(*self.diagnostics)

    def __str__(self):
        return "\n".join([self.args[0], *(diagnostic.render() for diagnostic in self.diagnostics)])


def annotate(diagnostic, /, **options):
    """
    Copy a diagnostic with extra options, keeping the original untouched.
    """
    if not isinstance(diagnostic, Diagnostic):
        raise TypeError("annotate() argument must be a diagnostic")
    return copy.replace(diagnostic, **options)


__all__ = (
    "console",
    "FaultCode",
    "Level",
    "Diagnostic",
    "TupleAlreadyOpenError",
    "UnexpectedTupleCloseError",
    "TupleNotClosedError",
    "StringNotClosedError",
    "ArgumentNotFoundError",
    "IncorrectValueNumberError",
    "UnmatchedTokenError",
    "NameListTakeValuesError",
    "RequiredArgumentError",
    "RepeatedArgumentError",
    "InvalidValueError",
    "TypeNotice",
    "DelegatedCallbackError",
    "DelegatedCallbackWarning",
    "ArgumentValueError",
    "ValueNotice",
    "Outcome",
    "ParseFailure",
    "annotate",
)
