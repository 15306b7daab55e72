"""
Character-level scanner turning raw input into per-command token sequences.

One Tokenizer is created per command level and per parse; it owns every bit of
scan state (open quote, open tuple, pending characters) so the command tree
itself is never touched. When a subcommand name is recognized the remainder of
the input is handed to a fresh Tokenizer for that subcommand and the current
level stops scanning.

Grammar (informal)
    input := token* (subcommand-name remainder | "--" forward)?
    token := quoted-string | tuple | long-name | name-cluster | bare-value
    tuple := OPEN token* CLOSE

Classification of a flushed chunk, first match wins
1. inside a string or a tuple → ARGUMENT_VALUE
2. long name of a declared argument ("--verbose") → ARGUMENT_ALIAS
3. prefix followed by a declared short name ("-vk") → ARGUMENT_NAME_LIST
4. name of a subcommand → delegation (no token at this level)
5. the forward marker "--" → FORWARD_VALUE holding the rest of the input
6. anything else → ARGUMENT_VALUE (positional candidate)
"""
from collections import namedtuple

from .faults import (
    StringNotClosedError,
    TupleAlreadyOpenError,
    TupleNotClosedError,
    UnexpectedTupleCloseError,
)
from .logs import get_logger
from .tokens import Token, TokenType

logger = get_logger(__name__)

QUOTES = ('"', "'")
FORWARD_MARKER = "--"

TokenizedCommand = namedtuple("TokenizedCommand", ("command", "depth", "tokens", "diagnostics", "child"))
TokenizedCommand.__doc__ = """
Product of tokenizing one command level.

- tokens: tuple[Token], local indices starting at 0
- diagnostics: tuple[Diagnostic] found while scanning this level
- child: TokenizedCommand of the subcommand the input was delegated to, or None
"""


class Tokenizer:
    """
    Scanner for one command level.

    Usage
        tokenized = Tokenizer(command).tokenize('--file "a b.txt" sub -x')
    """

    def __init__(self, command, /, depth=0):
        self.command = command
        self.depth = depth
        self.opener, self.closer = command.tuple_chars
        self.tokens = []
        self.diagnostics = []
        self.child = None
        self._content = ""
        self._pending = []
        self._quote = None
        self._tuple = False
        self._halted = False

    def tokenize(self, content, /):
        if not isinstance(content, str):
            raise TypeError("tokenize() argument must be a string")
        self._content = content

        aborted = False
        length = len(content)
        index = 0

        while index < length and not self._halted:
            char = content[index]

            if self._quote:
                if char == "\\" and index + 1 < length:
                    # escaped characters are copied verbatim
                    self._pending.append(content[index + 1])
                    index += 2
                    continue
                if char == self._quote:
                    self._emit(TokenType.ARGUMENT_VALUE, "".join(self._pending))
                    self._pending.clear()
                    self._quote = None
                else:
                    self._pending.append(char)
            elif char in QUOTES:
                if self._flush(index):
                    break
                self._quote = char
            elif char == self.opener:
                if self._flush(index):
                    break
                if self._tuple:
                    self._report(
                        TupleAlreadyOpenError,
                        "a tuple is already open, %r cannot open another one" % char,
                        hint="close the current tuple with %r before opening a new one" % self.closer,
                    )
                    aborted = True
                    break
                self._emit(TokenType.TUPLE_START, char)
                self._tuple = True
            elif char == self.closer:
                if self._flush(index):
                    break
                if not self._tuple:
                    self._report(
                        UnexpectedTupleCloseError,
                        "unexpected %r, there is no open tuple to close" % char,
                        hint="remove %r or open the tuple with %r" % (char, self.opener),
                    )
                    aborted = True
                    break
                self._emit(TokenType.TUPLE_END, char)
                self._tuple = False
            elif char.isspace() or char == "=":
                if self._flush(index + 1):
                    break
            else:
                self._pending.append(char)
            index += 1

        if not aborted and not self._halted:
            self._flush(length)
            if self._tuple:
                self._report(
                    TupleNotClosedError,
                    "the tuple opened with %r is never closed" % self.opener,
                    hint="close the tuple with %r" % self.closer,
                )
            if self._quote:
                self._report(
                    StringNotClosedError,
                    "the string opened with %s is never closed" % self._quote,
                    hint="close the string with a matching %s" % self._quote,
                )

        logger.debug("%s: %d token(s) %s", self.command.name, len(self.tokens), self.tokens)

        return TokenizedCommand(
            self.command,
            self.depth,
            tuple(self.tokens),
            tuple(self.diagnostics),
            self.child,
        )

    def _emit(self, type, contents):
        self.tokens.append(Token(type, contents, len(self.tokens)))

    def _report(self, kind, message, /, **options):
        # tokenizer diagnostics always point at the current end of the stream
        self.diagnostics.append(kind(
            message,
            index=len(self.tokens),
            depth=self.depth,
            command=self.command,
            **options
        ))

    def _classify(self, text):
        if self._tuple or self._quote:
            return TokenType.ARGUMENT_VALUE

        arguments = self.command.arguments
        if len(text) > 1 and text[0] == text[1] and any(argument.match_alias(text) for argument in arguments):
            return TokenType.ARGUMENT_ALIAS
        if len(text) > 1 and any(argument.match_name(text[0], text[1]) for argument in arguments):
            return TokenType.ARGUMENT_NAME_LIST
        if text in self.command.children:
            return TokenType.SUB_COMMAND
        if text == FORWARD_MARKER:
            return TokenType.FORWARD_VALUE
        return TokenType.ARGUMENT_VALUE

    def _flush(self, rest):
        """
        Classify and emit the pending chunk.

        rest is where the unconsumed input starts, handed to a subcommand on
        delegation. Returns True when this level must stop scanning.
        """
        if not self._pending:
            return False

        text = "".join(self._pending)
        self._pending.clear()

        match self._classify(text):
            case TokenType.SUB_COMMAND:
                child = self.command.children[text]
                logger.debug("%s: delegating %r to subcommand %r", self.command.name, self._content[rest:], text)
                self.child = Tokenizer(child, self.depth + 1).tokenize(self._content[rest:])
                self._halted = True
            case TokenType.FORWARD_VALUE:
                self._emit(TokenType.FORWARD_VALUE, self._content[rest:].strip())
                self._halted = True
            case kind:
                self._emit(kind, text)

        return self._halted


def tokenize(command, content, /):
    """
    Tokenize content for command and, recursively, the subcommand it delegates to.
    """
    return Tokenizer(command).tokenize(content)


__all__ = (
    "TokenizedCommand",
    "Tokenizer",
    "tokenize",
)
