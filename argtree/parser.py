"""
Token consumer: binds one level's tokens to the arguments of its command.

Flow
1. Parser(tokenized).parse() walks the tokens of one level with an explicit
   cursor, binds them to arguments, finalizes every declared argument and
   recurses into the delegated subcommand. No user code runs at this stage.
2. dispatch(parsed) then runs the user callbacks, outermost level first:
   argument callbacks for arguments bound without errors, then the command
   callback when its level produced no ERROR.

Binding rules (first match wins)
- ARGUMENT_ALIAS: the argument owning that long name consumes the next tokens.
- ARGUMENT_NAME_LIST: every character of the cluster is a short name; only the
  last one may consume values.
- ARGUMENT_VALUE / TUPLE_START: bound to the next free positional argument,
  as long as no named argument was seen at this level.
- FORWARD_VALUE: kept as the level's forward value.
- anything else: UnmatchedTokenError, the cursor moves by one.
"""
from collections import defaultdict, namedtuple

from .faults import (
    ArgumentNotFoundError,
    IncorrectValueNumberError,
    Level,
    NameListTakeValuesError,
    RepeatedArgumentError,
    UnmatchedTokenError,
)
from .logs import get_logger
from .results import ParsedArguments
from .tokens import TokenType

logger = get_logger(__name__)

ParsedCommand = namedtuple("ParsedCommand", ("command", "depth", "tokens", "diagnostics", "arguments", "bound", "child"))
ParsedCommand.__doc__ = """
Product of parsing one command level.

- tokens: the level's tokens (local indices)
- diagnostics: tokenizer and parser diagnostics of this level, local indices
- arguments: ParsedArguments of this level
- bound: ((argument, index), ...) arguments bound without errors, index of their first usage
- child: ParsedCommand of the delegated subcommand, or None
"""


class Parser:
    """
    Walker for one tokenized command level.

    All binding state is owned by the instance; a Parser is used once.
    """

    def __init__(self, tokenized, /):
        self.tokenized = tokenized
        self.command = tokenized.command
        self.depth = tokenized.depth
        self.tokens = tokenized.tokens
        self.diagnostics = list(tokenized.diagnostics)
        self._arguments = tuple(self.command.arguments)
        self._positionals = [argument for argument in self._arguments if argument.positional]
        self._results = defaultdict(list)
        self._anchors = {}
        self._failed = set()
        self._named = False
        self._forward = None

    @property
    def _context(self):
        return {"depth": self.depth, "command": self.command}

    def parse(self):
        cursor = 0
        while cursor < len(self.tokens):
            token = self.tokens[cursor]
            match token.type:
                case TokenType.ARGUMENT_ALIAS:
                    self._named = True
                    cursor = self._alias(token, cursor)
                case TokenType.ARGUMENT_NAME_LIST:
                    self._named = True
                    cursor = self._cluster(token, cursor)
                case TokenType.FORWARD_VALUE:
                    self._forward = token.contents
                    cursor += 1
                case TokenType.ARGUMENT_VALUE | TokenType.TUPLE_START if not self._named and self._positionals:
                    argument = self._positionals.pop(0)
                    cursor = self._consume(argument, cursor, cursor)
                case _:
                    self.diagnostics.append(UnmatchedTokenError(
                        "token %s does not match any argument of %r" % (token.display(), self.command.name),
                        index=cursor,
                        hint=(
                            "positional values must come before named arguments"
                            if self._named and token.type is TokenType.ARGUMENT_VALUE else
                            "remove it or check the command usage"
                        ),
                        **self._context
                    ))
                    cursor += 1

        values = self._finalize()
        child = Parser(self.tokenized.child).parse() if self.tokenized.child is not None else None

        arguments = ParsedArguments(
            self.command.name,
            values,
            used=self._anchors.keys(),
            child=child.arguments if child is not None else None,
            forward=self._forward,
        )
        bound = tuple(
            (argument, self._anchors[argument.identifier])
            for argument in self._arguments
            if argument.identifier in self._anchors and argument.identifier not in self._failed
        )
        return ParsedCommand(self.command, self.depth, self.tokens, tuple(self.diagnostics), arguments, bound, child)

    def _find(self, predicate):
        return next((argument for argument in self._arguments if predicate(argument)), None)

    def _alias(self, token, cursor):
        if (argument := self._find(lambda x: x.match_alias(token.contents))) is None:
            self.diagnostics.append(ArgumentNotFoundError(
                "argument %r not found in %r" % (token.contents, self.command.name),
                index=cursor,
                hint="check the spelling of the argument name",
                **self._context
            ))
            return cursor + 1
        return self._consume(argument, cursor + 1, cursor)

    def _cluster(self, token, cursor):
        """
        Bind every short name of a cluster ("-vkh").

        Switches bind with no values; only the last name may take values, from
        the tokens following the cluster.
        """
        prefix, names = token.contents[0], token.contents[1:]

        for offset, char in enumerate(names, 1):
            if (argument := self._find(lambda x: x.match_name(prefix, char))) is None:
                self.diagnostics.append(ArgumentNotFoundError(
                    "argument %r not found in %r" % (prefix + char, self.command.name),
                    index=cursor,
                    hint="check the short names in %r" % token.contents,
                    **self._context
                ))
            elif argument.arity.zero:
                self._bind(argument, cursor, cursor, ())
            elif offset == len(names):
                return self._consume(argument, cursor + 1, cursor)
            else:
                self.diagnostics.append(NameListTakeValuesError(
                    "argument %r takes values, it can only appear last in %r" % (prefix + char, token.contents),
                    index=cursor,
                    argument=argument,
                    hint="move %r to the end of the cluster or pass it on its own" % (prefix + char),
                    **self._context
                ))
                self._failed.add(argument.identifier)
                break
        return cursor + 1

    def _consume(self, argument, cursor, anchor):
        """
        Collect the values of argument starting at cursor; return the new cursor.

        anchor is the index of the token that selected the argument (the
        specifier, or the first value for positional arguments).
        """
        if argument.arity.zero:
            self._bind(argument, anchor, anchor, ())
            return cursor

        if cursor < len(self.tokens) and self.tokens[cursor].type is TokenType.TUPLE_START:
            end = cursor + 1
            while end < len(self.tokens) and self.tokens[end].type is not TokenType.TUPLE_END:
                end += 1
            if end == len(self.tokens):
                # unclosed tuple, already reported by the tokenizer
                self._anchors.setdefault(argument.identifier, anchor)
                self._failed.add(argument.identifier)
                return end
            values = self.tokens[cursor + 1:end]
            self._bind(argument, anchor, cursor + 1, [token.contents for token in values])
            return end + 1

        end = cursor
        while (
                end < len(self.tokens)
                and end - cursor < argument.arity.max
                and self.tokens[end].type is TokenType.ARGUMENT_VALUE
                and not self._specifier(argument, self.tokens[end])
        ):
            end += 1
        self._bind(argument, anchor, cursor, [token.contents for token in self.tokens[cursor:end]])
        return end

    @staticmethod
    def _specifier(argument, token):
        """
        A value written with the prefix of a named argument ("-z" for "--list")
        ends greedy consumption; use a tuple to pass such values.
        """
        return argument.prefix is not None and token.contents.startswith(argument.prefix)

    def _bind(self, argument, anchor, first, values):
        identifier = argument.identifier
        logger.debug("%s: binding %r to %r at %d", self.command.name, values, identifier, anchor)

        if identifier in self._anchors and not argument.repeatable:
            self.diagnostics.append(RepeatedArgumentError(
                "argument %r was already given" % argument.display(),
                index=anchor,
                argument=argument,
                hint="pass %r only once" % argument.display(),
                **self._context
            ))
            self._failed.add(identifier)
            return
        self._anchors.setdefault(identifier, anchor)

        if len(values) not in argument.arity:
            self.diagnostics.append(IncorrectValueNumberError(
                "argument %r expects %s, %d given" % (argument.display(), argument.arity.message(), len(values)),
                index=anchor,
                argument=argument,
                count=len(values),
                hint=(
                    "use a tuple like %sa b%s to pass several values explicitly" % tuple(self.command.tuple_chars)
                    if argument.arity.max > 1 else
                    "pass %s" % argument.arity.message()
                ),
                **self._context
            ))
            self._failed.add(identifier)
            return

        outcome = argument.parse_values(values, index=first, **self._context)
        self.diagnostics.extend(outcome.diagnostics)
        if outcome:
            self._results[identifier].append(outcome.unpack())
        else:
            self._failed.add(identifier)

    def _finalize(self):
        values = {}
        for argument in self._arguments:
            identifier = argument.identifier
            # usages that failed keep the values bound by the other ones
            if identifier in self._failed and not self._results[identifier]:
                values[identifier] = argument.default
                continue
            outcome = argument.finalize(self._results[identifier], index=len(self.tokens), **self._context)
            self.diagnostics.extend(outcome.diagnostics)
            values[identifier] = outcome.unpack(argument.default)
        return values


def dispatch(parsed, /):
    """
    Run user callbacks over a parsed tree, outermost level first.

    Returns a new tree whose diagnostics include the delegated ones.
    """
    context = {"depth": parsed.depth, "command": parsed.command}
    diagnostics = list(parsed.diagnostics)

    for argument, index in parsed.bound:
        outcome = argument.invoke(parsed.arguments[argument.identifier], index=index, **context)
        diagnostics.extend(outcome.diagnostics)

    if not any(diagnostic.level >= Level.ERROR for diagnostic in diagnostics):
        outcome = parsed.command.invoke(parsed.arguments, index=len(parsed.tokens), **context)
        diagnostics.extend(outcome.diagnostics)

    return parsed._replace(
        diagnostics=tuple(diagnostics),
        child=dispatch(parsed.child) if parsed.child is not None else None,
    )


def parse(tokenized, /):
    """
    Parse a tokenized tree and run its callbacks.
    """
    return dispatch(Parser(tokenized).parse())


__all__ = (
    "ParsedCommand",
    "Parser",
    "dispatch",
    "parse",
)
