"""
Merge the diagnostics of every command level into one ordered report.

Levels are visited outermost first. The flattened token list is the root
tokens followed, for each delegated subcommand, by a SUB_COMMAND marker token
and that subcommand's tokens:

    prog --verbose build --jobs 4
         [--verbose] [build] [--jobs] [4]
          root 0      marker  child 0  child 1

so a child's local index i becomes i + (tokens of shallower levels) + depth.
"""
from .faults import Level, annotate
from .logs import get_logger
from .tokens import Token, TokenType

logger = get_logger(__name__)


def levels(parsed, /):
    """
    Yield the parsed levels of a tree, outermost first.
    """
    while parsed is not None:
        yield parsed
        parsed = parsed.child


class ErrorAggregator:
    """
    Ordered, globally indexed view over the diagnostics of a parsed tree.

    Options
    - exit_level: Level, diagnostics at or above it make the parse fail (ERROR).
    - display_level: Level, diagnostics below it are not rendered (INFO).
    """

    def __init__(self, parsed, /, exit_level=Level.ERROR, display_level=Level.INFO):
        self.parsed = parsed
        self.exit_level = Level(exit_level)
        self.display_level = Level(display_level)
        self.levels = tuple(levels(parsed))
        self.tokens = self._flatten()
        self.diagnostics = self._collect()

    def _flatten(self):
        tokens = []
        for depth, level in enumerate(self.levels):
            if depth:
                tokens.append(Token(TokenType.SUB_COMMAND, level.command.name, len(tokens)))
            base = len(tokens)
            tokens.extend(Token(token.type, token.contents, base + token.index) for token in level.tokens)
        return tuple(tokens)

    def _collect(self):
        prog = self.levels[0].command.name
        offset = 0
        diagnostics = []

        for depth, level in enumerate(self.levels):
            # sorted() is stable: ties keep their detection order
            for diagnostic in sorted(level.diagnostics, key=lambda x: x.index):
                diagnostics.append(annotate(
                    diagnostic,
                    tokens=self.tokens,
                    position=diagnostic.index + offset + depth,
                    prog=prog,
                    colorful=level.command.colorful,
                    fancy=level.command.fancy,
                ))
            offset += len(level.tokens)

        logger.debug("%d diagnostic(s) over %d level(s)", len(diagnostics), len(self.levels))
        return tuple(diagnostics)

    @property
    def failing(self):
        """
        Diagnostics at or above the exit level.
        """
        return tuple(diagnostic for diagnostic in self.diagnostics if diagnostic.level >= self.exit_level)

    @property
    def displayed(self):
        return tuple(diagnostic for diagnostic in self.diagnostics if diagnostic.level >= self.display_level)

    @property
    def has_errors(self):
        return bool(self.failing)

    @property
    def error_code(self):
        """
        Error code of the innermost tokenized command when the parse failed, else 0.
        """
        if not self.has_errors:
            return 0
        return self.levels[-1].command.error_code

    @property
    def messages(self):
        return tuple(diagnostic.render() for diagnostic in self.displayed)


__all__ = (
    "ErrorAggregator",
)
