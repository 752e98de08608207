"""Pattern compiler: Substractor patterns to regular expressions.

A Substractor pattern is literal text with two wildcards and named macros:

    "path/to/*.json"            "*" matches a run of non-whitespace characters
    "1.0.?"                     "?" matches exactly one character
    "{major}.{minor}.{patch}"   "{name}" captures a run of non-whitespace characters

Patterns are tokenized in one pass and emitted straight to ``re`` syntax:
literal runs go through ``re.escape`` and wildcards never do.
"""

from __future__ import annotations
import logging
import re
from functools import lru_cache

from .types import CompiledPattern, Token, TokenKind

logger = logging.getLogger(__name__)

# "{" + one or more non-whitespace, non-brace characters + "}"
_MACRO_TOKEN = re.compile(r"\{([^\s{}]+)\}")

_LAZY: dict[TokenKind, str] = {
    # Lazy, so "x1x" and "x2x" are found separately in "x1x x2x"
    TokenKind.STAR: r"\S*?",
    TokenKind.ONE: ".",
    TokenKind.MACRO: r"(\S*?)",
}

# The last wildcard of a pattern consumes to the end of its span
_GREEDY: dict[TokenKind, str] = {
    TokenKind.STAR: r"\S*",
    TokenKind.MACRO: r"(\S*)",
}


def tokenize(pattern: str, *, macros: bool = False) -> list[Token]:
    """Split a pattern into literal, wildcard and (optionally) macro tokens.

    Braces only form macro tokens when ``macros`` is set; unbalanced or
    empty braces are always literal text.
    """
    tokens: list[Token] = []
    literal: list[str] = []

    def flush() -> None:
        if literal:
            tokens.append(Token(TokenKind.LITERAL, "".join(literal)))
            literal.clear()

    pos = 0
    while pos < len(pattern):
        char = pattern[pos]
        macro = _MACRO_TOKEN.match(pattern, pos) if macros and char == "{" else None
        if char == "*":
            flush()
            # "**" describes the same strings as "*"
            if not tokens or tokens[-1].kind is not TokenKind.STAR:
                tokens.append(Token(TokenKind.STAR, char))
            pos += 1
        elif char == "?":
            flush()
            tokens.append(Token(TokenKind.ONE, char))
            pos += 1
        elif macro:
            flush()
            tokens.append(Token(TokenKind.MACRO, macro.group(1)))
            pos = macro.end()
        else:
            literal.append(char)
            pos += 1

    flush()
    return tokens


@lru_cache(maxsize=512)
def compile_pattern(pattern: str, *, macros: bool = False, flags: int = 0) -> CompiledPattern:
    """Compile a Substractor pattern.

    Args:
        pattern: The Substractor pattern.
        macros: Turn ``{name}`` tokens into capturing groups.
        flags: ``re`` flags, e.g. ``re.IGNORECASE``.
    """
    tokens = tokenize(pattern, macros=macros)
    last = len(tokens) - 1

    parts: list[str] = []
    for index, token in enumerate(tokens):
        if token.kind is TokenKind.LITERAL:
            parts.append(re.escape(token.text))
        elif index == last and token.kind in _GREEDY:
            parts.append(_GREEDY[token.kind])
        else:
            parts.append(_LAZY[token.kind])

    expression = "".join(parts)
    names = tuple(t.text for t in tokens if t.kind is TokenKind.MACRO)
    logger.debug("compiled %r -> %r (macros: %s)", pattern, expression, names)

    return CompiledPattern(
        source=pattern,
        expression=expression,
        regex=re.compile(expression, flags),
        macro_names=names,
    )
