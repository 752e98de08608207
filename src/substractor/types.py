"""Core types."""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    LITERAL = "literal"
    STAR = "star"          # *, a run of non-whitespace
    ONE = "one"            # ?, exactly one character
    MACRO = "macro"        # {name}


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical unit of a Substractor pattern."""
    kind: TokenKind
    text: str              # literal text, wildcard char, or macro name


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A Substractor pattern translated to a regular expression."""
    source: str                                  # the Substractor pattern
    expression: str                              # the regex text
    regex: re.Pattern
    macro_names: tuple[str, ...] = field(default_factory=tuple)  # group order


@dataclass(frozen=True, slots=True)
class MacroMatch:
    """A single captured macro occurrence."""
    name: str
    group: int             # 1-based capture group in the compiled pattern
    start: int             # offsets into the original subject
    end: int
    text: str              # captured value with redactions resolved


class RedactionMode(Enum):
    FULL = "full"          # removed before matching, never restored
    PRE = "pre"            # hidden before matching, restored in results
    POST = "post"          # matched as-is, stripped from results
