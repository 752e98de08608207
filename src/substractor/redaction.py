"""Redaction: per-call substitution of substrings around a match.

Each target substring gets one of three modes:

  - FULL: removed before matching, stays removed
  - PRE:  swapped for a placeholder before matching, restored in every result
  - POST: matched as-is, stripped from every result

Design goals:
  - One state per call: nothing is shared between calls
  - Single pass: FULL and PRE targets are substituted in one sweep over the
    original subject, so a placeholder is never itself re-substituted
  - Offset-preserving: every processed character remembers the span of the
    original subject it came from
"""

from __future__ import annotations
import itertools
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from typing import Union

from .types import RedactionMode

logger = logging.getLogger(__name__)

# Placeholders are single private-use code points: no whitespace, no case,
# and "?" consumes a whole one.
_PRIVATE_USE = (range(0xE000, 0xF900), range(0xF0000, 0xFFFFE), range(0x100000, 0x10FFFE))

RedactionSpec = Union[str, Iterable[str], Mapping[str, object], None]


def normalize_redactions(spec: RedactionSpec) -> dict[str, RedactionMode]:
    """Turn a redaction spec into a target → mode mapping.

    A bare string or a sequence of strings means PRE for each target. In a
    mapping, ``True`` means FULL, ``False`` means POST and anything else
    (``None`` included) means PRE. Empty targets are ignored.
    """
    if not spec:
        return {}

    if isinstance(spec, str):
        items: Iterable[tuple[object, object]] = [(spec, None)]
    elif isinstance(spec, Mapping):
        items = spec.items()
    elif isinstance(spec, Iterable):
        items = [(target, None) for target in spec]
    else:
        raise TypeError(f"unsupported redaction spec: {type(spec).__name__}")

    modes: dict[str, RedactionMode] = {}
    for target, value in items:
        if not isinstance(target, str):
            raise TypeError(f"redaction targets must be strings, got {type(target).__name__}")
        if not target:
            continue
        if value is True:
            modes[target] = RedactionMode.FULL
        elif value is False:
            modes[target] = RedactionMode.POST
        else:
            modes[target] = RedactionMode.PRE
    return modes


def _alternation(strings: Iterable[str]) -> re.Pattern:
    # Longest first so a target never loses to one of its own prefixes
    return re.compile("|".join(re.escape(s) for s in sorted(strings, key=len, reverse=True)))


class RedactionState:
    """Redactions applied to one subject, and how to undo them."""

    __slots__ = (
        "_modes", "_reserved", "_codepoints", "_target_to_token", "_token_to_target",
        "_restore_pattern", "_starts", "_ends",
    )

    def __init__(self, spec: RedactionSpec = None) -> None:
        self._modes = normalize_redactions(spec)
        self._reserved: frozenset[str] = frozenset()
        self._codepoints = _codepoints()
        self._target_to_token: dict[str, str] = {}    # " " → "\ue000"
        self._token_to_target: dict[str, str] = {}    # "\ue000" → " "
        self._restore_pattern: re.Pattern | None = None
        # Per processed character: the original span it came from
        self._starts: list[int] | None = None
        self._ends: list[int] | None = None

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def targets(self, mode: RedactionMode) -> list[str]:
        return [t for t, m in self._modes.items() if m is mode]

    def get_or_create_token(self, target: str) -> str:
        """Return the placeholder for a PRE target, creating it if needed."""
        if target in self._target_to_token:
            return self._target_to_token[target]

        for codepoint in self._codepoints:
            token = chr(codepoint)
            if token not in self._reserved:
                break
        else:
            raise ValueError("no free private-use code point left for a placeholder")
        self._target_to_token[target] = token
        self._token_to_target[token] = target
        self._restore_pattern = None
        return token

    def apply(self, text: str, reserved: Iterable[str] = ()) -> str:
        """Remove FULL targets and hide PRE targets behind placeholders.

        Placeholders are chosen from characters absent from ``text`` and from
        every ``reserved`` string (the patterns about to run), so no pattern
        literal can match one.
        """
        self._starts = self._ends = None

        hidden = [t for t, m in self._modes.items() if m is not RedactionMode.POST]
        if not hidden:
            return text

        self._reserved = frozenset(text).union(*reserved)
        self._codepoints = _codepoints()
        self._target_to_token.clear()
        self._token_to_target.clear()
        self._restore_pattern = None

        parts: list[str] = []
        starts: list[int] = []
        ends: list[int] = []

        def keep(begin: int, end: int) -> None:
            parts.append(text[begin:end])
            starts.extend(range(begin, end))
            ends.extend(range(begin + 1, end + 1))

        pos = 0
        for m in _alternation(hidden).finditer(text):
            keep(pos, m.start())
            if self._modes[m.group()] is RedactionMode.PRE:
                parts.append(self.get_or_create_token(m.group()))
                starts.append(m.start())
                ends.append(m.end())
            pos = m.end()
        keep(pos, len(text))

        # Sentinel for empty spans at the very end
        starts.append(len(text))

        self._starts, self._ends = starts, ends
        processed = "".join(parts)
        logger.debug(
            "redacted %d target(s), %d placeholder(s), %d -> %d chars",
            len(hidden), len(self._token_to_target), len(text), len(processed),
        )
        return processed

    def restore(self, text: str) -> str:
        """Put PRE targets back, then strip POST targets."""
        if self._token_to_target:
            if self._restore_pattern is None:
                self._restore_pattern = _alternation(self._token_to_target)
            text = self._restore_pattern.sub(lambda m: self._token_to_target[m.group()], text)

        stripped = self.targets(RedactionMode.POST)
        if stripped:
            text = _alternation(stripped).sub("", text)
        return text

    def original_span(self, start: int, end: int) -> tuple[int, int]:
        """Map a span of the processed text back to the original subject."""
        if self._starts is None or self._ends is None:
            return start, end
        if end > start:
            return self._starts[start], self._ends[end - 1]
        pos = self._starts[start]
        return pos, pos

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def modes(self) -> dict[str, RedactionMode]:
        return dict(self._modes)

    @property
    def size(self) -> int:
        return len(self._token_to_target)

    def dump(self) -> dict[str, str]:
        """Return a copy of the placeholder → target mapping (for debugging)."""
        return dict(self._token_to_target)


def _codepoints() -> Iterator[int]:
    return itertools.chain.from_iterable(_PRIVATE_USE)


def pre_redact(
    text: str, spec: RedactionSpec, reserved: Iterable[str] = (),
) -> tuple[str, RedactionState]:
    """Redact a subject, returning the processed text and its state."""
    state = RedactionState(spec)
    return state.apply(text, reserved), state


def post_redact(strings: Iterable[str], state: RedactionState) -> list[str]:
    """Resolve redactions in extracted strings."""
    return [state.restore(s) for s in strings]
