"""Substractor: the main API.

Usage:
    from substractor import Substractor

    s = Substractor()                                   # reusable, no state between calls

    s.matches("1.2.10", "*.*.??")                       # True
    s.subs("a.com/x.html b.net/y.php", "*.com/*.html")  # ["a.com/x.html"]
    s.macros("2.5.1", "{major}.{minor}.{patch}")        # {"major": "2", "minor": "5", "patch": "1"}
    s.macros_all("foo:bar hurf:durf", "{a}:{b}")        # {"a": ["foo", "hurf"], "b": ["bar", "durf"]}

Patterns may be a single pattern, a sequence of candidates, or a mapping of
key pattern → pattern, where a candidate is only tried when the subject
matches its key pattern. For macro extraction the candidate capturing the
most macros wins; ties go to the earliest.
"""

from __future__ import annotations
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union

from .patterns import compile_pattern
from .redaction import RedactionSpec, RedactionState, post_redact, pre_redact
from .replacer import Replacer
from .types import CompiledPattern, MacroMatch

logger = logging.getLogger(__name__)

PatternSpec = Union[str, Iterable[str], Mapping[object, str]]


@dataclass
class SubstractorConfig:
    """Configuration for the Substractor."""
    ignore_case: bool = False           # case-insensitive literals
    redact: RedactionSpec = None        # used when a call passes no redact


def _candidates(patterns: PatternSpec) -> list[tuple[str | None, str]]:
    """Normalize patterns to (key pattern, pattern) pairs; no key means ungated."""
    if isinstance(patterns, str):
        pairs: list[tuple[str | None, object]] = [(None, patterns)]
    elif isinstance(patterns, Mapping):
        pairs = [(key if isinstance(key, str) else None, p) for key, p in patterns.items()]
    elif isinstance(patterns, Iterable):
        pairs = [(None, p) for p in patterns]
    else:
        raise TypeError(f"unsupported pattern spec: {type(patterns).__name__}")

    for _, pattern in pairs:
        if not isinstance(pattern, str):
            raise TypeError(f"patterns must be strings, got {type(pattern).__name__}")
    return pairs  # type: ignore[return-value]


class Substractor:
    """Pattern matcher and extractor.

    matches: does the pattern occur anywhere in the subject
    subs: every substring matching any candidate pattern
    macros: named captures of the first occurrence
    macros_all: named captures of every occurrence
    replace: rewrite captured macros in place
    """

    def __init__(self, config: SubstractorConfig | None = None) -> None:
        self.config = config or SubstractorConfig()

    @property
    def flags(self) -> int:
        return re.IGNORECASE if self.config.ignore_case else 0

    def _redact(self, redact: RedactionSpec) -> RedactionSpec:
        return self.config.redact if redact is None else redact

    def _admits(self, subject: str, key: str | None) -> bool:
        """Key-pattern gate, evaluated against the unredacted subject."""
        if key is None:
            return True
        if compile_pattern(key, flags=self.flags).regex.search(subject):
            return True
        logger.debug("key pattern %r rejected subject", key)
        return False

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def matches(self, subject: str, pattern: str, redact: RedactionSpec = None) -> bool:
        """Whether the pattern occurs anywhere in the (redacted) subject."""
        compiled = compile_pattern(pattern, flags=self.flags)
        processed, _ = pre_redact(subject, self._redact(redact), [pattern])
        return compiled.regex.search(processed) is not None

    def subs(self, subject: str, patterns: PatternSpec, redact: RedactionSpec = None) -> list[str]:
        """Every non-overlapping substring matching a candidate, in candidate order."""
        candidates = _candidates(patterns)
        processed, state = pre_redact(subject, self._redact(redact), [p for _, p in candidates])

        found: list[str] = []
        for key, pattern in candidates:
            if not self._admits(subject, key):
                continue
            compiled = compile_pattern(pattern, flags=self.flags)
            found.extend(m.group() for m in compiled.regex.finditer(processed))

        return post_redact(found, state)

    # ------------------------------------------------------------------
    # Macro extraction
    # ------------------------------------------------------------------

    def find_macros(
        self,
        subject: str,
        patterns: PatternSpec,
        redact: RedactionSpec = None,
        *,
        all_occurrences: bool = False,
    ) -> list[MacroMatch]:
        """Captures of the best candidate, with offsets into ``subject``.

        The best candidate is the one capturing the most distinct macro
        names; the earliest wins ties. Returns ``[]`` when nothing matches.
        """
        candidates = _candidates(patterns)
        processed, state = pre_redact(subject, self._redact(redact), [p for _, p in candidates])

        best: list[MacroMatch] = []
        record = 0
        winner = None
        for index, (key, pattern) in enumerate(candidates):
            if not self._admits(subject, key):
                continue
            compiled = compile_pattern(pattern, macros=True, flags=self.flags)
            found = _capture(compiled, processed, state, all_occurrences)
            count = len({m.name for m in found})
            if count > record:
                record, best, winner = count, found, index

        logger.debug("candidate %s won with %d macro(s)", winner, record)
        return best

    def macros(self, subject: str, patterns: PatternSpec, redact: RedactionSpec = None) -> dict[str, str]:
        """Macro name → value for the first occurrence of the best candidate."""
        return {m.name: m.text for m in self.find_macros(subject, patterns, redact)}

    def macros_all(
        self, subject: str, patterns: PatternSpec, redact: RedactionSpec = None,
    ) -> dict[str, list[str]]:
        """Macro name → values for every occurrence of the best candidate."""
        names: dict[int, str] = {}
        values: dict[int, list[str]] = {}
        for m in self.find_macros(subject, patterns, redact, all_occurrences=True):
            names[m.group] = m.name
            values.setdefault(m.group, []).append(m.text)
        # A repeated name keeps the values of its last group
        return {names[group]: values[group] for group in sorted(values)}

    def pluck(
        self, subject: str, pattern: PatternSpec, name: str, redact: RedactionSpec = None,
    ) -> str | None:
        return self.macros(subject, pattern, redact).get(name)

    def pluck_all(
        self, subject: str, pattern: PatternSpec, name: str, redact: RedactionSpec = None,
    ) -> list[str]:
        return self.macros_all(subject, pattern, redact).get(name, [])

    def replace(self, subject: str, pattern: PatternSpec, redact: RedactionSpec = None) -> Replacer:
        """Return a Replacer over the macros the pattern captures in ``subject``."""
        return Replacer(subject, self.find_macros(subject, pattern, redact))


def _capture(
    compiled: CompiledPattern,
    processed: str,
    state: RedactionState,
    all_occurrences: bool,
) -> list[MacroMatch]:
    if all_occurrences:
        hits = list(compiled.regex.finditer(processed))
    else:
        hit = compiled.regex.search(processed)
        hits = [hit] if hit else []

    found: list[MacroMatch] = []
    for hit in hits:
        for group, name in enumerate(compiled.macro_names, start=1):
            start, end = state.original_span(*hit.span(group))
            found.append(MacroMatch(
                name=name,
                group=group,
                start=start,
                end=end,
                text=state.restore(hit.group(group) or ""),
            ))
    return found


# ----------------------------------------------------------------------
# Module-level API on a default instance
# ----------------------------------------------------------------------

_default = Substractor()


def matches(subject: str, pattern: str, redact: RedactionSpec = None) -> bool:
    return _default.matches(subject, pattern, redact)


def subs(subject: str, patterns: PatternSpec, redact: RedactionSpec = None) -> list[str]:
    return _default.subs(subject, patterns, redact)


def find_macros(
    subject: str, patterns: PatternSpec, redact: RedactionSpec = None, *, all_occurrences: bool = False,
) -> list[MacroMatch]:
    return _default.find_macros(subject, patterns, redact, all_occurrences=all_occurrences)


def macros(subject: str, patterns: PatternSpec, redact: RedactionSpec = None) -> dict[str, str]:
    return _default.macros(subject, patterns, redact)


def macros_all(subject: str, patterns: PatternSpec, redact: RedactionSpec = None) -> dict[str, list[str]]:
    return _default.macros_all(subject, patterns, redact)


def pluck(subject: str, pattern: PatternSpec, name: str, redact: RedactionSpec = None) -> str | None:
    return _default.pluck(subject, pattern, name, redact)


def pluck_all(subject: str, pattern: PatternSpec, name: str, redact: RedactionSpec = None) -> list[str]:
    return _default.pluck_all(subject, pattern, name, redact)


def replace(subject: str, pattern: PatternSpec, redact: RedactionSpec = None) -> Replacer:
    return _default.replace(subject, pattern, redact)
