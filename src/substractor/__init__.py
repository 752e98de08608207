"""Substractor: wildcard and macro patterns for matching and extracting substrings."""

import logging

from .extractor import (
    Substractor, SubstractorConfig,
    matches, subs, find_macros, macros, macros_all, pluck, pluck_all, replace,
)
from .patterns import compile_pattern, tokenize
from .redaction import RedactionState, normalize_redactions, pre_redact, post_redact
from .replacer import Replacer
from .config import create_substractor, load_config, load_from_yaml
from .errors import SubstractorError, ConfigError
from .types import CompiledPattern, MacroMatch, RedactionMode, Token, TokenKind

__all__ = [
    "Substractor", "SubstractorConfig",
    "matches", "subs", "find_macros", "macros", "macros_all", "pluck", "pluck_all", "replace",
    "compile_pattern", "tokenize",
    "RedactionState", "normalize_redactions", "pre_redact", "post_redact",
    "Replacer",
    "create_substractor", "load_config", "load_from_yaml",
    "SubstractorError", "ConfigError",
    "CompiledPattern", "MacroMatch", "RedactionMode", "Token", "TokenKind",
]
__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
