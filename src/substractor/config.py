"""YAML/dict config loader for substractor.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    substractor:
      ignore_case: false
      redact:
        " ": null              # pre-redaction: hidden while matching, restored
        ")": true              # full redaction: removed
        "\\t": false           # post-redaction: stripped from results
      patterns:
        semver:
          "*.*.*-alpha.*": "{major}.{minor}.{patch}-*.{alpha}"
          "*.*.*-beta.*": "{major}.{minor}.{patch}-*.{beta}"
        url: "{protocol}://{host}/*"
        hosts:
          - "*.com"
          - "*.net"
"""

from __future__ import annotations
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .extractor import PatternSpec, Substractor, SubstractorConfig
from .redaction import normalize_redactions

logger = logging.getLogger(__name__)


def _check_pattern_set(name: str, spec: Any) -> None:
    if isinstance(spec, str):
        return
    if isinstance(spec, Mapping):
        values = list(spec.values())
    elif isinstance(spec, list):
        values = spec
    else:
        raise ConfigError(f"pattern set {name!r} must be a string, list or mapping")
    if not all(isinstance(v, str) for v in values):
        raise ConfigError(f"pattern set {name!r} must only contain string patterns")


def load_config(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"config must be a mapping, got {type(data).__name__}")

    # Support nested under "substractor" key or flat
    if "substractor" in data:
        data = data["substractor"] or {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"'substractor' section must be a mapping, got {type(data).__name__}")

    patterns = data.get("patterns") or {}
    if not isinstance(patterns, Mapping):
        raise ConfigError("'patterns' must map names to pattern sets")
    for name, spec in patterns.items():
        _check_pattern_set(name, spec)

    redact = data.get("redact")
    try:
        normalize_redactions(redact)
    except TypeError as e:
        raise ConfigError(f"invalid 'redact': {e}") from e

    return {
        "ignore_case": bool(data.get("ignore_case", False)),
        "redact": redact,
        "patterns": dict(patterns),
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml

    with open(path) as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
    logger.debug("loaded config from %s", path)
    return load_config(document)


def create_substractor(config: Mapping[str, Any] | None = None) -> Substractor:
    """Create a configured Substractor from a config dict."""
    cfg = load_config(config)
    return Substractor(SubstractorConfig(
        ignore_case=cfg["ignore_case"],
        redact=cfg["redact"],
    ))


def pattern_set(config: Mapping[str, Any], name: str) -> PatternSpec:
    """Look up a named pattern set in a config dict."""
    patterns = load_config(config)["patterns"]
    if name not in patterns:
        known = ", ".join(sorted(patterns)) or "none"
        raise ConfigError(f"unknown pattern set {name!r} (configured: {known})")
    return patterns[name]
