"""Exception hierarchy.

Matching itself never raises: no match is an empty result. These cover the
configuration and command-line surfaces.
"""


class SubstractorError(Exception):
    """Package base exception."""


class ConfigError(SubstractorError):
    """Configuration document is invalid or refers to an unknown pattern set."""
