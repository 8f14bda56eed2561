"""Exception types raised by the electron filler."""

from __future__ import annotations


class FillerError(Exception):
    """Base class for all fatal filler conditions."""


class ConfigurationError(FillerError, ValueError):
    """Invalid or incomplete configuration, detected at construction or first use."""


class EffectiveAreaError(ConfigurationError):
    """Effective-area table file is missing or malformed."""


class UpstreamInconsistencyError(FillerError, LookupError):
    """Input products disagree with each other (missing side-map entry, duplicate identity)."""


class ReferenceResolutionError(UpstreamInconsistencyError):
    """A cross-collection reference has no output-side counterpart."""
