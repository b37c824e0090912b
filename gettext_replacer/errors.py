"""Exceptions raised by gettext-replacer."""


class GettextReplacerError(Exception):
    """Base exception for all custom errors."""


class ConfigurationError(GettextReplacerError):
    """Raised when the collector or the configuration is unusable."""


class MissingExtractorsError(ConfigurationError):
    """Raised when parsing starts without any extractor functions."""

    def __init__(self):
        super().__init__(
            "Missing extractor functions. Provide them when creating the collector "
            "or dynamically add extractors using 'add_extractor()'"
        )


class NoReplacementsError(GettextReplacerError):
    """Raised when a rewrite is requested before any call site was collected."""


class CatalogError(GettextReplacerError):
    """Raised when a translation catalog file cannot be read."""
