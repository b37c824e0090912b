"""Extract gettext calls from JS/TS/Vue sources and rewrite them with translated literals."""

from .errors import (
    CatalogError,
    ConfigurationError,
    GettextReplacerError,
    MissingExtractorsError,
    NoReplacementsError,
)
from .models import (
    MessageRecord,
    ReplacementRegistry,
    ReplacementSite,
    SourceUnit,
    SubstitutionTable,
    TranslationEntry,
)
from .walker import MessageCollector
from .replacer import (
    replace_message_nodes,
    replace_message_nodes_async,
    resolve_replacements,
    rewrite,
)

__version__ = "0.3.0"
