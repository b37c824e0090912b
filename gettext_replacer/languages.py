"""tree-sitter grammars and parsers used to read scripts and Vue components."""

import os
from functools import lru_cache

import tree_sitter_html
import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from .errors import ConfigurationError

JAVASCRIPT = 'javascript'
TYPESCRIPT = 'typescript'
TSX = 'tsx'
HTML = 'html'

_LANGUAGE_LOADERS = {
    JAVASCRIPT: tree_sitter_javascript.language,
    TYPESCRIPT: tree_sitter_typescript.language_typescript,
    TSX: tree_sitter_typescript.language_tsx,
    HTML: tree_sitter_html.language,
}

# Anything not listed here (.js, .jsx, .mjs, .vue, ...) is read with the JavaScript grammar
EXTENSION_SCRIPT_KINDS = {
    '.ts': TYPESCRIPT,
    '.mts': TYPESCRIPT,
    '.cts': TYPESCRIPT,
    '.tsx': TSX,
}

# <script lang="..."> values
LANG_SCRIPT_KINDS = {
    'ts': TYPESCRIPT,
    'typescript': TYPESCRIPT,
    'tsx': TSX,
}


def script_kind_for_file(file_name):
    """Picks the grammar for a file from its extension."""
    if not file_name:
        return JAVASCRIPT
    extension = os.path.splitext(file_name)[1].lower()
    return EXTENSION_SCRIPT_KINDS.get(extension, JAVASCRIPT)


def script_kind_for_lang(lang):
    """Picks the grammar for the lang attribute of a Vue <script> block."""
    if not lang:
        return JAVASCRIPT
    return LANG_SCRIPT_KINDS.get(lang.strip().lower(), JAVASCRIPT)


@lru_cache(maxsize=None)
def get_language(kind):
    if kind not in _LANGUAGE_LOADERS:
        raise ConfigurationError(f"Unknown script kind: '{kind}'")
    return Language(_LANGUAGE_LOADERS[kind]())


class ParserPool:
    """
    Keeps one tree-sitter parser per grammar. A pool belongs to a single collector,
    parsers are not shared between threads.
    """

    def __init__(self):
        self._parsers = {}

    def get(self, kind):
        parser = self._parsers.get(kind)
        if parser is None:
            parser = Parser(get_language(kind))
            self._parsers[kind] = parser
        return parser

    def parse(self, text, kind):
        if isinstance(text, str):
            text = text.encode('utf8')
        return self.get(kind).parse(text)


def node_text(node):
    return node.text.decode('utf8')
