"""Reads gettext .po files into TranslationEntry lists."""

import logging

import polib

from .errors import CatalogError
from .models import TranslationEntry

log = logging.getLogger(__name__)


def entries_from_po(po, include_fuzzy=False):
    """
    Converts a polib POFile. Plural entries keep their forms ordered by index, obsolete
    entries are dropped and so are fuzzy ones unless include_fuzzy is set.
    """
    entries = []
    for entry in po:
        if entry.obsolete or (entry.fuzzy and not include_fuzzy):
            continue
        if entry.msgid_plural:
            msgstr = [entry.msgstr_plural[index] for index in sorted(entry.msgstr_plural, key=int)]
        else:
            msgstr = entry.msgstr
        entries.append(TranslationEntry(
            msgid=entry.msgid,
            msgstr=msgstr,
            msgctxt=entry.msgctxt or None,
            msgid_plural=entry.msgid_plural or None,
        ))
    return entries


def load_po_catalog(path, include_fuzzy=False):
    """Loads a .po file (a path or the file content itself)."""
    try:
        po = polib.pofile(path)
    except (OSError, ValueError) as e:
        raise CatalogError(f"Could not read catalog '{path}': {e}") from e
    entries = entries_from_po(po, include_fuzzy=include_fuzzy)
    log.debug("Loaded %d catalog entries from %s", len(entries), path)
    return entries
