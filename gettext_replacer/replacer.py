"""
Turns collected call sites into translated source text.

resolve_replacements() builds a SubstitutionTable (original call text -> translated call
text) from the registry and a catalog, rewrite() applies it to the source through the
recorded byte spans of the calls, back to front.
"""

import logging

from .errors import GettextReplacerError, NoReplacementsError
from .extractors import normalize_callee
from .languages import node_text
from .literals import quote_literal, quote_style
from .models import SubstitutionTable, sites_for_file

log = logging.getLogger(__name__)


def build_translations(catalog):
    """Indexes catalog entries by 'msgctxt:msgid' (or msgid alone)."""
    return {entry.key: entry for entry in catalog or []}


def _singular_form(msgstr):
    if isinstance(msgstr, (list, tuple)):
        return msgstr[0] if msgstr else ''
    return msgstr or ''


def resolve_gettext(site, entry):
    """
    The call with its text argument replaced by the translated literal, written with the
    quote character the argument used. Unchanged call text when there is no translation.
    """
    call_text = site.call_text
    if entry is None:
        return call_text

    index = 1 if site.message.context is not None else 0
    arguments = site.arguments
    if index >= len(arguments):
        return call_text
    argument = arguments[index]

    text = _singular_form(entry.msgstr) or entry.msgid
    literal = quote_literal(text, quote_style(node_text(argument)))

    call_bytes = site.node.text
    start = argument.start_byte - site.node.start_byte
    end = argument.end_byte - site.node.start_byte
    return (call_bytes[:start] + literal.encode('utf8') + call_bytes[end:]).decode('utf8')


def resolve_ngettext(site, entry, context_plural_callees=()):
    """
    Rebuilds a plural call: callee(forms..., count). Calls named in context_plural_callees
    get an empty leading context literal. The count argument is kept verbatim.
    """
    if entry is None:
        return site.call_text

    msgstr = entry.msgstr
    if entry.has_plural_forms and msgstr and msgstr[0]:
        forms = list(msgstr)
    else:
        forms = [entry.msgid, entry.msgid_plural or site.message.text_plural]

    arguments = site.arguments
    quote = quote_style(node_text(arguments[0])) if arguments else "'"
    values = [quote_literal(form, quote) for form in forms]

    names = {normalize_callee(name) for name in context_plural_callees}
    if normalize_callee(site.callee_text) in names or site.callee_name in names:
        values.insert(0, quote_literal('', quote))

    # the count expression
    if arguments:
        values.append(node_text(arguments[-1]))

    return site.callee_text + '(' + ','.join(values) + ')'


def resolve_replacements(sites, file_name, catalog, context_plural_callees=()):
    """
    Builds the substitution table for one file from the collected replacement sites.
    Raises NoReplacementsError when nothing was collected.
    """
    sites = list(sites)
    if not sites:
        raise NoReplacementsError(
            "No replacement sites were collected. Parse the source before replacing messages."
        )

    translations = build_translations(catalog)
    table = SubstitutionTable()
    for site in sites_for_file(sites, file_name):
        entry = translations.get(site.message.key)
        if site.message.text_plural:
            replacement = resolve_ngettext(site, entry, context_plural_callees)
        else:
            replacement = resolve_gettext(site, entry)
        table.add(site.call_text, replacement, site.span)

    log.debug("%s: %d call(s), %d change(s)", file_name, len(table), len(table.changes()))
    return table


def _select_spans(buffer, table):
    """
    Spans that change something and still match the buffer. When spans nest, the
    outermost one wins.
    """
    candidates = []
    for span in table.spans:
        replacement = table.replacements.get(span.original)
        if replacement is None or replacement == span.original:
            continue
        if buffer[span.start:span.end] != span.original.encode('utf8'):
            continue
        candidates.append((span, replacement))

    candidates.sort(key=lambda item: (item[0].start, -item[0].end))
    selected = []
    covered_until = -1
    for span, replacement in candidates:
        if span.start < covered_until:
            log.debug("Skipping nested call at bytes %d-%d", span.start, span.end)
            continue
        selected.append((span, replacement))
        covered_until = span.end
    return selected


def rewrite(source, table):
    """Applies the substitution table to the source, back to front."""
    buffer = source.encode('utf8')
    for span, replacement in reversed(_select_spans(buffer, table)):
        buffer = buffer[:span.start] + replacement.encode('utf8') + buffer[span.end:]
    return buffer.decode('utf8')


def replace_message_nodes(source, file_name, catalog, registry, context_plural_callees=()):
    """
    Rewrites the translation calls collected for file_name with the catalog's translations.
    Raises NoReplacementsError when the registry is empty.
    """
    if not len(registry):
        raise NoReplacementsError(
            "No replacement sites were collected. Parse the source before replacing messages."
        )
    table = resolve_replacements(registry.sites, file_name, catalog, context_plural_callees)
    return rewrite(source, table)


async def _settled(result=None, error=None):
    if error is not None:
        raise error
    return result


def replace_message_nodes_async(source, file_name, catalog, registry, context_plural_callees=()):
    """
    Awaitable form of replace_message_nodes(). The rewrite runs when this is called, the
    returned awaitable only hands over the result or raises the error it produced.
    """
    try:
        result = replace_message_nodes(source, file_name, catalog, registry, context_plural_callees)
    except GettextReplacerError as e:
        return _settled(error=e)
    return _settled(result)
