"""Data structures shared by the collector and the replacer."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from .languages import JAVASCRIPT, node_text


def catalog_key(text, context=None):
    """Lookup key of a message: 'context:text' when a context is set, the text alone otherwise."""
    return f"{context}:{text}" if context else text


@dataclass
class SourceUnit:
    """
    A piece of text parsed on its own: a whole file, a script block of a component,
    the body of a string literal or a template expression.

    start_line is the line of the unit's first character in the original file.
    byte_offset is where the unit's first byte sits in the top-level buffer, None when
    the text is not a verbatim slice of it (decoded escapes or entities).
    """

    text: str
    file_name: str
    start_line: int = 1
    byte_offset: Optional[int] = 0
    script_kind: str = JAVASCRIPT


@dataclass(frozen=True)
class MessageRecord:
    text: str
    context: Optional[str] = None
    text_plural: Optional[str] = None
    file_name: Optional[str] = None
    line: Optional[int] = None

    @property
    def key(self):
        return catalog_key(self.text, self.context)


@dataclass
class ReplacementSite:
    """Links a collected message to the call expression node it came from."""

    message: MessageRecord
    node: object
    file_name: str
    unit: SourceUnit

    @property
    def call_text(self):
        return node_text(self.node)

    @property
    def callee_text(self):
        callee = self.node.child_by_field_name('function')
        return node_text(callee) if callee is not None else ''

    @property
    def callee_name(self):
        """Trailing property name of the callee: 'ngettext' for 'i18n.ngettext'."""
        callee = self.node.child_by_field_name('function')
        if callee is None:
            return ''
        if callee.type == 'member_expression':
            prop = callee.child_by_field_name('property')
            if prop is not None:
                return node_text(prop)
        return node_text(callee)

    @property
    def arguments(self):
        args = self.node.child_by_field_name('arguments')
        if args is None:
            return []
        return [child for child in args.named_children if child.type != 'comment']

    @property
    def span(self):
        """Absolute (start, end) byte span of the call in the top-level buffer, if known."""
        if self.unit.byte_offset is None:
            return None
        return (self.unit.byte_offset + self.node.start_byte,
                self.unit.byte_offset + self.node.end_byte)


def _slashed(path):
    return path.replace('\\', '/')


def sites_for_file(sites, file_name):
    """Sites whose file name is contained in the given path, with '\\' and '/' treated alike."""
    target = _slashed(file_name)
    return [site for site in sites if site.file_name and _slashed(site.file_name) in target]


class ReplacementRegistry:
    """
    Caller-owned accumulator of replacement sites. The collector appends to it and the
    replacer reads from it; reuse across unrelated passes requires clear().
    """

    def __init__(self):
        self.sites: List[ReplacementSite] = []

    def add(self, message, node, unit):
        site = ReplacementSite(message=message, node=node, file_name=unit.file_name, unit=unit)
        self.sites.append(site)
        return site

    def extend(self, other):
        self.sites.extend(other.sites)

    def for_file(self, file_name):
        return sites_for_file(self.sites, file_name)

    def clear(self):
        self.sites.clear()

    def __len__(self):
        return len(self.sites)

    def __iter__(self):
        return iter(self.sites)


@dataclass
class TranslationEntry:
    msgid: str
    msgstr: Union[str, Sequence[str]] = ''
    msgctxt: Optional[str] = None
    msgid_plural: Optional[str] = None

    @property
    def key(self):
        return catalog_key(self.msgid, self.msgctxt)

    @property
    def has_plural_forms(self):
        return isinstance(self.msgstr, (list, tuple))


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    original: str


@dataclass
class SubstitutionTable:
    """Original call text -> replacement call text, plus the spans to apply them at."""

    replacements: dict = field(default_factory=dict)
    spans: List[Span] = field(default_factory=list)
    _seen_spans: set = field(default_factory=set, init=False, repr=False, compare=False)

    def add(self, original, replacement, span=None):
        # First mapping wins, identical call texts resolve identically
        if original not in self.replacements:
            self.replacements[original] = replacement
        if span is not None and span not in self._seen_spans:
            self._seen_spans.add(span)
            self.spans.append(Span(span[0], span[1], original))

    def changes(self):
        return {original: replacement for original, replacement in self.replacements.items()
                if original != replacement}

    def __len__(self):
        return len(self.replacements)


@dataclass
class ExtractionStats:
    parsed_files: int = 0
    files_with_messages: int = 0
