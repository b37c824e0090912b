import logging
from dataclasses import replace

from .errors import MissingExtractorsError
from .extractors import default_extractors
from .languages import JAVASCRIPT, ParserPool, node_text, script_kind_for_file, script_kind_for_lang
from .literals import decode_js_escapes
from .models import ExtractionStats, ReplacementRegistry, SourceUnit
from .vue import collect_template_expressions, compile_template, split_component

log = logging.getLogger(__name__)

STRING_SOURCE_FILENAME = 'string-source'

# Literal node types whose content is parsed again as source code
EMBEDDED_SOURCE_TYPES = ('string', 'regex')


class MessageCollector:
    """
    Walks JavaScript/TypeScript syntax trees and hands every node to the registered
    extractors. Messages are returned in source order and each recognized call is
    registered in the ReplacementRegistry passed in by the caller.
    """

    def __init__(self, extractors=None, enable_vue=True, component_extension='.vue'):
        self.extractors = list(extractors or [])
        self.enable_vue = enable_vue
        self.component_extension = component_extension
        self.parsers = ParserPool()
        self.stats = ExtractionStats()

    @classmethod
    def from_config(cls, config):
        return cls(
            extractors=default_extractors(config),
            enable_vue=config.get("enable_vue", True),
            component_extension=config.get("component_extension", '.vue'),
        )

    def add_extractor(self, extractor):
        self.extractors.append(extractor)

    def _require_extractors(self):
        if not self.extractors:
            raise MissingExtractorsError()

    def is_component(self, file_name):
        return bool(self.enable_vue and file_name and file_name.endswith(self.component_extension))

    def parse_source_file(self, source, registry, file_name=None, transform_source=None, script_kind=None):
        """
        Extracts the messages of one file. Components go through the Vue preprocessor,
        everything else is parsed as a script.

        Returns (source, messages); source is the text that was parsed, after transform_source.
        """
        if not isinstance(source, str):
            raise ValueError("Property 'source' must be a string")
        if file_name is not None and (not isinstance(file_name, str) or not file_name):
            raise ValueError("Property 'file_name' must be a non-empty string")
        self._require_extractors()

        if transform_source is not None:
            source = transform_source(source)

        if self.is_component(file_name):
            messages = self.parse_vue_source(source, file_name, registry)
        else:
            messages = self.parse_source(
                source, file_name or STRING_SOURCE_FILENAME, registry, script_kind=script_kind
            )

        self.stats.parsed_files += 1
        if messages:
            self.stats.files_with_messages += 1
        log.debug("%s: %d message(s)", file_name or STRING_SOURCE_FILENAME, len(messages))
        return source, messages

    def parse_source(self, source, file_name, registry, line_number_start=1, script_kind=None):
        unit = SourceUnit(
            text=source,
            file_name=file_name,
            start_line=line_number_start,
            byte_offset=0,
            script_kind=script_kind or script_kind_for_file(file_name),
        )
        return self.collect(unit, registry)

    def collect(self, unit, registry):
        """Parses a source unit and returns the messages found in it and in its nested sources."""
        self._require_extractors()
        return self._collect(unit, registry)

    def _collect(self, unit, registry):
        tree = self.parsers.parse(unit.text, unit.script_kind)
        return self._walk(tree.root_node, unit, registry)

    def _emitter(self, node, unit, registry, messages):
        def emit(message):
            record = replace(
                message,
                file_name=unit.file_name,
                line=unit.start_line + node.start_point[0],
            )
            messages.append(record)
            registry.add(record, node, unit)
        return emit

    def _walk(self, root, unit, registry):
        """
        Pre-order walk with an explicit stack, since generated code can nest deeper than the
        recursion limit. A node's children come before the content of its own literal.
        """
        messages = []
        stack = [(root, False)]
        while stack:
            node, nested_only = stack.pop()
            if nested_only:
                nested = self._embedded_unit(node, unit)
                if nested is not None:
                    messages.extend(self._collect(nested, registry))
                continue

            emit = self._emitter(node, unit, registry, messages)
            for extractor in self.extractors:
                extractor(node, unit, emit)

            if node.start_byte > 0 and node.type in EMBEDDED_SOURCE_TYPES:
                stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

        return messages

    def _embedded_unit(self, node, unit):
        """
        Source unit for the content of a string or regex literal. The content keeps its
        byte offset only when it is a verbatim slice of the outer text.
        """
        if node.type == 'regex':
            pattern = node.child_by_field_name('pattern')
            if pattern is None:
                return None
            text = node_text(pattern)
            body_start = pattern.start_byte
            verbatim = True
        else:
            raw = node_text(node)[1:-1]
            text = decode_js_escapes(raw)
            body_start = node.start_byte + 1
            verbatim = text == raw

        if not text.strip():
            return None

        byte_offset = None
        if verbatim and unit.byte_offset is not None:
            byte_offset = unit.byte_offset + body_start
        return SourceUnit(
            text=text,
            file_name=unit.file_name,
            start_line=unit.start_line + node.start_point[0],
            byte_offset=byte_offset,
            script_kind=unit.script_kind,
        )

    # --- Vue components ---

    def parse_vue_source(self, source, file_name, registry):
        """Script block messages first, then template expressions in document order."""
        descriptor = split_component(source, self.parsers)
        source_bytes = source.encode('utf8')
        messages = []

        script = descriptor.script
        if script is not None and script.content:
            newlines_before = source_bytes[:script.start].count(b'\n')
            unit = SourceUnit(
                text=script.content,
                file_name=file_name,
                start_line=newlines_before + 1,
                byte_offset=script.start,
                script_kind=script_kind_for_lang(script.lang),
            )
            messages.extend(self.collect(unit, registry))

        template = descriptor.template
        if template is not None and template.content:
            root = compile_template(template.content, self.parsers)
            for expression in collect_template_expressions(root):
                messages.extend(
                    self._collect_expression(expression, template, source_bytes, file_name, registry)
                )

        return messages

    def _collect_expression(self, expression, template, source_bytes, file_name, registry):
        if expression.offset is not None:
            absolute = template.start + expression.offset
            start_line = source_bytes[:absolute].count(b'\n') + 1
        else:
            absolute = None
            start_line = 1

        # Parenthesised first so object literals and 'item in items' read as expressions
        for text, shift in (('(' + expression.text + '\n)', 1), (expression.text, 0)):
            tree = self.parsers.parse(text, JAVASCRIPT)
            if not tree.root_node.has_error:
                break
        else:
            log.debug("Skipping unparsable template expression in %s: %r", file_name, expression.text)
            return []

        unit = SourceUnit(
            text=text,
            file_name=file_name,
            start_line=start_line,
            byte_offset=absolute - shift if absolute is not None else None,
            script_kind=JAVASCRIPT,
        )
        scratch = ReplacementRegistry()
        try:
            messages = self._walk(tree.root_node, unit, scratch)
        except Exception:
            log.debug("Skipping template expression in %s: %r", file_name, expression.text, exc_info=True)
            return []
        registry.extend(scratch)
        return messages
