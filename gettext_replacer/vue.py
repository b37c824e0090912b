"""
Vue single-file component support.

split_component() finds the top-level <script> and <template> blocks of a component,
compile_template() turns the template into a small AST shaped like the one
vue-template-compiler produces (element / interpolation / text nodes, attrsMap,
ifConditions and scopedSlots), and collect_template_expressions() pulls the
JavaScript expressions out of that AST.

All offsets are UTF-8 byte offsets, as reported by tree-sitter.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .languages import HTML, node_text

ELEMENT = 1
INTERPOLATION = 2
TEXT = 3

# Same delimiters as Vue's default text parser
INTERPOLATION_RE = re.compile(r'\{\{((?:.|\r?\n)+?)\}\}')

_TAG_TYPES = ('start_tag', 'self_closing_tag', 'end_tag')
_ELEMENT_TYPES = ('element', 'script_element', 'style_element')


@dataclass
class SfcBlock:
    content: str
    start: int
    end: int
    lang: Optional[str] = None
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class SfcDescriptor:
    script: Optional[SfcBlock] = None
    template: Optional[SfcBlock] = None


@dataclass
class IfCondition:
    exp: Optional[str]
    block: 'TemplateNode'


@dataclass
class TemplateNode:
    type: int
    tag: Optional[str] = None
    attrs_map: Dict[str, str] = field(default_factory=dict)
    attrs_offsets: Dict[str, Optional[int]] = field(default_factory=dict)
    children: List['TemplateNode'] = field(default_factory=list)
    if_conditions: List[IfCondition] = field(default_factory=list)
    scoped_slots: Dict[str, 'TemplateNode'] = field(default_factory=dict)
    expression: Optional[str] = None
    offset: Optional[int] = None
    text: Optional[str] = None


@dataclass
class TemplateExpression:
    """An expression found in a template; offset is None when it is not a verbatim slice."""

    text: str
    offset: Optional[int] = None


# --- Component splitting ---

def _tag_node(element):
    for child in element.children:
        if child.type in ('start_tag', 'self_closing_tag'):
            return child
    return None


def _tag_name(tag):
    for child in tag.children:
        if child.type == 'tag_name':
            return node_text(child)
    return None


def _attributes(tag):
    """
    Yields (name, raw value, value start byte) for each attribute of a start tag.
    Attributes without a value get an empty value and no offset.
    """
    for attr in tag.named_children:
        if attr.type != 'attribute':
            continue
        name = None
        value = ''
        value_start = None
        for child in attr.named_children:
            if child.type == 'attribute_name':
                name = node_text(child)
            elif child.type == 'quoted_attribute_value':
                inner = [c for c in child.named_children if c.type == 'attribute_value']
                if inner:
                    value = node_text(inner[0])
                    value_start = inner[0].start_byte
                else:
                    value_start = child.start_byte + 1
            elif child.type == 'attribute_value':
                value = node_text(child)
                value_start = child.start_byte
        if name is not None:
            yield name, value, value_start


def _block(element, source_bytes):
    tag = _tag_node(element)
    if tag is None or tag.type == 'self_closing_tag':
        return None
    end_tag = None
    for child in element.children:
        if child.type == 'end_tag':
            end_tag = child
    start = tag.end_byte
    end = end_tag.start_byte if end_tag is not None else element.end_byte
    attrs = {name: html.unescape(value) for name, value, _ in _attributes(tag)}
    return SfcBlock(
        content=source_bytes[start:end].decode('utf8'),
        start=start,
        end=end,
        lang=attrs.get('lang'),
        attrs=attrs,
    )


def split_component(source, parsers):
    """
    Splits a component into its first top-level <script> block and its top-level
    <template> block.
    """
    source_bytes = source.encode('utf8')
    tree = parsers.parse(source_bytes, HTML)
    descriptor = SfcDescriptor()
    for node in tree.root_node.children:
        if node.type == 'script_element' and descriptor.script is None:
            descriptor.script = _block(node, source_bytes)
        elif node.type == 'element' and descriptor.template is None:
            tag = _tag_node(node)
            if tag is not None and _tag_name(tag) == 'template':
                descriptor.template = _block(node, source_bytes)
    return descriptor


# --- Template compilation ---

def _decoded(raw, offset):
    """Entity-decodes a value; the offset only survives when decoding changed nothing."""
    value = html.unescape(raw)
    return value, (offset if value == raw else None)


def _parse_text(raw, start):
    """Splits a text run into text and interpolation nodes."""
    nodes = []
    last = 0
    for match in INTERPOLATION_RE.finditer(raw):
        if raw[last:match.start()].strip():
            nodes.append(TemplateNode(type=TEXT, text=html.unescape(raw[last:match.start()])))
        inner = match.group(1)
        expression = inner.strip()
        if expression:
            leading = inner[:len(inner) - len(inner.lstrip())]
            prefix = raw[:match.start(1)] + leading
            expression, offset = _decoded(expression, start + len(prefix.encode('utf8')))
            nodes.append(TemplateNode(type=INTERPOLATION, expression=expression, offset=offset))
        last = match.end()
    if raw[last:].strip():
        nodes.append(TemplateNode(type=TEXT, text=html.unescape(raw[last:])))
    return nodes


def _slot_name(node):
    attrs = node.attrs_map
    if 'slot-scope' in attrs or 'scope' in attrs:
        return attrs.get('slot') or 'default'
    if node.tag != 'template':
        return None
    for name in attrs:
        if name == 'v-slot':
            return 'default'
        if name.startswith('v-slot:'):
            return name[len('v-slot:'):]
        if name.startswith('#'):
            return name[1:] or 'default'
    return None


def _arrange(parent, children):
    """
    Moves v-else-if / v-else siblings into the if_conditions of the preceding v-if element
    and slot templates into the parent's scoped_slots, like vue-template-compiler does.
    """
    kept = []
    last_if = None
    for child in children:
        if child.type == ELEMENT:
            attrs = child.attrs_map
            if last_if is not None and ('v-else-if' in attrs or 'v-else' in attrs):
                last_if.if_conditions.append(IfCondition(exp=attrs.get('v-else-if'), block=child))
                if 'v-else' in attrs:
                    last_if = None
                continue
            if 'v-if' in attrs:
                child.if_conditions.append(IfCondition(exp=attrs['v-if'], block=child))
                last_if = child
            else:
                last_if = None
            slot = _slot_name(child)
            if slot is not None:
                parent.scoped_slots[slot] = child
                continue
        else:
            last_if = None
        kept.append(child)
    parent.children = kept


def _build_children(parent, html_node, source_bytes):
    children = []
    run_start = run_end = None

    def flush():
        if run_start is not None:
            raw = source_bytes[run_start:run_end].decode('utf8')
            children.extend(_parse_text(raw, run_start))

    for child in html_node.children:
        if child.type in _TAG_TYPES:
            continue
        if child.type in _ELEMENT_TYPES or child.type in ('comment', 'erroneous_end_tag', 'doctype'):
            flush()
            run_start = run_end = None
            if child.type in _ELEMENT_TYPES:
                children.append(_build_element(child, source_bytes))
            continue
        # text, entities and error recovery nodes all belong to the surrounding text run
        if run_start is None:
            run_start = child.start_byte
        run_end = child.end_byte
    flush()
    _arrange(parent, children)


def _build_element(html_node, source_bytes):
    tag = _tag_node(html_node)
    node = TemplateNode(type=ELEMENT, tag=_tag_name(tag) if tag is not None else None)
    if tag is not None:
        for name, raw, value_start in _attributes(tag):
            value, offset = _decoded(raw, value_start)
            node.attrs_map[name] = value
            node.attrs_offsets[name] = offset
    if html_node.type == 'element':
        _build_children(node, html_node, source_bytes)
    return node


def compile_template(content, parsers):
    """
    Compiles template markup into a TemplateNode tree. The returned root is a tagless
    element holding the top-level nodes of the template.
    """
    source_bytes = content.encode('utf8')
    tree = parsers.parse(source_bytes, HTML)
    root = TemplateNode(type=ELEMENT)
    _build_children(root, tree.root_node, source_bytes)
    return root


def collect_template_expressions(root):
    """
    Depth-first walk collecting interpolations, bound attributes (':name'), directives
    ('v-*'), v-if branches and scoped slots.
    """
    expressions = []

    def walk(node):
        if node is None:
            return
        if node.type == INTERPOLATION and node.expression:
            expressions.append(TemplateExpression(node.expression, node.offset))
        for name, value in node.attrs_map.items():
            if (name.startswith(':') or name.startswith('v-')) and value.strip():
                expressions.append(TemplateExpression(value, node.attrs_offsets.get(name)))
        for child in node.children:
            walk(child)
        for condition in node.if_conditions:
            if condition.block is not None and condition.block is not node:
                walk(condition.block)
        for slot in node.scoped_slots.values():
            walk(slot)

    walk(root)
    return expressions
