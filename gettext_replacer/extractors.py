"""
Extractor functions. An extractor is called for every syntax node as
extractor(node, unit, emit) and calls emit(MessageRecord(...)) when the node is a
translation call it recognizes.
"""

import re

from .languages import node_text
from .literals import decode_js_escapes
from .models import MessageRecord

_CALLEE_SPACE_RE = re.compile(r'\s+')


def normalize_callee(text):
    """'i18n?.gettext' and 'i18n . gettext' both become 'i18n.gettext'."""
    return _CALLEE_SPACE_RE.sub('', text).replace('?.', '.')


def string_value(node):
    """
    Static string value of an argument node: plain strings, template strings without
    substitutions and '+' concatenations of those. None for anything else.
    """
    parts = []
    # 'a' + 'b' + 'c' nests to the left, follow that side in a loop
    while True:
        if node.type == 'parenthesized_expression' and node.named_child_count == 1:
            node = node.named_children[0]
            continue
        if node.type != 'binary_expression':
            break
        operator = node.child_by_field_name('operator')
        if operator is None or node_text(operator) != '+':
            return None
        right = string_value(node.child_by_field_name('right'))
        if right is None:
            return None
        parts.append(right)
        node = node.child_by_field_name('left')

    if node.type == 'template_string':
        if any(child.type == 'template_substitution' for child in node.named_children):
            return None
    elif node.type != 'string':
        return None
    parts.append(decode_js_escapes(node_text(node)[1:-1]))
    return ''.join(reversed(parts))


def call_arguments(node):
    args = node.child_by_field_name('arguments')
    if args is None or args.type != 'arguments':
        return None
    return [child for child in args.named_children if child.type != 'comment']


def _argument_string(arguments, index):
    if index >= len(arguments):
        return None
    return string_value(arguments[index])


def call_expression_extractor(callee_names, text=0, text_plural=None, context=None):
    """
    Builds an extractor for calls such as gettext('...') or i18n.npgettext(ctx, one, many, n).
    The keyword arguments are the argument positions of the message parts.
    """
    names = {normalize_callee(name) for name in callee_names}

    def extractor(node, unit, emit):
        if node.type != 'call_expression':
            return
        callee = node.child_by_field_name('function')
        if callee is None or normalize_callee(node_text(callee)) not in names:
            return
        arguments = call_arguments(node)
        if arguments is None:
            return

        message_text = _argument_string(arguments, text)
        if not message_text:
            return
        message_plural = None
        if text_plural is not None:
            message_plural = _argument_string(arguments, text_plural)
            if message_plural is None:
                return
        message_context = None
        if context is not None:
            message_context = _argument_string(arguments, context)
            if message_context is None:
                return

        emit(MessageRecord(text=message_text, context=message_context, text_plural=message_plural))

    return extractor


def default_extractors(config):
    """The gettext, pgettext, ngettext and npgettext extractors for the configured callee names."""
    callee_names = config["callee_names"]
    positions = (
        ("gettext", dict(text=0)),
        ("pgettext", dict(context=0, text=1)),
        ("ngettext", dict(text=0, text_plural=1)),
        ("npgettext", dict(context=0, text=1, text_plural=2)),
    )
    extractors = []
    for group, arguments in positions:
        names = callee_names.get(group)
        if names:
            extractors.append(call_expression_extractor(names, **arguments))
    return extractors
