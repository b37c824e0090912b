"""Reading and writing JavaScript string literals."""

import re

# \u{...}, \uXXXX, \xXX, legacy octal, line continuations and single character escapes
_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-3][0-7]{0,2}|[4-7][0-7]?|\r\n|[\s\S])"
)

_SIMPLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
}

_LINE_TERMINATORS = {'\n', '\r', '\r\n', '\u2028', '\u2029'}

_LITERAL_ESCAPES = {
    '\\': '\\\\',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
    '\u2028': '\\u2028',
    '\u2029': '\\u2029',
    '\u0085': '\\u0085',
}


def _unescape(match):
    sequence = match.group(1)
    head = sequence[0]
    if head == 'u':
        digits = sequence[2:-1] if sequence[1] == '{' else sequence[1:]
        code = int(digits, 16)
        return chr(code) if code <= 0x10FFFF else match.group(0)
    if head == 'x':
        return chr(int(sequence[1:], 16))
    if head.isdigit() and head not in '89':
        return chr(int(sequence, 8))
    if sequence in _LINE_TERMINATORS:
        return ''
    return _SIMPLE_ESCAPES.get(sequence, sequence)


def decode_js_escapes(raw):
    """
    Decodes the escape sequences of a string literal body (the text between the quotes).
    Surrogate pairs written as two \\u escapes are joined, lone surrogates become U+FFFD.
    """
    if '\\' not in raw:
        return raw
    value = _ESCAPE_RE.sub(_unescape, raw)
    return value.encode('utf-16-le', 'surrogatepass').decode('utf-16-le', 'replace')


def quote_style(token_text):
    """Returns the quote character of a literal token, double quote unless it starts with a single one."""
    return "'" if token_text.startswith("'") else '"'


def quote_literal(text, quote="'"):
    """
    Writes text as a JavaScript string literal using the given quote character.
    Only the active quote is escaped, non-ASCII characters are kept as they are.
    """
    parts = []
    for index, char in enumerate(text):
        if char == quote:
            parts.append('\\' + char)
        elif char in _LITERAL_ESCAPES:
            parts.append(_LITERAL_ESCAPES[char])
        elif char == '\0':
            following = text[index + 1:index + 2]
            parts.append('\\x00' if following.isdigit() else '\\0')
        elif ord(char) < 0x20:
            parts.append('\\u%04X' % ord(char))
        else:
            parts.append(char)
    return quote + ''.join(parts) + quote
