import unittest

from gettext_replacer.literals import decode_js_escapes, quote_literal, quote_style


class TestDecode(unittest.TestCase):

    def test_plain(self):
        self.assertEqual(decode_js_escapes('Hello'), 'Hello')

    def test_simple_escapes(self):
        self.assertEqual(decode_js_escapes(r"a\nb\tc\'d\"e\\f"), 'a\nb\tc\'d"e\\f')

    def test_unicode_escapes(self):
        self.assertEqual(decode_js_escapes(r'é\x41\u{1F600}'), 'éA\U0001F600')

    def test_surrogate_pair(self):
        self.assertEqual(decode_js_escapes(r'\uD83D\uDE00'), '\U0001F600')

    def test_line_continuation(self):
        self.assertEqual(decode_js_escapes('one \\\ntwo'), 'one two')

    def test_null_and_unknown(self):
        self.assertEqual(decode_js_escapes(r'\0\q'), '\0q')


class TestQuote(unittest.TestCase):

    def test_quote_style(self):
        self.assertEqual(quote_style("'x'"), "'")
        self.assertEqual(quote_style('"x"'), '"')
        self.assertEqual(quote_style('`x`'), '"')

    def test_only_active_quote_is_escaped(self):
        self.assertEqual(quote_literal('l\'été "ok"', "'"), '\'l\\\'été "ok"\'')
        self.assertEqual(quote_literal('l\'été "ok"', '"'), '"l\'été \\"ok\\""')

    def test_control_characters(self):
        self.assertEqual(quote_literal('a\nb\\c\x01', "'"), "'a\\nb\\\\c\\u0001'")

    def test_null(self):
        self.assertEqual(quote_literal('\x001', "'"), "'\\x001'")
        self.assertEqual(quote_literal('\x00a', "'"), "'\\0a'")

    def test_decode_reverses_quote(self):
        text = 'Tab\there, quote \' and "double", new\nline, ünï'
        self.assertEqual(decode_js_escapes(quote_literal(text, "'")[1:-1]), text)


if __name__ == '__main__':
    unittest.main()
