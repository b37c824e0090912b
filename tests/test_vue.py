"""
Tests for Vue single-file components: block splitting, template compilation and
messages found in scripts and template expressions.
"""
import textwrap
import unittest

from gettext_replacer.languages import ParserPool
from gettext_replacer.models import ReplacementRegistry, TranslationEntry
from gettext_replacer.replacer import replace_message_nodes
from gettext_replacer.vue import (
    ELEMENT,
    INTERPOLATION,
    collect_template_expressions,
    compile_template,
    split_component,
)
from gettext_replacer.walker import MessageCollector
from gettext_replacer.extractors import call_expression_extractor

from tests.helpers import collect, make_collector

COMPONENT = textwrap.dedent("""\
    <template>
      <p>{{ gettext('From template') }}</p>
    </template>

    <script>
    export default {
      computed: { title() { return gettext('From script') } }
    }
    </script>
""")


class TestSplitComponent(unittest.TestCase):

    def test_blocks(self):
        descriptor = split_component(COMPONENT, ParserPool())
        self.assertIn("gettext('From template')", descriptor.template.content)
        self.assertIn("gettext('From script')", descriptor.script.content)
        source_bytes = COMPONENT.encode('utf8')
        self.assertEqual(source_bytes[descriptor.script.start:descriptor.script.end].decode('utf8'),
                         descriptor.script.content)

    def test_script_lang(self):
        source = '<script lang="ts">\nconst a: number = 1;\n</script>\n'
        descriptor = split_component(source, ParserPool())
        self.assertEqual(descriptor.script.lang, 'ts')
        self.assertIsNone(descriptor.template)

    def test_no_blocks(self):
        descriptor = split_component('<style>p { color: red; }</style>\n', ParserPool())
        self.assertIsNone(descriptor.script)
        self.assertIsNone(descriptor.template)


class TestCompileTemplate(unittest.TestCase):

    def test_interpolation(self):
        content = '<p>Hi {{ name }}!</p>'
        root = compile_template(content, ParserPool())
        paragraph = root.children[0]
        self.assertEqual(paragraph.type, ELEMENT)
        self.assertEqual(paragraph.tag, 'p')
        interpolation = [child for child in paragraph.children if child.type == INTERPOLATION][0]
        self.assertEqual(interpolation.expression, 'name')
        self.assertEqual(content.encode('utf8')[interpolation.offset:interpolation.offset + 4], b'name')

    def test_attributes(self):
        root = compile_template('<input :placeholder="label" v-model="value" class="x">', ParserPool())
        node = root.children[0]
        self.assertEqual(node.attrs_map, {':placeholder': 'label', 'v-model': 'value', 'class': 'x'})

    def test_entities_are_decoded(self):
        root = compile_template('<a :title="a &amp;&amp; b">x</a>', ParserPool())
        node = root.children[0]
        self.assertEqual(node.attrs_map[':title'], 'a && b')
        self.assertIsNone(node.attrs_offsets[':title'])

    def test_if_conditions(self):
        content = '<div><p v-if="a">A</p><p v-else-if="b">B</p><p v-else>C</p></div>'
        root = compile_template(content, ParserPool())
        div = root.children[0]
        self.assertEqual(len(div.children), 1)
        branch = div.children[0]
        self.assertEqual([c.exp for c in branch.if_conditions], ['a', 'b', None])
        self.assertIs(branch.if_conditions[0].block, branch)

    def test_scoped_slots(self):
        content = '<my-list><template #item="{ row }"><span>{{ row }}</span></template></my-list>'
        root = compile_template(content, ParserPool())
        component = root.children[0]
        self.assertEqual(component.children, [])
        self.assertIn('item', component.scoped_slots)

    def test_expression_order(self):
        content = textwrap.dedent("""\
            <div :a="one">
              {{ two }}
              <p v-if="three">{{ four }}</p>
              <p v-else>{{ five }}</p>
              <comp><template v-slot:x="six">{{ seven }}</template></comp>
            </div>
        """)
        expressions = collect_template_expressions(compile_template(content, ParserPool()))
        self.assertEqual(
            [expression.text for expression in expressions],
            ['one', 'two', 'three', 'four', 'five', 'six', 'seven'],
        )


class TestVueMessages(unittest.TestCase):

    def test_interpolation_message(self):
        source = '<template><p>{{ gettext("Hi") }}</p></template>\n'
        messages, _ = collect(source, file_name='Hello.vue')
        self.assertEqual([m.text for m in messages], ['Hi'])

    def test_interpolation_rewrite(self):
        source = '<template><p>{{ gettext("Hi") }}</p></template>\n'
        messages, registry = collect(source, file_name='Hello.vue')
        result = replace_message_nodes(source, 'Hello.vue', [TranslationEntry(msgid='Hi', msgstr='Salut')], registry)
        self.assertEqual(result, '<template><p>{{ gettext("Salut") }}</p></template>\n')

    def test_script_first_then_template(self):
        messages, _ = collect(COMPONENT, file_name='Page.vue')
        self.assertEqual(
            [(m.text, m.line) for m in messages],
            [('From script', 7), ('From template', 2)],
        )

    def test_script_rewrite(self):
        messages, registry = collect(COMPONENT, file_name='Page.vue')
        catalog = [
            TranslationEntry(msgid='From script', msgstr='Du script'),
            TranslationEntry(msgid='From template', msgstr='Du modèle'),
        ]
        result = replace_message_nodes(COMPONENT, 'Page.vue', catalog, registry)
        expected = COMPONENT.replace('From script', 'Du script').replace('From template', 'Du modèle')
        self.assertEqual(result, expected)

    def test_bound_attributes_and_branches(self):
        source = textwrap.dedent("""\
            <template>
              <div :title="gettext('Title')">
                <p v-if="ok">{{ gettext('Yes') }}</p>
                <p v-else>{{ gettext('No') }}</p>
              </div>
            </template>
        """)
        messages, registry = collect(source, file_name='Branch.vue')
        self.assertEqual([(m.text, m.line) for m in messages], [('Title', 2), ('Yes', 3), ('No', 4)])
        catalog = [TranslationEntry(msgid='Title', msgstr='Titre')]
        result = replace_message_nodes(source, 'Branch.vue', catalog, registry)
        self.assertEqual(result, source.replace("'Title'", "'Titre'"))

    def test_scoped_slot_message(self):
        source = textwrap.dedent("""\
            <template>
              <my-list>
                <template v-slot:item="{ row }">
                  <span>{{ gettext('Row') }}</span>
                </template>
              </my-list>
            </template>
        """)
        messages, _ = collect(source, file_name='List.vue')
        self.assertEqual([m.text for m in messages], ['Row'])

    def test_typescript_script(self):
        source = '<script lang="ts">\nconst label: string = gettext(\'Typed\');\n</script>\n'
        messages, _ = collect(source, file_name='Typed.vue')
        self.assertEqual([(m.text, m.line) for m in messages], [('Typed', 2)])

    def test_broken_expression_is_skipped(self):
        source = "<template><div :title=\"gettext('Broken'\">{{ gettext('Ok') }}</div></template>\n"
        messages, registry = collect(source, file_name='Broken.vue')
        self.assertEqual([m.text for m in messages], ['Ok'])
        self.assertEqual(len(registry), 1)

    def test_extractor_error_in_template_is_skipped(self):
        def exploding(node, unit, emit):
            if node.type == 'call_expression' and b'boom' in node.text:
                raise RuntimeError('boom')

        collector = MessageCollector([call_expression_extractor(['gettext']), exploding])
        source = "<template><p :title=\"boom()\">{{ gettext('Fine') }}</p></template>\n"
        messages, registry = collect(source, file_name='Boom.vue', collector=collector)
        self.assertEqual([m.text for m in messages], ['Fine'])

    def test_entity_expression_found_but_not_rewritten(self):
        source = '<template><a :title="gettext(&quot;Hi&quot;)">x</a></template>\n'
        messages, registry = collect(source, file_name='Entity.vue')
        self.assertEqual([m.text for m in messages], ['Hi'])
        result = replace_message_nodes(source, 'Entity.vue', [TranslationEntry(msgid='Hi', msgstr='Salut')], registry)
        self.assertEqual(result, source)

    def test_vue_disabled(self):
        collector = make_collector(enable_vue=False)
        self.assertFalse(collector.is_component('Hello.vue'))
        self.assertTrue(make_collector().is_component('Hello.vue'))
        self.assertFalse(make_collector().is_component('hello.js'))


if __name__ == '__main__':
    unittest.main()
