"""
# Contact-Form: test_registry.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `registry.py`.
"""

import unittest

from contactform.exceptions import UnrecognisedTagTypeException
from contactform.registry import FunctionTagRenderer, TagRenderer, TagTypeRegistry
from contactform.tags import FormTag


def render_nothing(tag: FormTag) -> str:
    return ''


def render_name(tag: FormTag) -> str:
    return f'<{tag.name}>'


class TestRegistry(unittest.TestCase):
    def test_sanitise_type_name(self):
        self.assertEqual(TagTypeRegistry.sanitise_type_name('text*'), 'text*')
        self.assertEqual(TagTypeRegistry.sanitise_type_name('My Type!'), 'my_type')
        self.assertEqual(TagTypeRegistry.sanitise_type_name('!!!'), '')

    def test_register(self):
        registry = TagTypeRegistry()
        registry.register(['Text', 'text*'], render_name, ['name-attr'])
        registry.register('text', render_nothing)
        registry.register('!!!', render_nothing)

        self.assertEqual(registry.names, ['text', 'text*'])
        self.assertEqual(len(registry), 2)
        self.assertIn('text*', registry)
        self.assertNotIn('TEXT', registry)

        tag_type = registry.get('text')
        self.assertIsInstance(tag_type.renderer, FunctionTagRenderer)
        self.assertEqual(tag_type.renderer.render(FormTag('text', raw_name='first-wins')), '<first-wins>')
        self.assertIsNone(registry.get('textarea'))

    def test_register_renderer_object(self):
        class UpperRenderer(TagRenderer):
            def render(self, tag: FormTag) -> str:
                return tag.name.upper()

        registry = TagTypeRegistry()
        renderer = UpperRenderer()
        registry.register('shout', renderer)

        self.assertIs(registry.get('shout').renderer, renderer)

    def test_lookup(self):
        registry = TagTypeRegistry()
        registry.register('text', render_name)

        self.assertEqual(registry.lookup('text'), registry.get('text'))
        with self.assertRaises(UnrecognisedTagTypeException):
            registry.lookup('textarea')

        registry.remove('text')
        with self.assertRaises(UnrecognisedTagTypeException):
            registry.lookup('text')

    def test_features(self):
        registry = TagTypeRegistry()
        registry.register('text', render_nothing, ['name-attr'])
        registry.register('checkbox', render_nothing, {'name-attr': True, 'selectable-values': True, 'singular': False})
        registry.register('submit', render_nothing)

        self.assertTrue(registry.supports('checkbox', 'selectable-values'))
        self.assertTrue(registry.supports('checkbox', ['file-uploading', 'name-attr']))
        self.assertFalse(registry.supports('checkbox', 'singular'))
        self.assertFalse(registry.supports('submit', 'name-attr'))
        self.assertFalse(registry.supports('unregistered', 'name-attr'))

        self.assertEqual(registry.collect(), ['text', 'checkbox', 'submit'])
        self.assertEqual(registry.collect('name-attr'), ['text', 'checkbox'])
        self.assertEqual(registry.collect('name-attr', invert=True), ['submit'])
        self.assertEqual(registry.collect(['selectable-values']), ['checkbox'])

    def test_remove(self):
        registry = TagTypeRegistry()
        registry.register(['text', 'email'], render_nothing)
        registry.remove('text')
        registry.remove('nonexistent')

        self.assertEqual(registry.names, ['email'])

    def test_tag_regex(self):
        registry = TagTypeRegistry()
        self.assertIsNone(registry.tag_regex())

        registry.register('text', render_nothing)
        tag_regex = registry.tag_regex()
        self.assertIs(registry.tag_regex(), tag_regex)
        self.assertIsNone(tag_regex.search('[email x]'))

        registry.register('email', render_nothing)
        self.assertIsNot(registry.tag_regex(), tag_regex)
        self.assertIsNotNone(registry.tag_regex().search('[email x]'))

    def test_schema_contributors(self):
        def contributor(schema, contact_form):
            pass

        registry = TagTypeRegistry()
        registry.add_schema_contributor(contributor)

        self.assertEqual(registry.schema_contributors, [contributor])


if __name__ == '__main__':
    unittest.main()
