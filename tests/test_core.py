"""
# Contact-Form: test_core.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `core.py`.
"""

import unittest

from contactform.core import create_default_registry, form_to_html
from contactform.scanner import FormTagScanner


TEXT_CONTROL = (
    '<span class="wpcf7-form-control-wrap" data-name="your-name">'
    '<input size="40" class="wpcf7-form-control wpcf7-text" aria-invalid="false" value="" type="text" name="your-name" />'
    '</span>'
)
RESPONSE_OUTPUT = '<div class="wpcf7-response-output" aria-hidden="true"></div>'


class TestCore(unittest.TestCase):
    def setUp(self):
        self.scanner = FormTagScanner(create_default_registry())

    def test_create_default_registry(self):
        registry = create_default_registry()

        for type_name in (
            'text', 'text*', 'email', 'email*', 'url', 'url*', 'tel', 'tel*',
            'textarea', 'textarea*', 'number', 'number*', 'range', 'range*', 'date', 'date*',
            'select', 'select*', 'checkbox', 'checkbox*', 'radio', 'acceptance',
            'file', 'file*', 'hidden', 'submit', 'response', 'reflection',
        ):
            self.assertIn(type_name, registry)

        self.assertTrue(registry.supports('checkbox', 'multiple-controls-container'))
        self.assertTrue(registry.supports('file*', 'file-uploading'))
        self.assertFalse(registry.supports('submit', 'name-attr'))
        self.assertEqual(len(registry.schema_contributors), 6)

    def test_form_to_html_without_autop(self):
        self.assertEqual(form_to_html('[text your-name]', self.scanner, auto_p=False), TEXT_CONTROL)
        self.assertEqual(form_to_html('[[text your-name]]', self.scanner, auto_p=False), '[text your-name]')
        self.assertEqual(form_to_html('[unknown x]', self.scanner, auto_p=False), '[unknown x]')

    def test_form_to_html(self):
        self.assertEqual(form_to_html('', self.scanner), '')
        self.assertEqual(form_to_html('[text your-name]', self.scanner), f'<p>{TEXT_CONTROL}\n</p>')
        self.assertEqual(form_to_html('[response]', self.scanner), RESPONSE_OUTPUT)


if __name__ == '__main__':
    unittest.main()
