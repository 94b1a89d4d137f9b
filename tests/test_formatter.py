"""
# Contact-Form: test_formatter.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `formatter.py`.
"""

import unittest

from contactform.formatter import (
    CHUNK_TYPE_COMMENT,
    CHUNK_TYPE_END_TAG,
    CHUNK_TYPE_START_TAG,
    CHUNK_TYPE_TEXT,
    Chunk,
    HTMLFormatter,
    autop,
)
from contactform.placeholders import PlaceholderMaster


class TestFormatter(unittest.TestCase):
    def test_separate_into_chunks(self):
        self.assertEqual(
            list(HTMLFormatter.separate_into_chunks('a<b>c</b><!-- x -->d')),
            [
                Chunk(CHUNK_TYPE_TEXT, 'a'),
                Chunk(CHUNK_TYPE_START_TAG, '<b>'),
                Chunk(CHUNK_TYPE_TEXT, 'c'),
                Chunk(CHUNK_TYPE_END_TAG, '</b>'),
                Chunk(CHUNK_TYPE_COMMENT, '<!-- x -->'),
                Chunk(CHUNK_TYPE_TEXT, 'd'),
            ],
        )
        self.assertEqual(list(HTMLFormatter.separate_into_chunks('1 < 2')), [Chunk(CHUNK_TYPE_TEXT, '1 < 2')])

    def test_normalize_start_tag(self):
        self.assertEqual(HTMLFormatter.normalize_start_tag('<DIV class="x">'), ('<DIV class="x">', 'div'))
        self.assertEqual(HTMLFormatter.normalize_start_tag('<br>'), ('<br />', 'br'))
        self.assertEqual(HTMLFormatter.normalize_start_tag('<img src="a.png"/>'), ('<img src="a.png" />', 'img'))
        self.assertEqual(HTMLFormatter.normalize_start_tag('p'), ('<p>', 'p'))

    def test_paragraphs(self):
        self.assertEqual(autop(''), '')
        self.assertEqual(autop('Hello'), '<p>Hello\n</p>')
        self.assertEqual(autop('Hello\n\nWorld'), '<p>Hello\n</p>\n<p>World\n</p>')
        self.assertEqual(autop('<div>Hello</div>'), '<div>\n\t<p>Hello\n\t</p>\n</div>')

    def test_line_breaks(self):
        self.assertEqual(autop('Hello\nWorld'), '<p>Hello<br />\nWorld\n</p>')
        self.assertEqual(autop('Hello\nWorld', auto_br=False), '<p>Hello\nWorld\n</p>')
        self.assertEqual(autop('a<br>b'), '<p>a<br />\nb\n</p>')

    def test_phrasing_and_void_elements(self):
        self.assertEqual(autop('<img src="a.png">'), '<p><img src="a.png" />\n</p>')
        self.assertEqual(autop('<pre>a\n\nb</pre>'), '<pre>a\n\nb\n</pre>')

    def test_math_is_protected(self):
        self.assertEqual(autop('<math><mi>x</mi></math>'), '<p><math><mi>x</mi></math>\n</p>')

    def test_placeholders(self):
        placeholder_master = PlaceholderMaster()
        inline = placeholder_master.protect('[text a]')
        block = placeholder_master.protect('[hidden h]', syntax_type_is_block=True)

        self.assertEqual(autop(inline), f'<p>{inline}\n</p>')
        self.assertEqual(autop(block), block)

    def test_fixed_points(self):
        for input_ in ('Hello', 'Hello\n\nWorld', '<div>Hello</div>', '<pre>a\n\nb</pre>'):
            formatted = autop(input_)
            self.assertEqual(autop(formatted), formatted)

    def test_line_break_is_not_a_fixed_point(self):
        formatted = autop('a\nb')

        self.assertEqual(formatted, '<p>a<br />\nb\n</p>')
        self.assertEqual(autop(formatted), '<p>a\n</p>\n<p>b\n</p>')


if __name__ == '__main__':
    unittest.main()
