"""
# Contact-Form: formatter.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

HTML formatter (automatic paragraphs and line breaks).
"""

import re
from typing import Iterable, Iterator, NamedTuple, Union

from contactform.placeholders import BLOCK_PLACEHOLDER_TAG_NAME, INLINE_PLACEHOLDER_TAG_NAME, PlaceholderMaster


CHUNK_TYPE_TEXT = 0
CHUNK_TYPE_START_TAG = 1
CHUNK_TYPE_END_TAG = 2
CHUNK_TYPE_COMMENT = 3

VOID_ELEMENTS = (
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'keygen', 'link', 'meta', 'param', 'source', 'track', 'wbr',
    BLOCK_PLACEHOLDER_TAG_NAME, INLINE_PLACEHOLDER_TAG_NAME,
)
P_PARENT_ELEMENTS = (
    'address', 'article', 'aside', 'blockquote', 'body', 'caption',
    'dd', 'details', 'dialog', 'div', 'dt', 'fieldset', 'figcaption',
    'figure', 'footer', 'form', 'header', 'li', 'main', 'nav',
    'section', 'template', 'td', 'th',
)
P_NONPARENT_ELEMENTS = (
    'colgroup', 'dl', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'head',
    'hgroup', 'html', 'legend', 'menu', 'ol', 'pre', 'style', 'summary',
    'table', 'tbody', 'template', 'tfoot', 'thead', 'title', 'tr', 'ul',
)
P_CHILD_ELEMENTS = (
    'a', 'abbr', 'area', 'audio', 'b', 'bdi', 'bdo', 'br', 'button',
    'canvas', 'cite', 'code', 'data', 'datalist', 'del', 'dfn',
    'em', 'embed', 'i', 'iframe', 'img', 'input', 'ins', 'kbd',
    'keygen', 'label', 'link', 'map', 'mark', 'math', 'meta',
    'meter', 'noscript', 'object', 'output', 'picture', 'progress',
    'q', 'ruby', 's', 'samp', 'script', 'select', 'slot', 'small',
    'span', 'strong', 'sub', 'sup', 'svg', 'template', 'textarea',
    'time', 'u', 'var', 'video', 'wbr',
    'optgroup', 'option', 'rp', 'rt',
    INLINE_PLACEHOLDER_TAG_NAME,
)
BR_PARENT_ELEMENTS = (
    'a', 'abbr', 'address', 'article', 'aside', 'audio', 'b', 'bdi',
    'bdo', 'blockquote', 'button', 'canvas', 'caption', 'cite', 'code',
    'data', 'datalist', 'dd', 'del', 'details', 'dfn', 'dialog', 'div',
    'dt', 'em', 'fieldset', 'figcaption', 'figure', 'footer', 'form',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'i', 'ins', 'kbd',
    'label', 'legend', 'li', 'main', 'map', 'mark', 'meter', 'nav',
    'noscript', 'object', 'output', 'p', 'pre', 'progress', 'q', 'rt',
    'ruby', 's', 'samp', 'section', 'slot', 'small', 'span', 'strong',
    'sub', 'summary', 'sup', 'td', 'template', 'th', 'time', 'u', 'var',
    'video',
)

# Elements whose start tag closes a preceding element with an omitted end tag.
IMPLIED_END_TAG_NAMES_FROM_START_TAG_NAME = {
    'dd': ('dd', 'dt'),
    'dt': ('dd', 'dt'),
    'li': ('li',),
    'optgroup': ('option', 'optgroup'),
    'option': ('option',),
    'rp': ('rp', 'rt'),
    'rt': ('rp', 'rt'),
    'td': ('td', 'th'),
    'th': ('td', 'th'),
    'tr': ('tr',),
    'tbody': ('thead',),
    'tfoot': ('thead', 'tbody'),
}

PHP_WHITESPACE = ' \t\n\r\0\x0b'


class Chunk(NamedTuple):
    type_: int
    content: str


class HTMLFormatter:
    """
    Streaming formatter inserting paragraphs and line breaks into HTML.

    Markup is separated into chunks (text, start tags, end tags, comments),
    which are then emitted while keeping track of the currently open elements.
    Paragraphs are opened around phrasing content and at blank lines,
    omitted end tags are implied, and remaining elements are closed at the end.
    This is a best-effort normaliser rather than a validating parser.
    """
    _auto_br: bool
    _auto_indent: bool
    _output: str
    _stacked_elements: list[str]

    def __init__(self, auto_br: bool = True, auto_indent: bool = True):
        self._auto_br = auto_br
        self._auto_indent = auto_indent
        self._output = ''
        self._stacked_elements = []

    @staticmethod
    def separate_into_chunks(input_: str) -> Iterator[Chunk]:
        position = 0
        for tag_match in re.finditer(
            pattern=r'<!-- .*? --> | < /? [a-z] .*? >',
            string=input_,
            flags=re.IGNORECASE | re.DOTALL | re.VERBOSE,
        ):
            if position < tag_match.start():
                yield Chunk(CHUNK_TYPE_TEXT, input_[position:tag_match.start()])

            tag = tag_match.group()
            if tag.startswith('<!'):
                chunk_type = CHUNK_TYPE_COMMENT
            elif tag.startswith('</'):
                chunk_type = CHUNK_TYPE_END_TAG
            else:
                chunk_type = CHUNK_TYPE_START_TAG

            yield Chunk(chunk_type, tag)
            position = tag_match.end()

        if position < len(input_):
            yield Chunk(CHUNK_TYPE_TEXT, input_[position:])

    def pre_format(self, chunks: Iterable[Chunk]) -> Iterator[Chunk]:
        for chunk in chunks:
            content = chunk.content.replace('\r\n', '\n').replace('\r', '\n')
            chunk = Chunk(chunk.type_, content)

            if chunk.type_ == CHUNK_TYPE_START_TAG:
                content, _ = HTMLFormatter.normalize_start_tag(content)
                chunk = Chunk(CHUNK_TYPE_START_TAG, content)

                if self._auto_br and re.fullmatch(pattern=r'<br \s* /? >', string=content,
                                                  flags=re.ASCII | re.IGNORECASE | re.VERBOSE):
                    chunk = Chunk(CHUNK_TYPE_TEXT, '\n')

            yield chunk

    @staticmethod
    def concatenate_texts(chunks: Iterable[Chunk]) -> Iterator[Chunk]:
        text_contents = []
        for chunk in chunks:
            if chunk.type_ == CHUNK_TYPE_TEXT:
                text_contents.append(chunk.content)
                continue

            if len(text_contents) > 0:
                yield Chunk(CHUNK_TYPE_TEXT, ''.join(text_contents))
                text_contents = []

            yield chunk

        if len(text_contents) > 0:
            yield Chunk(CHUNK_TYPE_TEXT, ''.join(text_contents))

    def format(self, chunks: Iterable[Chunk]) -> str:
        chunks = self.pre_format(chunks)
        chunks = HTMLFormatter.concatenate_texts(chunks)

        self._output = ''
        self._stacked_elements = []

        for chunk in chunks:
            if chunk.type_ == CHUNK_TYPE_TEXT:
                self.append_text(chunk.content)
            elif chunk.type_ == CHUNK_TYPE_START_TAG:
                self.start_tag(chunk.content)
            elif chunk.type_ == CHUNK_TYPE_END_TAG:
                self.end_tag(chunk.content)
            elif chunk.type_ == CHUNK_TYPE_COMMENT:
                self.append_comment(chunk.content)

        if len(self._stacked_elements) > 0:
            self.end_tag(self._stacked_elements[0])

        return self._output

    def append_text(self, content: str):
        if self.is_inside('pre'):
            self._output += content
            return

        if self.is_inside(P_CHILD_ELEMENTS) or self.has_parent(P_NONPARENT_ELEMENTS):
            auto_br = self._auto_br and self.has_parent(BR_PARENT_ELEMENTS)
            self._output += HTMLFormatter.normalize_paragraph(content, auto_br)
            return

        if re.match(pattern=r'\s* \n \s* \n \s*', string=content, flags=re.ASCII | re.VERBOSE):
            self.end_tag('p')

        paragraphs = [
            paragraph
            for paragraph in re.split(pattern=r'\s* \n \s* \n \s*', string=content, flags=re.ASCII | re.VERBOSE)
            if paragraph.strip(PHP_WHITESPACE) != ''
        ]

        if len(paragraphs) > 0:
            if self.is_inside('p'):
                paragraph = paragraphs.pop(0)
                self._output += HTMLFormatter.normalize_paragraph(paragraph, self._auto_br)

            for paragraph in paragraphs:
                self.start_tag('p')
                self._output += HTMLFormatter.normalize_paragraph(paragraph, self._auto_br)

        if re.search(pattern=r'\s* \n \s* \n \s* $', string=content, flags=re.ASCII | re.VERBOSE):
            self.end_tag('p')

        if re.fullmatch(pattern=r'\s* \n \s*', string=content, flags=re.ASCII | re.VERBOSE):
            auto_br = self._auto_br and self.is_inside('p')
            self._output += HTMLFormatter.normalize_paragraph(content, auto_br)

    def start_tag(self, tag: str):
        tag, tag_name = HTMLFormatter.normalize_start_tag(tag)

        if tag_name in P_CHILD_ELEMENTS:
            if not self.is_inside('p') and not self.has_parent(P_NONPARENT_ELEMENTS):
                self.start_tag('p')
        else:
            self.end_tag('p')

        for implied_end_tag_name in IMPLIED_END_TAG_NAMES_FROM_START_TAG_NAME.get(tag_name, ()):
            self.end_tag(implied_end_tag_name)

        if tag_name not in VOID_ELEMENTS:
            self._stacked_elements.append(tag_name)

        if tag_name not in P_CHILD_ELEMENTS:
            if self._output != '':
                self._output = self._output.rstrip(PHP_WHITESPACE) + '\n'

            if self._auto_indent:
                self._output += HTMLFormatter.indent(len(self._stacked_elements) - 1)

        self._output += tag

    def end_tag(self, tag: str):
        end_tag_match = re.match(pattern=r'</ (?P<tag_name> .+? ) (?: \s | > )', string=tag, flags=re.ASCII | re.VERBOSE)
        if end_tag_match is not None:
            tag_name = end_tag_match.group('tag_name').lower()
        else:
            tag_name = tag.lower()

        if not self.is_inside(tag_name):
            return

        while len(self._stacked_elements) > 0:
            element = self._stacked_elements.pop()

            if element not in P_CHILD_ELEMENTS:
                self._output = re.sub(pattern=r'\s* <br\ /> \s* $', repl='', string=self._output,
                                      flags=re.ASCII | re.VERBOSE)
                self._output = self._output.rstrip(PHP_WHITESPACE) + '\n'

                if self._auto_indent:
                    self._output += HTMLFormatter.indent(len(self._stacked_elements))

            self._output += f'</{element}>'
            self._output = re.sub(pattern=r'<p> \s* </p> $', repl='', string=self._output, flags=re.ASCII | re.VERBOSE)

            if element == tag_name:
                break

    def append_comment(self, tag: str):
        self._output += tag

    def is_inside(self, tag_names: Union[str, Iterable[str]]) -> bool:
        if isinstance(tag_names, str):
            tag_names = (tag_names,)

        return any(element in tag_names for element in self._stacked_elements)

    def has_parent(self, tag_names: Union[str, Iterable[str]]) -> bool:
        if len(self._stacked_elements) == 0:
            return False

        if isinstance(tag_names, str):
            tag_names = (tag_names,)

        return self._stacked_elements[-1] in tag_names

    @staticmethod
    def indent(level: int) -> str:
        if level > 0:
            return '\t' * level

        return ''

    @staticmethod
    def normalize_start_tag(tag: str) -> tuple[str, str]:
        """
        Normalise a start tag (or bare tag name) into (tag, tag_name).

        Void elements are given a self-closing slash preceded by a space.
        """
        tag_name_match = re.search(pattern=r'< (?P<tag_name> .+? ) [\s/>]', string=tag, flags=re.ASCII | re.VERBOSE)
        if tag_name_match is not None:
            tag_name = tag_name_match.group('tag_name').lower()
        else:
            tag_name = tag.lower()
            tag = f'<{tag_name}>'

        if tag_name in VOID_ELEMENTS:
            tag = re.sub(pattern=r'\s* /? >', repl=' />', string=tag, flags=re.ASCII | re.VERBOSE)

        return tag, tag_name

    @staticmethod
    def normalize_paragraph(paragraph: str, auto_br: bool = False) -> str:
        if auto_br:
            paragraph = re.sub(pattern=r'\s* \n \s*', repl='<br />\n', string=paragraph, flags=re.ASCII | re.VERBOSE)

        return re.sub(pattern='[ ]+', repl=' ', string=paragraph)


def autop(input_: str, auto_br: bool = True) -> str:
    """
    Format HTML with automatic paragraphs (and line breaks if `auto_br`).

    Embedded MathML and SVG elements are protected from formatting.
    """
    placeholder_master = PlaceholderMaster()
    input_ = re.sub(
        pattern=r'<(?P<element> math | svg ) .*? </(?P=element)>',
        repl=lambda match: placeholder_master.protect(match.group(), syntax_type_is_block=False),
        string=input_,
        flags=re.IGNORECASE | re.DOTALL | re.VERBOSE,
    )

    formatter = HTMLFormatter(auto_br=auto_br)
    output = formatter.format(HTMLFormatter.separate_into_chunks(input_))

    return placeholder_master.unprotect(output)
