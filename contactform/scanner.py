"""
# Contact-Form: scanner.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Form-tag scanner.
"""

import re
from typing import Callable, Iterable, Optional, Union

from contactform.checks import is_name
from contactform.idioms import (
    ATTRIBUTES_PATTERN_COMPILED,
    ESCAPED_TAG_PATTERN_COMPILED,
    QUOTED_VALUE_PATTERN_COMPILED,
    is_escaped_match,
)
from contactform.pipes import Pipes
from contactform.placeholders import PlaceholderMaster
from contactform.registry import TagTypeRegistry
from contactform.tags import FormTag
from contactform.utilities import none_to_empty_string, strip_quote

ConditionValues = Union[str, Iterable[str], None]


class FormTagScanner:
    """
    Object scanning form templates for form-tags of the registered tag types.

    Malformed occurrences are never an error; they are left in place as literal text.
    """
    _registry: TagTypeRegistry
    _use_pipes: bool

    def __init__(self, registry: TagTypeRegistry, use_pipes: bool = True):
        self._registry = registry
        self._use_pipes = use_pipes

    @property
    def registry(self) -> TagTypeRegistry:
        return self._registry

    @staticmethod
    def parse_attributes(text: str) -> Optional[tuple[list[str], list[str]]]:
        """
        Parse attribute text into (options, values).

        Options are the leading whitespace-separated tokens
        and values are the trailing quoted literals (quotes removed).
        Returns None if the text is not of that shape.
        """
        text = re.sub(pattern='[\u00a0\u200b]+', repl=' ', string=text).strip()

        match = ATTRIBUTES_PATTERN_COMPILED.fullmatch(text)
        if match is None:
            return None

        options_text = match.group('options').strip()
        if options_text == '':
            options = []
        else:
            options = re.split(pattern=r'[\r\n\t ]+', string=options_text)

        values = [
            strip_quote(quoted_value)
            for quoted_value in QUOTED_VALUE_PATTERN_COMPILED.findall(match.group('values'))
        ]

        return options, values

    @staticmethod
    def clean_content(content: Optional[str]) -> str:
        content = none_to_empty_string(content).strip()
        return re.sub(pattern=r'<br [\r\n\t ]* /? > $', repl='', string=content, flags=re.MULTILINE | re.VERBOSE)

    def build_form_tag(self, tag_match: re.Match, scanned_tags: list[FormTag]) -> Optional[FormTag]:
        """
        Build a form-tag from a match of the master regex.

        Returns None if the occurrence is to be left as literal text, namely
        a second occurrence of a singular tag type, or an invalid name.
        """
        type_ = tag_match.group('type').strip()
        basetype = type_.strip('*')

        if self._registry.supports(type_, 'singular'):
            if any(scanned_tag.basetype == basetype for scanned_tag in scanned_tags):
                return None

        attributes_text = none_to_empty_string(tag_match.group('attributes'))
        parsed_attributes = FormTagScanner.parse_attributes(attributes_text)

        if parsed_attributes is None:
            return FormTag(type_, attr=attributes_text, content=FormTagScanner.clean_content(tag_match.group('content')))

        options, raw_values = parsed_attributes

        raw_name = ''
        if self._registry.supports(type_, 'name-attr') and len(options) > 0:
            raw_name = options.pop(0)
            if not is_name(raw_name):
                return None

        if self._use_pipes:
            pipes = Pipes(raw_values)
            values = pipes.collect_befores()
        else:
            pipes = None
            values = raw_values

        return FormTag(
            type_,
            raw_name=raw_name,
            options=options,
            raw_values=raw_values,
            values=values,
            pipes=pipes,
            labels=values,
            content=FormTagScanner.clean_content(tag_match.group('content')),
        )

    def _substitute(self, text: str, substitute_function: Callable[[re.Match], str]) -> str:
        tag_regex = self._registry.tag_regex()
        if tag_regex is None:
            return text

        return re.sub(pattern=tag_regex, repl=substitute_function, string=text)

    def scan(self, text: str) -> list[FormTag]:
        """
        Scan text for form-tags, in order of appearance.
        """
        tag_regex = self._registry.tag_regex()
        if tag_regex is None:
            return []

        scanned_tags = []
        for tag_match in tag_regex.finditer(text):
            if is_escaped_match(tag_match):
                continue

            form_tag = self.build_form_tag(tag_match, scanned_tags)
            if form_tag is not None:
                scanned_tags.append(form_tag)

        return scanned_tags

    def replace_all(self, text: str) -> str:
        """
        Replace every form-tag with the markup from its tag type's renderer.

        Escaped occurrences `[[...]]` are unescaped to `[...]`,
        whether or not the name is that of a registered tag type.
        """
        scanned_tags = []

        def substitute_function(tag_match: re.Match) -> str:
            if is_escaped_match(tag_match):
                return tag_match.group()[1:-1]

            form_tag = self.build_form_tag(tag_match, scanned_tags)
            if form_tag is None:
                return tag_match.group()

            scanned_tags.append(form_tag)
            renderer = self._registry.lookup(form_tag.type_).renderer

            return (
                tag_match.group('opening_bracket')
                + renderer.render(form_tag)
                + tag_match.group('closing_bracket')
            )

        return self.unescape_unregistered(self._substitute(text, substitute_function))

    def unescape_unregistered(self, text: str) -> str:
        def substitute_function(escaped_match: re.Match) -> str:
            if escaped_match.group('type') in self._registry:
                return escaped_match.group()

            return escaped_match.group()[1:-1]

        return re.sub(pattern=ESCAPED_TAG_PATTERN_COMPILED, repl=substitute_function, string=text)

    def replace_with_placeholders(self, text: str, placeholder_master: PlaceholderMaster) -> str:
        """
        Replace every form-tag with a content-addressed placeholder element.

        Tag types declaring `display-block` or `display-hidden` get a block placeholder,
        all others an inline placeholder.
        Escaped occurrences are left as is.
        """
        def substitute_function(tag_match: re.Match) -> str:
            if is_escaped_match(tag_match):
                return tag_match.group()

            type_ = tag_match.group('type').strip()
            syntax_type_is_block = self._registry.supports(type_, ['display-block', 'display-hidden'])

            return placeholder_master.protect(tag_match.group(), syntax_type_is_block)

        return self._substitute(text, substitute_function)

    def normalize(self, text: str) -> str:
        """
        Normalise form-tags: collapse whitespace in attributes (escaping angle brackets)
        and trim content.
        """
        def substitute_function(tag_match: re.Match) -> str:
            if is_escaped_match(tag_match):
                return tag_match.group()

            type_ = tag_match.group('type')

            attributes = re.sub(
                pattern=r'[\r\n\t ]+',
                repl=' ',
                string=none_to_empty_string(tag_match.group('attributes')),
            ).strip()
            attributes = attributes.replace('<', '&lt;').replace('>', '&gt;')

            content = none_to_empty_string(tag_match.group('content')).strip()

            normalised_tag = f'[{type_}'
            if attributes != '':
                normalised_tag += f' {attributes}'
            if tag_match.group('slash') is not None:
                normalised_tag += ' /'
            normalised_tag += ']'
            if content != '':
                normalised_tag += f'{content}[/{type_}]'

            return tag_match.group('opening_bracket') + normalised_tag + tag_match.group('closing_bracket')

        return self._substitute(text, substitute_function)

    @staticmethod
    def normalise_condition(values: ConditionValues) -> list[str]:
        if values is None:
            return []

        if isinstance(values, str):
            values = [values]

        return [value.strip() for value in values if value.strip() != '']

    def supports_feature_condition(self, type_: str, features: list[str]) -> bool:
        """
        Check a feature condition, where a leading `!` negates a feature.
        """
        for feature in features:
            if feature.startswith('!'):
                if not self._registry.supports(type_, feature[1:].strip()):
                    return True
            elif self._registry.supports(type_, feature):
                return True

        return False

    def filter(self,
               tags_or_text: Union[str, Iterable[FormTag]],
               type_: ConditionValues = None,
               basetype: ConditionValues = None,
               name: ConditionValues = None,
               feature: ConditionValues = None) -> list[FormTag]:
        """
        Filter form-tags by conditions.

        A tag must satisfy every non-empty condition;
        within a condition, any one of the listed values suffices.
        """
        if isinstance(tags_or_text, str):
            tags = self.scan(tags_or_text)
        else:
            tags = list(tags_or_text)

        types = FormTagScanner.normalise_condition(type_)
        basetypes = FormTagScanner.normalise_condition(basetype)
        names = FormTagScanner.normalise_condition(name)
        features = FormTagScanner.normalise_condition(feature)

        return [
            tag
            for tag in tags
            if (len(types) == 0 or tag.type_ in types)
            and (len(basetypes) == 0 or tag.basetype in basetypes)
            and (len(names) == 0 or tag.name in names)
            and (len(features) == 0 or self.supports_feature_condition(tag.type_, features))
        ]
