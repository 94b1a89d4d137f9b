"""
# Contact-Form: mailtags.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Mail-tag interpolation.

Mail templates are plain text with mail-tags of the form
````
[«tag_name» "«value»" [...]]
````
which are replaced by submitted values (or special values from site and submission metadata).
Doubled brackets `[[«tag_name»]]` escape a mail-tag, giving the literal `[«tag_name»]`.
"""

import datetime
import re
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional, Union

from contactform.checks import is_date
from contactform.constants import DEFAULT_LIST_ITEM_SEPARATOR
from contactform.idioms import MAIL_TAG_PATTERN_COMPILED, QUOTED_VALUE_PATTERN_COMPILED, is_escaped_match
from contactform.site import Site
from contactform.utilities import escape_html, flat_join, flatten, format_date, strip_quote, texturize

RAW_PREFIX = '_raw_'
FORMAT_PREFIX = '_format_'
LEGACY_SPECIAL_PREFIX = 'wpcf7.'


class MailTag:
    """
    A mail-tag occurrence.

    - `[_raw_«name»]` looks up «name» without pipe resolution (do-not-heat).
    - `[_format_«name» "«date_format»"]` looks up «name»
      and formats `YYYY-MM-DD` values with «date_format».
    """
    _tag: str
    _tag_name: str
    _name: str
    _values: tuple[str, ...]
    _do_not_heat: bool
    _format: str

    def __init__(self, tag: str, tag_name: str, values_text: Optional[str] = None):
        self._tag = tag
        self._tag_name = tag_name
        self._name = tag_name
        self._values = tuple(
            strip_quote(match.group())
            for match in QUOTED_VALUE_PATTERN_COMPILED.finditer(values_text or '')
        )
        self._do_not_heat = False
        self._format = ''

        if tag_name.startswith(RAW_PREFIX) and len(tag_name) > len(RAW_PREFIX):
            self._name = tag_name[len(RAW_PREFIX):].strip()
            self._do_not_heat = True

        if tag_name.startswith(FORMAT_PREFIX) and len(tag_name) > len(FORMAT_PREFIX):
            self._name = tag_name[len(FORMAT_PREFIX):].strip()
            if len(self._values) > 0:
                self._format = self._values[0]

    def __repr__(self) -> str:
        return f'MailTag(tag={self._tag!r})'

    @staticmethod
    def from_match(match: re.Match) -> 'MailTag':
        return MailTag(match.group(), match.group('tag_name'), match.group('values'))

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def tag_name(self) -> str:
        return self._tag_name

    @property
    def field_name(self) -> str:
        return self._name.replace('.', '_')

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    @property
    def do_not_heat(self) -> bool:
        return self._do_not_heat

    @property
    def format(self) -> str:
        return self._format


def canonicalise_special_tag_name(tag_name: str) -> str:
    """
    Convert a legacy `wpcf7.«name»` special tag name to `_«name»`.
    """
    if tag_name.startswith(LEGACY_SPECIAL_PREFIX):
        return '_' + tag_name[len(LEGACY_SPECIAL_PREFIX):]

    return tag_name


class SpecialMailTags:
    """
    Resolver for special mail-tags, whose values come from site, user and submission metadata.

    Submission metadata keys:
    - `remote_ip`, `user_agent`, `url`: strings describing the request
    - `timestamp`: a `datetime.datetime`
    - `contact_form_title`: the title of the submitted contact form
    - `invalid_fields`: the number of invalid fields
    """
    _site: Site
    _meta: dict[str, Any]

    def __init__(self, site: Site, meta: Optional[Mapping[str, Any]] = None):
        self._site = site
        self._meta = dict(meta or {})

    def _site_value(self, name: str) -> Optional[str]:
        if name == '_site_title':
            return self._site.title
        if name == '_site_description':
            return self._site.description
        if name == '_site_url':
            return self._site.home_url
        if name == '_site_admin_email':
            return self._site.admin_email

        return None

    def _user_value(self, name: str) -> Optional[str]:
        field = name[len('_user_'):]
        if field not in ('login', 'email', 'url', 'first_name', 'last_name', 'nickname', 'display_name'):
            return None

        if self._site.user is None:
            return ''

        return getattr(self._site.user, field)

    def _submission_value(self, name: str) -> Optional[str]:
        if name == '_remote_ip':
            return self._meta.get('remote_ip', '')
        if name == '_user_agent':
            return self._meta.get('user_agent', '')
        if name == '_url':
            return self._meta.get('url', '')
        if name == '_contact_form_title':
            return self._meta.get('contact_form_title', '')
        if name == '_invalid_fields':
            return str(self._meta.get('invalid_fields', 0))

        if name in ('_date', '_time'):
            timestamp = self._meta.get('timestamp')
            if timestamp is None:
                timestamp = datetime.datetime.now()
            if name == '_date':
                return format_date(timestamp, self._site.date_format)
            return format_date(timestamp, self._site.time_format)

        return None

    def resolve(self, mail_tag: MailTag, html: bool = False) -> Optional[str]:
        name = canonicalise_special_tag_name(mail_tag.tag_name)
        if not name.startswith('_'):
            return None

        value = self._site_value(name)
        if value is None and name.startswith('_user_'):
            value = self._user_value(name)
        if value is None:
            value = self._submission_value(name)
        if value is None:
            return None

        if html:
            return escape_html(value)

        return value


Resolver = Callable[[MailTag, bool], Optional[str]]
TagCallback = Callable[[re.Match], str]


class MailTagContext(NamedTuple):
    """
    Values available to mail-tag replacement.

    - `posted_data` holds the prepared (pipe-resolved) values,
      and `raw_posted_data` the values as submitted.
    - `resolvers` are tried in order for tags that are neither fields nor special tags.
    """
    posted_data: Optional[Mapping[str, Any]] = None
    raw_posted_data: Optional[Mapping[str, Any]] = None
    special_mail_tags: Optional[SpecialMailTags] = None
    resolvers: tuple[Resolver, ...] = ()
    list_item_separator: str = DEFAULT_LIST_ITEM_SEPARATOR


def format_date_values(value: Any, date_format: str) -> list:
    formatted_values = []
    for item in flatten(value):
        if isinstance(item, str) and is_date(item):
            item = format_date(datetime.date.fromisoformat(item), date_format)
        formatted_values.append(item)

    return formatted_values


class MailTaggedText:
    """
    Text whose mail-tags are to be replaced.

    By default each mail-tag is resolved from the context (see `replace_tags_callback`);
    a different `callback` may be supplied to resolve tags some other way.
    """
    _content: str
    _html: bool
    _context: MailTagContext
    _callback: TagCallback
    _replaced_tags: dict[str, str]

    def __init__(self,
                 content: str,
                 html: bool = False,
                 callback: Optional[TagCallback] = None,
                 context: Optional[MailTagContext] = None):
        if context is None:
            context = MailTagContext()

        self._content = content
        self._html = html
        self._context = context
        self._replaced_tags = {}

        if callback is not None:
            self._callback = callback
        else:
            self._callback = self.replace_tags_callback

    @property
    def replaced_tags(self) -> dict[str, str]:
        return dict(self._replaced_tags)

    def replace_tags(self) -> str:
        self._replaced_tags = {}
        return MAIL_TAG_PATTERN_COMPILED.sub(self._callback, self._content)

    def _record(self, tag: str, replacement: str) -> str:
        self._replaced_tags[tag] = replacement
        return replacement

    def replace_tags_callback(self, match: re.Match) -> str:
        if is_escaped_match(match):
            return match.group()[1:-1]

        mail_tag = MailTag.from_match(match)
        field_name = mail_tag.field_name

        posted_data = self._context.posted_data or {}
        submitted = posted_data.get(field_name)

        if mail_tag.do_not_heat:
            raw_posted_data = self._context.raw_posted_data or {}
            submitted = raw_posted_data.get(field_name, '')

        if submitted is not None:
            replaced = submitted
            if mail_tag.format:
                replaced = format_date_values(replaced, mail_tag.format)

            replaced = flat_join(replaced, separator=self._context.list_item_separator)

            if self._html:
                replaced = texturize(escape_html(replaced))

            return self._record(mail_tag.tag, replaced.strip())

        if self._context.special_mail_tags is not None:
            special = self._context.special_mail_tags.resolve(mail_tag, self._html)
            if special is not None:
                return self._record(mail_tag.tag, special)

        for resolver in self._context.resolvers:
            resolved = resolver(mail_tag, self._html)
            if resolved is not None:
                return self._record(mail_tag.tag, resolved)

        return mail_tag.tag


def replace_mail_tags(content: Union[str, Mapping[str, Any], Iterable, Any],
                      html: bool = False,
                      exclude_blank: bool = False,
                      callback: Optional[TagCallback] = None,
                      context: Optional[MailTagContext] = None) -> Any:
    """
    Replace mail-tags in content, line by line.

    If `exclude_blank`, a line is dropped when it had mail-tags which all resolved to empty strings.
    Mappings and lists are processed value by value; other non-string values are returned as is.
    """
    if isinstance(content, Mapping):
        return {
            key: replace_mail_tags(value, html, exclude_blank, callback, context)
            for key, value in content.items()
        }

    if isinstance(content, (list, tuple)):
        return [replace_mail_tags(value, html, exclude_blank, callback, context) for value in content]

    if not isinstance(content, str):
        return content

    lines = []
    for line in content.split('\n'):
        mail_tagged_text = MailTaggedText(line, html=html, callback=callback, context=context)
        replaced = mail_tagged_text.replace_tags()

        if exclude_blank:
            replaced_tags = mail_tagged_text.replaced_tags
            if len(replaced_tags) > 0 and all(value == '' for value in replaced_tags.values()):
                continue

        lines.append(replaced)

    return '\n'.join(lines)
