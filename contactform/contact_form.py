"""
# Contact-Form: contact_form.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Contact form documents.

A contact form holds the properties
- `form`: the form template
- `mail`, `mail_2`: mail templates
- `messages`: user-facing messages keyed by status
- `additional_settings`: lines of the form `«name»: «value»`
"""

import re
from typing import Any, Mapping, Optional

from contactform.bases import ValidationContext
from contactform.core import form_to_html
from contactform.exceptions import MissingPropertyException
from contactform.messages import get_default_message
from contactform.registry import TagTypeRegistry
from contactform.scanner import ConditionValues, FormTagScanner
from contactform.site import Site
from contactform.swv import Schema, validate_schema
from contactform.tags import FormTag
from contactform.templates import get_default_template
from contactform.utilities import format_attributes
from contactform.validation import ValidationState

PROPERTY_NAMES = (
    'form',
    'mail',
    'mail_2',
    'messages',
    'additional_settings',
)
TRUE_SETTING_VALUES = ('on', 'true', '1')


class ContactForm:
    """
    A contact form document.

    The SWV schema is built on first use and memoized for the lifetime of the object.
    """
    _registry: TagTypeRegistry
    _scanner: FormTagScanner
    _site: Site
    _id: Any
    _name: str
    _title: str
    _locale: str
    _properties: dict[str, Any]
    _form_tags: Optional[list[FormTag]]
    _schema: Optional[Schema]

    def __init__(self,
                 registry: TagTypeRegistry,
                 site: Optional[Site] = None,
                 id_: Any = None,
                 name: str = '',
                 title: str = '',
                 locale: str = '',
                 properties: Optional[Mapping[str, Any]] = None):
        if site is None:
            site = Site()

        self._registry = registry
        self._scanner = FormTagScanner(registry)
        self._site = site
        self._id = id_
        self._name = name
        self._title = title
        self._locale = locale
        self._properties = {
            'form': '',
            'mail': {},
            'mail_2': {},
            'messages': {},
            'additional_settings': '',
        }
        self._properties.update(properties or {})
        self._form_tags = None
        self._schema = None

    def __repr__(self) -> str:
        return f'ContactForm(id_={self._id!r}, title={self._title!r})'

    @property
    def registry(self) -> TagTypeRegistry:
        return self._registry

    @property
    def scanner(self) -> FormTagScanner:
        return self._scanner

    @property
    def site(self) -> Site:
        return self._site

    @property
    def id_(self) -> Any:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def title(self) -> str:
        return self._title

    @property
    def locale(self) -> str:
        return self._locale

    @property
    def properties(self) -> dict[str, Any]:
        return dict(self._properties)

    def initial(self) -> bool:
        """
        Whether the contact form is new (not yet stored).
        """
        return not self._id

    def prop(self, property_name: str) -> Any:
        try:
            return self._properties[property_name]
        except KeyError:
            raise MissingPropertyException(property_name)

    def set_properties(self, properties: Mapping[str, Any]):
        self._properties.update(properties)
        self._form_tags = None
        self._schema = None

    def message(self, status: str) -> str:
        messages = self._properties.get('messages') or {}
        message = messages.get(status)
        if message is None:
            return get_default_message(status)

        return message

    def additional_setting(self, name: str, max_count: Optional[int] = 1) -> list[str]:
        """
        Get the values of an additional setting `«name»: «value»`.

        Returns at most `max_count` values (all of them if `max_count` is None).
        """
        values = []
        for line in (self._properties.get('additional_settings') or '').split('\n'):
            match = re.fullmatch(
                pattern=r'(?P<name> [a-zA-Z0-9_]+ ) [\t ]* : (?P<value> .* )',
                string=line.strip(),
                flags=re.VERBOSE,
            )
            if match is None or match.group('name') != name:
                continue

            values.append(match.group('value').strip())
            if max_count is not None and len(values) >= max_count:
                break

        return values

    def is_true(self, name: str) -> bool:
        return any(
            value in TRUE_SETTING_VALUES
            for value in self.additional_setting(name, max_count=None)
        )

    def form_tags(self) -> list[FormTag]:
        if self._form_tags is None:
            self._form_tags = self._scanner.scan(self._properties.get('form') or '')

        return list(self._form_tags)

    def scan_form_tags(self,
                       type_: ConditionValues = None,
                       basetype: ConditionValues = None,
                       name: ConditionValues = None,
                       feature: ConditionValues = None) -> list[FormTag]:
        return self._scanner.filter(self.form_tags(), type_=type_, basetype=basetype, name=name, feature=feature)

    def form_tags_payload(self) -> list[dict]:
        return [form_tag.to_dict() for form_tag in self.scan_form_tags()]

    def get_schema(self) -> Schema:
        if self._schema is None:
            schema = Schema(locale=self._locale)
            for contributor in self._registry.schema_contributors:
                contributor(schema, self)
            self._schema = schema

        return self._schema

    def validate_schema(self, context: ValidationContext, validation: ValidationState):
        validate_schema(self.get_schema(), context, validation)

    def unit_tag(self, count: int = 1) -> str:
        return f'wpcf7-f{self._id or 0}-o{count}'

    def form_elements(self) -> str:
        return form_to_html(self._properties.get('form') or '', self._scanner, auto_p=not self.is_true('autop_off'))

    def form_html(self, count: int = 1) -> str:
        """
        Render the contact form as an HTML form element inside its container.
        """
        unit_tag = self.unit_tag(count)
        container_attributes = format_attributes({
            'class': 'wpcf7 no-js',
            'id': unit_tag,
            'lang': self._locale.replace('_', '-') if self._locale else None,
        })
        form_attributes = format_attributes({
            'action': f'#{unit_tag}',
            'method': 'post',
            'class': 'wpcf7-form init',
            'novalidate': 'novalidate',
            'data-status': 'init',
        })
        hidden_fields = '\n'.join(
            f'<input type="hidden" name="{name}" value="{value}" />'
            for name, value in (
                ('_wpcf7', self._id or 0),
                ('_wpcf7_locale', self._locale),
                ('_wpcf7_unit_tag', unit_tag),
            )
        )

        return (
            f'<div {container_attributes}>\n'
            f'<form {form_attributes}>\n'
            f'<div style="display: none;">\n{hidden_fields}\n</div>\n'
            f'{self.form_elements()}'
            '<div class="wpcf7-response-output" aria-hidden="true"></div>\n'
            '</form>\n'
            '</div>'
        )

    def to_dict(self) -> dict:
        return {
            'id': self._id,
            'name': self._name,
            'title': self._title,
            'locale': self._locale,
            **self._properties,
        }

    @staticmethod
    def from_template(registry: TagTypeRegistry,
                      site: Optional[Site] = None,
                      title: str = '',
                      locale: str = '') -> 'ContactForm':
        if site is None:
            site = Site()

        properties = {
            property_name: get_default_template(property_name, site)
            for property_name in PROPERTY_NAMES
        }
        properties['additional_settings'] = ''

        return ContactForm(registry, site, title=title, locale=locale, properties=properties)

    @staticmethod
    def from_dict(data: Mapping[str, Any], registry: TagTypeRegistry, site: Optional[Site] = None) -> 'ContactForm':
        properties = {
            property_name: data[property_name]
            for property_name in PROPERTY_NAMES
            if property_name in data
        }

        return ContactForm(
            registry,
            site,
            id_=data.get('id'),
            name=data.get('name', ''),
            title=data.get('title', ''),
            locale=data.get('locale', ''),
            properties=properties,
        )
