"""
# Contact-Form: config_validator.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Configuration validator.

Statically analyses the templates of a contact form and records configuration errors by section,
where a section is a dotted path such as `form.body`, `mail.sender` or `messages.mail_sent_ok`.
Every check runs on every validation; errors are collected, never raised.
"""

import os
import re
from typing import Any, Mapping, NamedTuple, Optional, Union

from contactform.checks import is_email_in_site_domain, is_file_path_in_content_dir, is_mailbox_list
from contactform.constants import (
    ATTACHMENTS_TOTAL_SIZE_LIMIT,
    CONFIG_ERRORS_DOC_URL,
    CONFIG_ERRORS_META_KEY,
    DEFAULT_MESSAGE_FROM_ERROR_CODE,
    ERROR_ATTACHMENTS_OVERWEIGHT,
    ERROR_COLONS_IN_NAMES,
    ERROR_DEPRECATED_SETTINGS,
    ERROR_DOTS_IN_NAMES,
    ERROR_EMAIL_NOT_IN_SITE_DOMAIN,
    ERROR_FILE_NOT_FOUND,
    ERROR_FILE_NOT_IN_CONTENT_DIR,
    ERROR_HTML_IN_MESSAGE,
    ERROR_INVALID_MAIL_HEADER,
    ERROR_INVALID_MAILBOX_SYNTAX,
    ERROR_MAYBE_EMPTY,
    ERROR_MULTIPLE_CONTROLS_IN_LABEL,
    ERROR_SLUG_FROM_CODE,
    ERROR_UNAVAILABLE_HTML_ELEMENTS,
    ERROR_UNAVAILABLE_NAMES,
    ERROR_UPLOAD_FILESIZE_OVERLIMIT,
    EXAMPLE_EMAIL,
    EXAMPLE_TEXT,
    GB_IN_BYTES,
    KB_IN_BYTES,
    MAILBOX_HEADER_NAMES,
    MB_IN_BYTES,
    UNAVAILABLE_NAMES,
)
from contactform.contact_form import ContactForm
from contactform.idioms import is_escaped_match
from contactform.mailtags import MailTag, MailTaggedText, canonicalise_special_tag_name
from contactform.site import MetadataStore
from contactform.utilities import path_join, strip_all_tags, strip_newline

UNIT_MULTIPLIER_FROM_SUFFIX = {
    '': 1,
    'k': KB_IN_BYTES,
    'm': MB_IN_BYTES,
    'g': GB_IN_BYTES,
}


class ConfigError(NamedTuple):
    """
    A configuration error.

    «message» may contain placeholders `%«key»%`, substituted from «params».
    An empty «message» stands for the default message of «code».
    """
    code: int
    message: str = ''
    params: Optional[dict[str, str]] = None
    link: str = ''

    def to_dict(self) -> dict:
        return {
            'code': self.code,
            'args': {
                'message': self.message,
                'params': dict(self.params or {}),
                'link': self.link,
            },
        }


def parse_upload_max_filesize(text: Union[str, int, None]) -> Optional[int]:
    """
    Parse a host upload ceiling such as `2M`, `512k`, `1g` or `1048576` into bytes.

    Suffixes are powers of 1024. Returns None if the ceiling is unset or unparseable.
    """
    if text is None:
        return None

    match = re.fullmatch(
        pattern=r'(?P<number> [0-9]+ ) (?P<suffix> [kmg]? )',
        string=str(text).strip().lower(),
        flags=re.ASCII | re.VERBOSE,
    )
    if match is None:
        return None

    return int(match.group('number')) * UNIT_MULTIPLIER_FROM_SUFFIX[match.group('suffix')]


def canonical_section(section: str) -> str:
    """
    Map the sections of numbered mail templates (`mail_2.«x»`) to `mail.«x»`.
    """
    match = re.fullmatch(pattern=r'mail_[0-9]+ [.] (?P<rest> .* )', string=section, flags=re.DOTALL | re.VERBOSE)
    if match is not None:
        return f'mail.{match.group("rest")}'

    return section


class ConfigValidator:
    """
    Object detecting configuration errors in a contact form.
    """
    _contact_form: ContactForm
    _errors: dict[str, list[ConfigError]]

    def __init__(self, contact_form: ContactForm):
        self._contact_form = contact_form
        self._errors = {}

    @property
    def contact_form(self) -> ContactForm:
        return self._contact_form

    @property
    def errors(self) -> dict[str, list[ConfigError]]:
        return {section: list(errors) for section, errors in self._errors.items()}

    @staticmethod
    def get_doc_link(error_code: Union[int, str] = '') -> str:
        """
        Get the documentation URL for an error code (or error slug).
        """
        url = CONFIG_ERRORS_DOC_URL.rstrip('/')
        if isinstance(error_code, int):
            error_code = ERROR_SLUG_FROM_CODE.get(error_code, '')

        if error_code == '':
            return f'{url}/'

        return f'{url}/{error_code.replace("_", "-")}'

    @staticmethod
    def build_message(message: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """
        Substitute the placeholders `%«key»%` (case-insensitively) in a message.
        """
        for key, value in (params or {}).items():
            if not re.fullmatch(pattern='[0-9A-Za-z_]+', string=key):
                continue

            message = re.sub(
                pattern=re.escape(f'%{key}%'),
                repl=lambda _: str(value),
                string=message,
                flags=re.IGNORECASE,
            )

        return message

    @staticmethod
    def get_default_message(code: int) -> str:
        return DEFAULT_MESSAGE_FROM_ERROR_CODE.get(code, '')

    def is_valid(self) -> bool:
        return self.count_errors() == 0

    def count_errors(self, section: str = '', code: Optional[int] = None) -> int:
        """
        Count errors, optionally restricted to a section and an error code.

        A section matches either the full key or its part before the first dot;
        the sections of `mail_2` count as those of `mail`.
        """
        count = 0
        for key, errors in self._errors.items():
            key = canonical_section(key)

            if section and key != section and key.split('.', 1)[0] != section:
                continue

            for error in errors:
                if code is not None and error.code != code:
                    continue
                count += 1

        return count

    def collect_error_messages(self) -> dict[str, list[dict[str, str]]]:
        error_messages = {}
        for section, errors in self._errors.items():
            error_messages[section] = []
            for error in errors:
                if error.message == '':
                    message = ConfigValidator.get_default_message(error.code)
                elif not error.params:
                    message = error.message
                else:
                    message = ConfigValidator.build_message(error.message, error.params)

                error_messages[section].append({'message': message, 'link': error.link})

        return error_messages

    def add_error(self,
                  section: str,
                  code: int,
                  message: str = '',
                  params: Optional[Mapping[str, Any]] = None,
                  link: str = '') -> bool:
        error = ConfigError(code, message, {key: str(value) for key, value in (params or {}).items()}, link)
        self._errors.setdefault(section, []).append(error)

        return True

    def remove_error(self, section: str, code: int):
        errors = [error for error in self._errors.get(section, []) if error.code != code]
        if len(errors) > 0:
            self._errors[section] = errors
        else:
            self._errors.pop(section, None)

    def validate(self) -> bool:
        self._errors = {}

        self.validate_form()
        self.validate_mail('mail')
        self.validate_mail('mail_2')
        self.validate_messages()
        self.validate_additional_settings()

        return self.is_valid()

    def save(self, store: MetadataStore):
        """
        Persist the detected errors as metadata of the contact form (unless it is new).
        """
        if self._contact_form.initial():
            return

        store.delete_meta(self._contact_form.id_, CONFIG_ERRORS_META_KEY)

        if len(self._errors) > 0:
            store.update_meta(
                self._contact_form.id_,
                CONFIG_ERRORS_META_KEY,
                {
                    section: [error.to_dict() for error in errors]
                    for section, errors in self._errors.items()
                },
            )

    def restore(self, store: MetadataStore):
        """
        Reload errors persisted by a previous run, without running detection.
        """
        config_errors = store.get_meta(self._contact_form.id_, CONFIG_ERRORS_META_KEY) or {}

        for section, errors in config_errors.items():
            if not errors:
                continue

            if not isinstance(errors, list):
                self.add_error(section, int(errors))
                continue

            for error in errors:
                if not error.get('code'):
                    continue

                args = error.get('args') or {}
                self.add_error(
                    section,
                    int(error['code']),
                    message=args.get('message', ''),
                    params=args.get('params'),
                    link=args.get('link', ''),
                )

    def replace_mail_tags_with_minimum_input(self, match: re.Match) -> str:
        """
        Replace a mail-tag with the most conservative input for it.

        Optional fields give an empty string.
        Required fields give an example email address or example text,
        depending on what the corresponding form-tag would submit.
        """
        if is_escaped_match(match):
            return match.group()[1:-1]

        mail_tag = MailTag.from_match(match)
        form_tags = self._contact_form.scan_form_tags(name=mail_tag.field_name)

        if len(form_tags) > 0:
            form_tag = form_tags[0]

            if not form_tag.is_required() and form_tag.type_ != 'radio':
                return ''

            if self._contact_form.registry.supports(form_tag.type_, 'selectable-values'):
                if form_tag.pipes is not None:
                    if mail_tag.do_not_heat:
                        items = form_tag.pipes.collect_befores()
                    else:
                        items = form_tag.pipes.collect_afters()
                else:
                    items = list(form_tag.values)

                last_item = items[-1] if len(items) > 0 else ''
                if last_item and is_mailbox_list(last_item):
                    return EXAMPLE_EMAIL

                return EXAMPLE_TEXT

            if form_tag.basetype == 'email':
                return EXAMPLE_EMAIL

            return EXAMPLE_TEXT

        name = canonicalise_special_tag_name(mail_tag.tag_name)

        if name == '_site_admin_email':
            return self._contact_form.site.admin_email

        if name == '_user_agent':
            return EXAMPLE_TEXT

        if name == '_user_email':
            return EXAMPLE_EMAIL if self._contact_form.is_true('subscribers_only') else ''

        if name.startswith('_user_'):
            return EXAMPLE_TEXT if self._contact_form.is_true('subscribers_only') else ''

        if name.startswith('_'):
            return EXAMPLE_EMAIL if name.endswith('_email') else EXAMPLE_TEXT

        return mail_tag.tag

    def replace_tags_minimally(self, content: str) -> str:
        mail_tagged_text = MailTaggedText(content, callback=self.replace_mail_tags_with_minimum_input)
        return mail_tagged_text.replace_tags()

    def validate_form(self):
        section = 'form.body'
        form = self._contact_form.prop('form') or ''

        self.detect_multiple_controls_in_label(section, form)
        self.detect_unavailable_names(section, form)
        self.detect_unavailable_html_elements(section, form)
        self.detect_dots_in_names(section, form)
        self.detect_colons_in_names(section, form)
        self.detect_upload_filesize_overlimit(section, form)

    def detect_multiple_controls_in_label(self, section: str, content: str) -> bool:
        registry = self._contact_form.registry
        scanner = self._contact_form.scanner

        for label_match in re.finditer(
            pattern=r'<label (?: [ \t\n]+ .*? )? > (?P<inside_label> .+? ) </label>',
            string=content,
            flags=re.DOTALL | re.VERBOSE,
        ):
            fields_count = 0
            for tag in scanner.scan(label_match.group('inside_label')):
                if registry.supports(tag.type_, 'multiple-controls-container'):
                    fields_count += len(tag.values)
                    if tag.has_option('free_text'):
                        fields_count += 1
                elif registry.supports(tag.type_, 'zero-controls-container'):
                    pass
                elif tag.name != '':
                    fields_count += 1

                if fields_count > 1:
                    return self.add_error(
                        section,
                        ERROR_MULTIPLE_CONTROLS_IN_LABEL,
                        link=ConfigValidator.get_doc_link(ERROR_MULTIPLE_CONTROLS_IN_LABEL),
                    )

        return False

    def detect_unavailable_names(self, section: str, content: str) -> bool:
        unavailable_named_tags = self._contact_form.scanner.filter(content, name=UNAVAILABLE_NAMES)
        unavailable_names = list(dict.fromkeys(f'"{tag.name}"' for tag in unavailable_named_tags))

        if len(unavailable_names) > 0:
            return self.add_error(
                section,
                ERROR_UNAVAILABLE_NAMES,
                message='Unavailable names (%names%) are used for form controls.',
                params={'names': ', '.join(unavailable_names)},
                link=ConfigValidator.get_doc_link(ERROR_UNAVAILABLE_NAMES),
            )

        return False

    def detect_unavailable_html_elements(self, section: str, content: str) -> bool:
        if re.search(pattern=r'<form [\s>] | </form>', string=content, flags=re.IGNORECASE | re.VERBOSE):
            return self.add_error(
                section,
                ERROR_UNAVAILABLE_HTML_ELEMENTS,
                message='Unavailable HTML elements are used in the form template.',
                link=ConfigValidator.get_doc_link(ERROR_UNAVAILABLE_HTML_ELEMENTS),
            )

        return False

    def detect_dots_in_names(self, section: str, content: str) -> bool:
        for tag in self._contact_form.scanner.filter(content, feature='name-attr'):
            if '.' in tag.raw_name:
                return self.add_error(
                    section,
                    ERROR_DOTS_IN_NAMES,
                    message='Dots are used in form-tag names.',
                    link=ConfigValidator.get_doc_link(ERROR_DOTS_IN_NAMES),
                )

        return False

    def detect_colons_in_names(self, section: str, content: str) -> bool:
        for tag in self._contact_form.scanner.filter(content, feature='name-attr'):
            if ':' in tag.raw_name:
                return self.add_error(
                    section,
                    ERROR_COLONS_IN_NAMES,
                    message='Colons are used in form-tag names.',
                    link=ConfigValidator.get_doc_link(ERROR_COLONS_IN_NAMES),
                )

        return False

    def detect_upload_filesize_overlimit(self, section: str, content: str) -> bool:
        upload_max_filesize = parse_upload_max_filesize(self._contact_form.site.upload_max_filesize)
        if upload_max_filesize is None:
            return False

        for tag in self._contact_form.scanner.filter(content, basetype='file'):
            if upload_max_filesize < tag.get_limit_option():
                return self.add_error(
                    section,
                    ERROR_UPLOAD_FILESIZE_OVERLIMIT,
                    message="Uploadable file size exceeds the host's maximum acceptable size.",
                    link=ConfigValidator.get_doc_link(ERROR_UPLOAD_FILESIZE_OVERLIMIT),
                )

        return False

    def validate_mail(self, template_name: str = 'mail'):
        components = self._contact_form.prop(template_name) or {}
        if len(components) == 0:
            return

        if template_name != 'mail' and not components.get('active'):
            return

        def component(component_name: str) -> str:
            return components.get(component_name) or ''

        subject = strip_newline(self.replace_tags_minimally(component('subject')))
        self.detect_maybe_empty(f'{template_name}.subject', subject)

        sender = strip_newline(self.replace_tags_minimally(component('sender')))
        invalid_mailbox = self.detect_invalid_mailbox_syntax(f'{template_name}.sender', sender)
        if not invalid_mailbox and not is_email_in_site_domain(sender, self._contact_form.site.home_url):
            self.add_error(
                f'{template_name}.sender',
                ERROR_EMAIL_NOT_IN_SITE_DOMAIN,
                link=ConfigValidator.get_doc_link(ERROR_EMAIL_NOT_IN_SITE_DOMAIN),
            )

        recipient = strip_newline(self.replace_tags_minimally(component('recipient')))
        self.detect_invalid_mailbox_syntax(f'{template_name}.recipient', recipient)

        self.detect_invalid_mail_headers(
            f'{template_name}.additional_headers',
            self.replace_tags_minimally(component('additional_headers')),
        )

        body = self.replace_tags_minimally(component('body'))
        self.detect_maybe_empty(f'{template_name}.body', body)

        if component('attachments') != '':
            self.detect_attachment_errors(f'{template_name}.attachments', component('attachments'))

    def detect_invalid_mail_headers(self, section: str, content: str) -> bool:
        invalid_mail_header_exists = False
        for header in content.split('\n'):
            header = header.strip()
            if header == '':
                continue

            header_match = re.fullmatch(
                pattern=r'(?P<header_name> [0-9A-Za-z-]+ ) : (?P<header_value> .* )',
                string=header,
                flags=re.VERBOSE,
            )
            if header_match is None:
                invalid_mail_header_exists = True
                continue

            header_name = header_match.group('header_name')
            header_value = header_match.group('header_value').strip()
            if header_name.lower() in MAILBOX_HEADER_NAMES and header_value != '':
                self.detect_invalid_mailbox_syntax(
                    section,
                    header_value,
                    message='Invalid mailbox syntax is used in the %name% field.',
                    params={'name': header_name},
                )

        if invalid_mail_header_exists:
            return self.add_error(
                section,
                ERROR_INVALID_MAIL_HEADER,
                link=ConfigValidator.get_doc_link(ERROR_INVALID_MAIL_HEADER),
            )

        return False

    def detect_attachment_errors(self, section: str, attachments: str) -> bool:
        """
        Detect missing static attachments, attachments outside the content directory,
        and a total attachment size over the ceiling.

        The total counts the size limit of every file field whose mail-tag appears in the attachments.
        """
        size_limit_from_name = {}
        for tag in self._contact_form.scan_form_tags(type_=['file', 'file*']):
            if f'[{tag.name}]' not in attachments:
                continue

            limit = tag.get_limit_option()
            if size_limit_from_name.get(tag.name, 0) < limit:
                size_limit_from_name[tag.name] = limit

        total_size = sum(size_limit_from_name.values())

        content_dir = self._contact_form.site.content_dir
        has_file_not_in_content_dir = False
        for line in attachments.split('\n'):
            line = line.strip()
            if line == '' or line.startswith('['):
                continue

            has_file_not_found = self.detect_file_not_found(section, line)

            if not has_file_not_found and not has_file_not_in_content_dir:
                has_file_not_in_content_dir = self.detect_file_not_in_content_dir(section, line)

            if not has_file_not_found:
                total_size += os.path.getsize(path_join(content_dir, line))

        if total_size > ATTACHMENTS_TOTAL_SIZE_LIMIT:
            return self.add_error(
                section,
                ERROR_ATTACHMENTS_OVERWEIGHT,
                message='The total size of attachment files is too large.',
                link=ConfigValidator.get_doc_link(ERROR_ATTACHMENTS_OVERWEIGHT),
            )

        return False

    def detect_invalid_mailbox_syntax(self,
                                      section: str,
                                      content: str,
                                      message: str = '',
                                      params: Optional[Mapping[str, Any]] = None) -> bool:
        if not is_mailbox_list(content):
            return self.add_error(
                section,
                ERROR_INVALID_MAILBOX_SYNTAX,
                message=message,
                params=params,
                link=ConfigValidator.get_doc_link(ERROR_INVALID_MAILBOX_SYNTAX),
            )

        return False

    def detect_maybe_empty(self, section: str, content: str) -> bool:
        if content == '':
            return self.add_error(
                section,
                ERROR_MAYBE_EMPTY,
                link=ConfigValidator.get_doc_link(ERROR_MAYBE_EMPTY),
            )

        return False

    def detect_file_not_found(self, section: str, content: str) -> bool:
        path = path_join(self._contact_form.site.content_dir, content)

        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            return self.add_error(
                section,
                ERROR_FILE_NOT_FOUND,
                message='Attachment file does not exist at %path%.',
                params={'path': content},
                link=ConfigValidator.get_doc_link(ERROR_FILE_NOT_FOUND),
            )

        return False

    def detect_file_not_in_content_dir(self, section: str, content: str) -> bool:
        content_dir = self._contact_form.site.content_dir
        path = path_join(content_dir, content)

        if not is_file_path_in_content_dir(path, content_dir):
            return self.add_error(
                section,
                ERROR_FILE_NOT_IN_CONTENT_DIR,
                message='It is not allowed to use files outside the content directory.',
                link=ConfigValidator.get_doc_link(ERROR_FILE_NOT_IN_CONTENT_DIR),
            )

        return False

    def validate_messages(self):
        messages = dict(self._contact_form.prop('messages') or {})
        if len(messages) == 0:
            return

        if not self._contact_form.site.uses_really_simple_captcha:
            messages.pop('captcha_not_match', None)

        for key, message in messages.items():
            self.detect_html_in_message(f'messages.{key}', message)

    def detect_html_in_message(self, section: str, content: str) -> bool:
        content = str(content)
        if strip_all_tags(content) != content.strip():
            return self.add_error(
                section,
                ERROR_HTML_IN_MESSAGE,
                link=ConfigValidator.get_doc_link(ERROR_HTML_IN_MESSAGE),
            )

        return False

    def validate_additional_settings(self) -> bool:
        deprecated_settings_used = (
            len(self._contact_form.additional_setting('on_sent_ok')) > 0
            or len(self._contact_form.additional_setting('on_submit')) > 0
        )

        if deprecated_settings_used:
            return self.add_error(
                'additional_settings.body',
                ERROR_DEPRECATED_SETTINGS,
                link=ConfigValidator.get_doc_link(ERROR_DEPRECATED_SETTINGS),
            )

        return False
