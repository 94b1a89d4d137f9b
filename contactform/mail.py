"""
# Contact-Form: mail.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Mail composition from mail templates.

A mail template is a dictionary with the components
`subject`, `sender`, `body`, `recipient`, `additional_headers` and `attachments`,
plus the flags `use_html` and `exclude_blank` (which apply to the body only).
"""

import abc
import os
import re
import warnings
from typing import Any, Iterable, Mapping, NamedTuple, Optional

from contactform.bases import UploadedFile
from contactform.checks import is_file_path_in_content_dir
from contactform.constants import ATTACHMENTS_TOTAL_SIZE_LIMIT, RTL_LOCALES
from contactform.formatter import autop
from contactform.mailtags import MailTagContext, replace_mail_tags
from contactform.site import Site
from contactform.utilities import escape_html, format_attributes, path_join, strip_newline

MAIL_COMPONENT_NAMES = (
    'subject',
    'sender',
    'body',
    'recipient',
    'additional_headers',
    'attachments',
)


class SentMail(NamedTuple):
    recipient: str
    subject: str
    body: str
    headers: str
    attachments: tuple[str, ...]


class Mailer(abc.ABC):
    """
    Base class for an outbound mail-sending primitive.
    """
    @abc.abstractmethod
    def send(self, recipient: str, subject: str, body: str, headers: str, attachments: Iterable[str]) -> bool:
        """
        Send a mail, returning whether it was accepted for delivery.
        """
        raise NotImplementedError


class RecordingMailer(Mailer):
    """
    Mailer that records mails instead of sending them.
    """
    _sent_mails: list[SentMail]
    _accepts: bool

    def __init__(self, accepts: bool = True):
        self._sent_mails = []
        self._accepts = accepts

    @property
    def sent_mails(self) -> list[SentMail]:
        return list(self._sent_mails)

    def send(self, recipient: str, subject: str, body: str, headers: str, attachments: Iterable[str]) -> bool:
        self._sent_mails.append(SentMail(recipient, subject, body, headers, tuple(attachments)))
        return self._accepts


def is_rtl_locale(locale: str) -> bool:
    return locale in RTL_LOCALES


class Mail:
    """
    A mail built from a mail template and a submission.
    """
    _name: str
    _template: dict[str, Any]
    _site: Site
    _context: MailTagContext
    _uploaded_files: dict[str, list[UploadedFile]]
    _locale: str
    _use_html: bool
    _exclude_blank: bool

    def __init__(self,
                 name: str,
                 template: Mapping[str, Any],
                 site: Site,
                 context: Optional[MailTagContext] = None,
                 uploaded_files: Optional[Mapping[str, Iterable[UploadedFile]]] = None,
                 locale: str = ''):
        if context is None:
            context = MailTagContext()

        self._name = name.strip()
        self._template = {component_name: '' for component_name in MAIL_COMPONENT_NAMES}
        self._template.update(template)
        self._site = site
        self._context = context
        self._uploaded_files = {
            field: list(files)
            for field, files in (uploaded_files or {}).items()
        }
        self._locale = locale
        self._use_html = bool(template.get('use_html'))
        self._exclude_blank = bool(template.get('exclude_blank'))

    @property
    def name(self) -> str:
        return self._name

    @property
    def template(self) -> dict[str, Any]:
        return dict(self._template)

    @property
    def use_html(self) -> bool:
        return self._use_html

    def get(self, component_name: str, replace_tags: bool = False) -> str:
        use_html = self._use_html and component_name == 'body'
        exclude_blank = self._exclude_blank and component_name == 'body'

        component = self._template.get(component_name) or ''
        if not replace_tags:
            return component

        component = self.replace_tags(component, html=use_html, exclude_blank=exclude_blank)

        if use_html and not re.search(pattern=r'<html[>\s].*</html>', string=component, flags=re.IGNORECASE | re.DOTALL):
            component = self.htmlize(component)

        return component

    def replace_tags(self, content: Any, html: bool = False, exclude_blank: bool = False) -> Any:
        return replace_mail_tags(content, html=html, exclude_blank=exclude_blank, context=self._context)

    def htmlize(self, body: str) -> str:
        """
        Wrap a body in an HTML document, with automatic paragraphs.
        """
        if self._locale:
            language_attributes = ' ' + format_attributes({
                'dir': 'rtl' if is_rtl_locale(self._locale) else 'ltr',
                'lang': self._locale.replace('_', '-'),
            })
        else:
            language_attributes = ''

        subject = escape_html(self.get('subject', replace_tags=True))
        header = (
            '<!doctype html>\n'
            f'<html xmlns="http://www.w3.org/1999/xhtml"{language_attributes}>\n'
            '<head>\n'
            f'<title>{subject}</title>\n'
            '</head>\n'
            '<body>\n'
        )
        footer = '</body>\n</html>'

        return header + autop(body) + footer

    def attachments(self, template: Optional[str] = None) -> list[str]:
        """
        Collect attachment paths.

        Uploaded files are attached when their field's mail-tag `[«name»]` appears in the template;
        every other non-blank line is a path relative to the content directory.
        """
        if template is None:
            template = self.get('attachments')

        attachments = []
        for field, files in self._uploaded_files.items():
            if f'[{field}]' in template:
                attachments.extend(uploaded_file.path for uploaded_file in files)

        for line in template.split('\n'):
            line = line.strip()
            if line == '' or line.startswith('['):
                continue

            attachments.append(path_join(self._site.content_dir, line))

        return attachments

    def filter_attachments(self, attachments: Iterable[str]) -> list[str]:
        """
        Drop attachments outside the content directory, unreadable ones,
        and those which would take the total size over the ceiling.
        """
        filtered_attachments = []
        total_size = 0
        for path in attachments:
            if not is_file_path_in_content_dir(path, self._site.content_dir):
                warnings.warn(f'warning: failed to attach `{path}`: not in the content directory')
                continue

            if not os.path.isfile(path) or not os.access(path, os.R_OK):
                warnings.warn(f'warning: failed to attach `{path}`: not a readable file')
                continue

            file_size = os.path.getsize(path)
            if total_size + file_size > ATTACHMENTS_TOTAL_SIZE_LIMIT:
                warnings.warn(f'warning: failed to attach `{path}`: total file size exceeds the limit of 25 MB')
                continue

            total_size += file_size
            filtered_attachments.append(path)

        return filtered_attachments

    def compose(self) -> SentMail:
        subject = strip_newline(self.get('subject', replace_tags=True))
        sender = strip_newline(self.get('sender', replace_tags=True))
        recipient = strip_newline(self.get('recipient', replace_tags=True))
        body = self.get('body', replace_tags=True)
        additional_headers = self.get('additional_headers', replace_tags=True).strip()

        headers = f'From: {sender}\n'
        if self._use_html:
            headers += 'Content-Type: text/html\n'
            headers += 'X-WPCF7-Content-Type: text/html\n'
        else:
            headers += 'X-WPCF7-Content-Type: text/plain\n'

        if additional_headers:
            headers += f'{additional_headers}\n'

        attachments = self.filter_attachments(self.attachments())

        return SentMail(recipient, subject, body, headers, tuple(attachments))

    def send(self, mailer: Mailer) -> bool:
        sent_mail = self.compose()
        return mailer.send(
            sent_mail.recipient,
            sent_mail.subject,
            sent_mail.body,
            sent_mail.headers,
            sent_mail.attachments,
        )
