"""
# Contact-Form: submission.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Submission processing.

A submission is processed in one synchronous pass:
1. Posted data is prepared (pipes resolved, upload fields given their file names).
2. Files and then text are validated against the SWV schema of the contact form.
3. Acceptance tags are checked.
4. Mails are sent (`mail`, and `mail_2` if active).
5. A result payload is built.
"""

import hashlib
import hmac
import json
import os
from typing import Any, Iterable, Mapping, Optional

from contactform.bases import SubmittedInput, UploadedFile, ValidationContext
from contactform.contact_form import ContactForm
from contactform.mail import Mail, Mailer
from contactform.mailtags import MailTagContext, SpecialMailTags
from contactform.utilities import flatten
from contactform.validation import ValidationState

STATUS_INIT = 'init'
STATUS_VALIDATION_FAILED = 'validation_failed'
STATUS_ACCEPTANCE_MISSING = 'acceptance_missing'
STATUS_MAIL_SENT = 'mail_sent'
STATUS_MAIL_FAILED = 'mail_failed'

MESSAGE_KEY_FROM_STATUS = {
    STATUS_VALIDATION_FAILED: 'validation_error',
    STATUS_ACCEPTANCE_MISSING: 'accept_terms',
    STATUS_MAIL_SENT: 'mail_sent_ok',
    STATUS_MAIL_FAILED: 'mail_sent_ng',
}


def sanitise_posted_data(posted_data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Drop internal fields (names beginning with an underscore) and normalise values to strings.
    """
    sanitised_data = {}
    for name, value in posted_data.items():
        if name.startswith('_'):
            continue

        if isinstance(value, (list, tuple)):
            sanitised_data[name] = [str(item).strip() for item in flatten(value)]
        elif value is None:
            sanitised_data[name] = ''
        else:
            sanitised_data[name] = str(value).strip()

    return sanitised_data


class Submission:
    """
    A submission of a contact form.

    `meta` describes the request (see `SpecialMailTags`).
    """
    _contact_form: ContactForm
    _raw_posted_data: dict[str, Any]
    _posted_data: dict[str, Any]
    _uploaded_files: dict[str, list[UploadedFile]]
    _meta: dict[str, Any]
    _unit_tag: str
    _status: str
    _response: str
    _validation: ValidationState

    def __init__(self,
                 contact_form: ContactForm,
                 posted_data: Mapping[str, Any],
                 uploaded_files: Optional[Mapping[str, Iterable[UploadedFile]]] = None,
                 meta: Optional[Mapping[str, Any]] = None,
                 unit_tag: str = ''):
        self._contact_form = contact_form
        self._raw_posted_data = sanitise_posted_data(posted_data)
        self._uploaded_files = {
            name: list(files)
            for name, files in (uploaded_files or {}).items()
        }
        self._meta = dict(meta or {})
        self._meta.setdefault('contact_form_title', contact_form.title)
        self._unit_tag = unit_tag or contact_form.unit_tag()
        self._status = STATUS_INIT
        self._response = ''
        self._validation = ValidationState(contact_form.form_tags())
        self._posted_data = self.prepare_posted_data()

    @property
    def contact_form(self) -> ContactForm:
        return self._contact_form

    @property
    def raw_posted_data(self) -> dict[str, Any]:
        return dict(self._raw_posted_data)

    @property
    def posted_data(self) -> dict[str, Any]:
        return dict(self._posted_data)

    @property
    def uploaded_files(self) -> dict[str, list[UploadedFile]]:
        return {name: list(files) for name, files in self._uploaded_files.items()}

    @property
    def status(self) -> str:
        return self._status

    @property
    def response(self) -> str:
        return self._response

    @property
    def validation(self) -> ValidationState:
        return self._validation

    def get_posted_data(self, name: str) -> Any:
        return self._posted_data.get(name)

    def prepare_posted_data(self) -> dict[str, Any]:
        """
        Resolve pipes for selectable values, and give upload fields their file names.
        """
        posted_data = dict(self._raw_posted_data)

        for tag in self._contact_form.scan_form_tags(feature='name-attr'):
            if tag.name == '':
                continue

            if self._contact_form.registry.supports(tag.type_, 'file-uploading'):
                posted_data[tag.name] = [
                    os.path.basename(uploaded_file.name)
                    for uploaded_file in self._uploaded_files.get(tag.name, [])
                ]
                continue

            if tag.name not in posted_data:
                continue

            value = posted_data[tag.name]
            if tag.pipes is not None and not tag.pipes.zero():
                if isinstance(value, list):
                    value = [tag.pipes.resolve(item) for item in value]
                else:
                    value = tag.pipes.resolve(value)

            posted_data[tag.name] = value

        return posted_data

    def posted_data_hash(self) -> str:
        serialised_data = json.dumps(self._posted_data, sort_keys=True, ensure_ascii=False)
        return hmac.new(
            key=self._contact_form.site.secret_key.encode(),
            msg=serialised_data.encode(),
            digestmod=hashlib.md5,
        ).hexdigest()

    def mail_tag_context(self) -> MailTagContext:
        meta = dict(self._meta)
        meta['invalid_fields'] = len(self._validation.invalid_fields)

        return MailTagContext(
            posted_data=self._posted_data,
            raw_posted_data=self._raw_posted_data,
            special_mail_tags=SpecialMailTags(self._contact_form.site, meta),
            list_item_separator=self._contact_form.site.list_item_separator,
        )

    def validate(self) -> bool:
        submitted_input = SubmittedInput(self._raw_posted_data, self._uploaded_files)

        file_context = ValidationContext(submitted_input, text=False, file=True)
        self._contact_form.validate_schema(file_context, self._validation)

        text_context = ValidationContext(submitted_input, text=True, file=False)
        self._contact_form.validate_schema(text_context, self._validation)

        return self._validation.is_valid()

    def accepted(self) -> bool:
        for tag in self._contact_form.scan_form_tags(basetype='acceptance'):
            if tag.has_option('optional'):
                continue

            if self._raw_posted_data.get(tag.name, '') in ('', '0'):
                return False

        return True

    def build_mail(self, template_name: str) -> Optional[Mail]:
        template = self._contact_form.prop(template_name) or {}
        if len(template) == 0:
            return None

        if template_name != 'mail' and not template.get('active'):
            return None

        return Mail(
            template_name,
            template,
            self._contact_form.site,
            context=self.mail_tag_context(),
            uploaded_files=self._uploaded_files,
            locale=self._contact_form.locale,
        )

    def mail(self, mailer: Mailer) -> bool:
        if self._contact_form.is_true('skip_mail') or self._contact_form.is_true('demo_mode'):
            return True

        for template_name in ('mail', 'mail_2'):
            mail = self.build_mail(template_name)
            if mail is None:
                continue

            if not mail.send(mailer):
                return False

        return True

    def set_status(self, status: str):
        self._status = status
        self._response = self._contact_form.message(MESSAGE_KEY_FROM_STATUS.get(status, ''))

    def submit(self, mailer: Mailer) -> dict:
        if not self.validate():
            self.set_status(STATUS_VALIDATION_FAILED)
        elif not self.accepted():
            self.set_status(STATUS_ACCEPTANCE_MISSING)
        elif self.mail(mailer):
            self.set_status(STATUS_MAIL_SENT)
        else:
            self.set_status(STATUS_MAIL_FAILED)

        return self.result_payload()

    def result_payload(self) -> dict:
        return {
            'contact_form_id': self._contact_form.id_,
            'status': self._status,
            'message': self._response,
            'posted_data_hash': self.posted_data_hash() if self._status == STATUS_MAIL_SENT else '',
            'into': f'#{self._unit_tag}',
            'invalid_fields': [
                {
                    'field': name,
                    'message': invalid_field.reason,
                    'idref': invalid_field.idref,
                    'error_id': f'{self._unit_tag}-ve-{name}',
                }
                for name, invalid_field in self._validation.invalid_fields.items()
            ],
        }
