"""
# Contact-Form: messages.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

User-facing messages.
"""

from typing import NamedTuple


class MessageDefinition(NamedTuple):
    description: str
    default: str


MESSAGE_DEFINITION_FROM_KEY = {
    'mail_sent_ok': MessageDefinition(
        "Sender's message was sent successfully",
        'Thank you for your message. It has been sent.',
    ),
    'mail_sent_ng': MessageDefinition(
        "Sender's message failed to send",
        'There was an error trying to send your message. Please try again later.',
    ),
    'validation_error': MessageDefinition(
        'Validation errors occurred',
        'One or more fields have an error. Please check and try again.',
    ),
    'spam': MessageDefinition(
        'Submission was referred to as spam',
        'There was an error trying to send your message. Please try again later.',
    ),
    'accept_terms': MessageDefinition(
        'There are terms that the sender must accept',
        'You must accept the terms and conditions before sending your message.',
    ),
    'invalid_required': MessageDefinition(
        'There is a field that the sender must fill in',
        'Please fill out this field.',
    ),
    'invalid_too_long': MessageDefinition(
        'There is a field with input that is longer than the maximum allowed length',
        'This field has a too long input.',
    ),
    'invalid_too_short': MessageDefinition(
        'There is a field with input that is shorter than the minimum allowed length',
        'This field has a too short input.',
    ),
    'upload_failed': MessageDefinition(
        'Uploading a file fails for any reason',
        'There was an unknown error uploading the file.',
    ),
    'upload_file_type_invalid': MessageDefinition(
        'Uploaded file is not allowed for file type',
        'You are not allowed to upload files of this type.',
    ),
    'upload_file_too_large': MessageDefinition(
        'Uploaded file is too large',
        'The uploaded file is too large.',
    ),
    'invalid_date': MessageDefinition(
        'Date format that the sender entered is invalid',
        'Please enter a date in YYYY-MM-DD format.',
    ),
    'date_too_early': MessageDefinition(
        'Date is earlier than minimum limit',
        'This field has a too early date.',
    ),
    'date_too_late': MessageDefinition(
        'Date is later than maximum limit',
        'This field has a too late date.',
    ),
    'invalid_number': MessageDefinition(
        'Number format that the sender entered is invalid',
        'Please enter a number.',
    ),
    'number_too_small': MessageDefinition(
        'Number is smaller than minimum limit',
        'This field has a too small number.',
    ),
    'number_too_large': MessageDefinition(
        'Number is larger than maximum limit',
        'This field has a too large number.',
    ),
    'invalid_email': MessageDefinition(
        'Email address that the sender entered is invalid',
        'Please enter an email address.',
    ),
    'invalid_url': MessageDefinition(
        'URL that the sender entered is invalid',
        'Please enter a URL.',
    ),
    'invalid_tel': MessageDefinition(
        'Telephone number that the sender entered is invalid',
        'Please enter a telephone number.',
    ),
    'invalid_option': MessageDefinition(
        'Sender selected an option that is not available',
        'This field has an invalid option.',
    ),
    'captcha_not_match': MessageDefinition(
        'The code that sender entered does not match the CAPTCHA',
        'Your entered code is incorrect.',
    ),
}


def default_messages() -> dict[str, str]:
    return {
        key: message_definition.default
        for key, message_definition in MESSAGE_DEFINITION_FROM_KEY.items()
    }


def get_default_message(key: str) -> str:
    try:
        return MESSAGE_DEFINITION_FROM_KEY[key].default
    except KeyError:
        return ''
