"""
# Contact-Form: cli.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Command-line interface.
"""

import argparse
import json
import os
import re
import sys
from typing import Any, Optional

from contactform._version import __version__
from contactform.config_validator import ConfigValidator
from contactform.constants import COMMAND_LINE_ERROR_EXIT_CODE, CONFIGURATION_ERROR_EXIT_CODE, GENERIC_ERROR_EXIT_CODE
from contactform.contact_form import ContactForm
from contactform.core import create_default_registry
from contactform.mail import RecordingMailer
from contactform.site import Site
from contactform.submission import Submission

DESCRIPTION = '''
    Check, inspect, render, or dry-run submit contact form documents.
'''
MODE_HELP = '''
    `check` reports configuration errors,
    `schema` prints the validation schema,
    `tags` prints the form-tags,
    `render` prints the form HTML,
    `submit` processes posted data without sending mail
'''
FORM_FILE_NAME_HELP = '''
    name of JSON file holding the contact form document
    (can be abbreviated as `file` or `file.` for increased productivity)
'''
POSTED_DATA_FILE_NAME_HELP = '''
    name of JSON file holding the posted data (for `submit`)
'''
HOME_URL_HELP = '''
    home URL of the site (default `http://localhost`)
'''
ADMIN_EMAIL_HELP = '''
    email address of the site administrator
'''
CONTENT_DIR_HELP = '''
    directory that mail attachments must reside in (default `.`)
'''
UPLOAD_MAX_FILESIZE_HELP = '''
    upload ceiling of the host, e.g. `2M` (default `2M`)
'''
MODES = ('check', 'schema', 'tags', 'render', 'submit')


def extract_form_file_name(form_file_name_argument: str) -> str:
    """
    Extract the JSON file name from a form file name argument.

    Here, form file name argument may be of the form `«name».json`, `«name».`, or `«name»`.
    """
    form_file_name_argument = os.path.normpath(form_file_name_argument)
    form_name = re.sub(pattern=r'[.](json)? \Z', repl='', string=form_file_name_argument, flags=re.VERBOSE)

    return f'{form_name}.json'


def parse_command_line_arguments(arguments: Optional[list[str]] = None) -> argparse.Namespace:
    argument_parser = argparse.ArgumentParser(description=DESCRIPTION)
    argument_parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'{argument_parser.prog} version {__version__}',
    )
    argument_parser.add_argument(
        '-p', '--posted-data',
        dest='posted_data_file_name',
        default=None,
        help=POSTED_DATA_FILE_NAME_HELP,
        metavar='posted.json',
    )
    argument_parser.add_argument(
        '--home-url',
        dest='home_url',
        default='http://localhost',
        help=HOME_URL_HELP,
    )
    argument_parser.add_argument(
        '--admin-email',
        dest='admin_email',
        default='',
        help=ADMIN_EMAIL_HELP,
    )
    argument_parser.add_argument(
        '--content-dir',
        dest='content_dir',
        default='.',
        help=CONTENT_DIR_HELP,
    )
    argument_parser.add_argument(
        '--upload-max-filesize',
        dest='upload_max_filesize',
        default='2M',
        help=UPLOAD_MAX_FILESIZE_HELP,
    )
    argument_parser.add_argument(
        'mode',
        choices=MODES,
        help=MODE_HELP,
    )
    argument_parser.add_argument(
        'form_file_name_argument',
        help=FORM_FILE_NAME_HELP,
        metavar='form.json',
    )

    return argument_parser.parse_args(arguments)


def read_json_file(file_name_argument: str, file_name: str) -> Any:
    try:
        with open(file_name, 'r', encoding='utf-8') as json_file:
            return json.load(json_file)
    except FileNotFoundError:
        print(f'error: argument `{file_name_argument}`: file `{file_name}` not found', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)
    except json.JSONDecodeError as json_decode_error:
        print(f'error: file `{file_name}` is not valid JSON: {json_decode_error}', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)


def print_json(data: Any):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def check(contact_form: ContactForm, form_file_name: str):
    config_validator = ConfigValidator(contact_form)
    config_validator.validate()

    if config_validator.is_valid():
        print(f'success: no configuration errors in `{form_file_name}`')
        return

    print_json(config_validator.collect_error_messages())
    print(
        f'error: {config_validator.count_errors()} configuration error(s) in `{form_file_name}`',
        file=sys.stderr,
    )
    sys.exit(CONFIGURATION_ERROR_EXIT_CODE)


def submit(contact_form: ContactForm, posted_data_file_name_argument: Optional[str]):
    if posted_data_file_name_argument is None:
        print('error: mode `submit` requires option -p (or --posted-data)', file=sys.stderr)
        sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

    posted_data = read_json_file(posted_data_file_name_argument, posted_data_file_name_argument)
    if not isinstance(posted_data, dict):
        print(f'error: file `{posted_data_file_name_argument}` must hold a JSON object', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)

    mailer = RecordingMailer()
    submission = Submission(contact_form, posted_data)
    result = submission.submit(mailer)

    print_json({
        'result': result,
        'mails': [sent_mail._asdict() for sent_mail in mailer.sent_mails],
    })


def main(arguments: Optional[list[str]] = None):
    parsed_arguments = parse_command_line_arguments(arguments)
    form_file_name_argument = parsed_arguments.form_file_name_argument
    form_file_name = extract_form_file_name(form_file_name_argument)
    mode = parsed_arguments.mode

    data = read_json_file(form_file_name_argument, form_file_name)
    if not isinstance(data, dict):
        print(f'error: file `{form_file_name}` must hold a JSON object', file=sys.stderr)
        sys.exit(GENERIC_ERROR_EXIT_CODE)

    site = Site(
        home_url=parsed_arguments.home_url,
        admin_email=parsed_arguments.admin_email,
        content_dir=parsed_arguments.content_dir,
        upload_max_filesize=parsed_arguments.upload_max_filesize,
    )
    contact_form = ContactForm.from_dict(data, create_default_registry(), site)

    if mode == 'check':
        check(contact_form, form_file_name)
    elif mode == 'schema':
        print_json(contact_form.get_schema().to_dict())
    elif mode == 'tags':
        print_json(contact_form.form_tags_payload())
    elif mode == 'render':
        print(contact_form.form_html())
    else:
        submit(contact_form, parsed_arguments.posted_data_file_name)


if __name__ == '__main__':
    main()
