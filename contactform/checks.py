"""
# Contact-Form: checks.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Predicates for names, email addresses, URLs, telephone numbers, numbers, dates and paths.
"""

import datetime
import ipaddress
import os
import re
from typing import Union
from urllib.parse import urlsplit

from contactform.constants import ALLOWED_URL_SCHEMES


def is_name(text: str) -> bool:
    return re.fullmatch(pattern=r'[A-Za-z][-A-Za-z0-9_:.]*', string=text) is not None


def is_email(text: str) -> bool:
    """
    Check whether text is a plausible email address.

    The local part may contain letters, digits and `!#$%&'*+/=?^_`{|}~.-`;
    the domain must have at least two dot-separated labels
    of letters, digits and hyphens, with no leading or trailing hyphens.
    """
    if len(text) < 6 or text.find('@', 1) == -1:
        return False

    local_part, domain = text.split('@', 1)

    if not re.fullmatch(pattern=r"[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]+", string=local_part):
        return False

    if '..' in domain or domain.strip(' \t\n\r\0\x0b.') != domain:
        return False

    labels = domain.split('.')
    if len(labels) < 2:
        return False

    for label in labels:
        if label.strip(' \t\n\r\0\x0b-') != label:
            return False
        if not re.fullmatch(pattern=r'[a-zA-Z0-9-]+', string=label):
            return False

    return True


def is_url(text: str) -> bool:
    try:
        scheme = urlsplit(text).scheme
    except ValueError:
        return False

    return scheme.lower() in ALLOWED_URL_SCHEMES


def is_tel(text: str) -> bool:
    text = re.sub(pattern=r'[()/.*#\s-]+', repl='', string=text)
    return re.fullmatch(pattern=r'[+]?[0-9]+', string=text, flags=re.ASCII) is not None


def is_number(text) -> bool:
    if isinstance(text, bool):
        return False

    if isinstance(text, (int, float)):
        return True

    if not isinstance(text, str):
        return False

    return re.fullmatch(
        pattern=r'''
            [-]?
            (?: [0-9]+ | [0-9]* [.] [0-9]+ )
            (?: [eE] [+-]? [0-9]+ )?
        ''',
        string=text,
        flags=re.ASCII | re.VERBOSE,
    ) is not None


def is_date(text: str) -> bool:
    if not isinstance(text, str):
        return False

    match = re.fullmatch(
        pattern=r'(?P<year> [0-9]{4,} ) - (?P<month> [0-9]{2} ) - (?P<day> [0-9]{2} )',
        string=text,
        flags=re.ASCII | re.VERBOSE,
    )
    if match is None:
        return False

    try:
        datetime.date(int(match.group('year')), int(match.group('month')), int(match.group('day')))
    except ValueError:
        return False

    return True


def parse_mailbox_list(mailbox_list: Union[str, list[str]]) -> list[str]:
    """
    Parse a comma-separated mailbox list into its address specs.

    Quoted display names are neutralised before splitting,
    so that commas inside them do not split a mailbox.
    Returns an empty list if any mailbox is invalid (or if there are none).
    """
    if isinstance(mailbox_list, str):
        mailbox_text = re.sub(pattern=r'''\\ ["']''', repl='esc-quote', string=mailbox_list, flags=re.VERBOSE)
        mailbox_text = re.sub(pattern=r'".*?"|\'.*?\'', repl='quoted-string', string=mailbox_text)
        mailboxes = mailbox_text.split(',')
    else:
        mailboxes = mailbox_list

    addresses = []
    for mailbox in mailboxes:
        if not isinstance(mailbox, str):
            return []

        mailbox = mailbox.strip()
        if mailbox == '':
            continue

        match = re.search(pattern=r'<(?P<addr_spec> .+ )>$', string=mailbox, flags=re.VERBOSE)
        if match is not None:
            addr_spec = match.group('addr_spec')
        else:
            addr_spec = mailbox

        if not is_email(addr_spec):
            return []

        addresses.append(addr_spec)

    return addresses


def is_mailbox_list(mailbox_list: Union[str, list[str]]) -> bool:
    return len(parse_mailbox_list(mailbox_list)) > 0


def is_email_in_domain(email: str, domain: str) -> bool:
    """
    Check whether every address of a mailbox list belongs to a domain or a parent of it.
    """
    domain = domain.lower()
    for address in parse_mailbox_list(email):
        email_domain = address[address.rfind('@') + 1:].lower()
        domain_parts = domain.split('.')
        while len(domain_parts) > 0:
            if '.'.join(domain_parts) == email_domain:
                break
            domain_parts.pop(0)
        else:
            return False

    return True


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host.strip('[]'))
    except ValueError:
        return False

    return True


def is_email_in_site_domain(email: str, home_url: str) -> bool:
    host = urlsplit(home_url).hostname or ''

    if host in ('', 'localhost') or is_ip_address(host):
        return True

    return is_email_in_domain(email, host)


def is_file_path_in_content_dir(path: str, content_dir: str) -> bool:
    """
    Check whether an existing file path resolves to somewhere inside the content directory.
    """
    if not os.path.exists(path):
        return False

    real_path = os.path.realpath(path)
    real_content_dir = os.path.join(os.path.realpath(content_dir), '')

    return real_path.startswith(real_content_dir)
