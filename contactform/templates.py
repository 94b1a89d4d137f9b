"""
# Contact-Form: templates.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Default templates for a new contact form.
"""

from typing import Optional
from urllib.parse import urlsplit

from contactform.messages import default_messages
from contactform.site import Site

DEFAULT_FORM_TEMPLATE = '''\
<label> Your name
    [text* your-name autocomplete:name] </label>

<label> Your email
    [email* your-email autocomplete:email] </label>

<label> Subject
    [text* your-subject] </label>

<label> Your message (optional)
    [textarea your-message] </label>

[submit "Submit"]'''

MAIL_FOOTER = '''\
--
This e-mail was sent from a contact form on [_site_title] ([_site_url])'''


def from_email(site: Site) -> str:
    """
    Get a sender address belonging to the site domain.

    The admin email is used if it belongs to the site domain (or the site is local),
    else `wordpress@«site_domain»`.
    """
    host = (urlsplit(site.home_url).hostname or '').lower()

    if host in ('', 'localhost', '127.0.0.1'):
        return site.admin_email

    if host.startswith('www.'):
        host = host[len('www.'):]

    if site.admin_email.lower().endswith(f'@{host}'):
        return site.admin_email

    return f'wordpress@{host}'


def default_mail(site: Site) -> dict:
    return {
        'subject': '[_site_title] "[your-subject]"',
        'sender': f'[_site_title] <{from_email(site)}>',
        'body': (
            'From: [your-name] <[your-email]>\n'
            'Subject: [your-subject]\n'
            '\n'
            'Message Body:\n'
            '[your-message]\n'
            '\n'
            f'{MAIL_FOOTER}'
        ),
        'recipient': '[_site_admin_email]',
        'additional_headers': 'Reply-To: [your-email]',
        'attachments': '',
        'use_html': False,
        'exclude_blank': False,
    }


def default_mail_2(site: Site) -> dict:
    return {
        'active': False,
        'subject': '[_site_title] "[your-subject]"',
        'sender': f'[_site_title] <{from_email(site)}>',
        'body': (
            'Message Body:\n'
            '[your-message]\n'
            '\n'
            f'{MAIL_FOOTER}'
        ),
        'recipient': '[your-email]',
        'additional_headers': 'Reply-To: [_site_admin_email]',
        'attachments': '',
        'use_html': False,
        'exclude_blank': False,
    }


def get_default_template(property_name: str, site: Site) -> Optional[object]:
    if property_name == 'form':
        return DEFAULT_FORM_TEMPLATE
    if property_name == 'mail':
        return default_mail(site)
    if property_name == 'mail_2':
        return default_mail_2(site)
    if property_name == 'messages':
        return default_messages()

    return None
