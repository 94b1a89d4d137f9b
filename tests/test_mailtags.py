"""
# Contact-Form: test_mailtags.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `mailtags.py`.
"""

import datetime
import re
import unittest

from contactform.mailtags import (
    MailTag,
    MailTagContext,
    MailTaggedText,
    SpecialMailTags,
    canonicalise_special_tag_name,
    format_date_values,
    replace_mail_tags,
)
from contactform.site import Site, User


SITE = Site(
    title='My Site',
    description='Just another site',
    home_url='https://example.com',
    admin_email='admin@example.com',
    user=User(login='jdoe', email='jdoe@example.com', display_name='J & D'),
)
CONTEXT = MailTagContext(
    posted_data={
        'your-name': 'Jane',
        'your_dotted': 'dotted',
        'menu': '1',
        'colours': ['Red', 'Blue'],
        'phone': '',
        'when': '2024-03-01',
        'note': 'A & B...',
    },
    raw_posted_data={'menu': 'Yes'},
    special_mail_tags=SpecialMailTags(SITE, {'remote_ip': '192.0.2.1', 'contact_form_title': 'Contact'}),
)


def replace(content: str, html: bool = False, context: MailTagContext = CONTEXT) -> str:
    return MailTaggedText(content, html=html, context=context).replace_tags()


class TestMailTags(unittest.TestCase):
    def test_mail_tag(self):
        mail_tag = MailTag('[your.name]', 'your.name')
        self.assertEqual(mail_tag.field_name, 'your_name')
        self.assertFalse(mail_tag.do_not_heat)
        self.assertEqual(mail_tag.format, '')

        raw_mail_tag = MailTag('[_raw_menu]', '_raw_menu')
        self.assertEqual(raw_mail_tag.field_name, 'menu')
        self.assertTrue(raw_mail_tag.do_not_heat)

        format_mail_tag = MailTag('[_format_when "j F Y"]', '_format_when', ' "j F Y"')
        self.assertEqual(format_mail_tag.field_name, 'when')
        self.assertEqual(format_mail_tag.values, ('j F Y',))
        self.assertEqual(format_mail_tag.format, 'j F Y')

        self.assertEqual(MailTag('[_raw_]', '_raw_').field_name, '_raw_')

    def test_canonicalise_special_tag_name(self):
        self.assertEqual(canonicalise_special_tag_name('wpcf7.site_title'), '_site_title')
        self.assertEqual(canonicalise_special_tag_name('_site_title'), '_site_title')
        self.assertEqual(canonicalise_special_tag_name('your-name'), 'your-name')

    def test_special_mail_tags(self):
        special_mail_tags = SpecialMailTags(
            SITE,
            {
                'remote_ip': '192.0.2.1',
                'user_agent': 'Agent/1.0',
                'url': 'https://example.com/contact/',
                'contact_form_title': 'Contact',
                'invalid_fields': 2,
                'timestamp': datetime.datetime(2024, 3, 1, 13, 5),
            },
        )

        def resolve(tag_name: str, html: bool = False):
            return special_mail_tags.resolve(MailTag(f'[{tag_name}]', tag_name), html)

        self.assertEqual(resolve('_site_title'), 'My Site')
        self.assertEqual(resolve('_site_description'), 'Just another site')
        self.assertEqual(resolve('_site_url'), 'https://example.com')
        self.assertEqual(resolve('_site_admin_email'), 'admin@example.com')
        self.assertEqual(resolve('wpcf7.site_title'), 'My Site')
        self.assertEqual(resolve('_user_login'), 'jdoe')
        self.assertEqual(resolve('_user_display_name'), 'J & D')
        self.assertEqual(resolve('_user_display_name', html=True), 'J &amp; D')
        self.assertEqual(resolve('_user_first_name'), '')
        self.assertEqual(resolve('_remote_ip'), '192.0.2.1')
        self.assertEqual(resolve('_user_agent'), 'Agent/1.0')
        self.assertEqual(resolve('_url'), 'https://example.com/contact/')
        self.assertEqual(resolve('_contact_form_title'), 'Contact')
        self.assertEqual(resolve('_invalid_fields'), '2')
        self.assertEqual(resolve('_date'), 'March 1, 2024')
        self.assertEqual(resolve('_time'), '1:05 pm')
        self.assertIsNone(resolve('_user_password'))
        self.assertIsNone(resolve('_unknown'))
        self.assertIsNone(resolve('your-name'))

        anonymous_mail_tags = SpecialMailTags(Site())
        self.assertEqual(anonymous_mail_tags.resolve(MailTag('[_user_login]', '_user_login')), '')
        self.assertEqual(anonymous_mail_tags.resolve(MailTag('[_remote_ip]', '_remote_ip')), '')

    def test_format_date_values(self):
        self.assertEqual(format_date_values('2024-03-01', 'j F Y'), ['1 March 2024'])
        self.assertEqual(format_date_values(['2024-03-01', 'soon'], 'Y'), ['2024', 'soon'])

    def test_replace_tags(self):
        self.assertEqual(replace('Hi [your-name]!'), 'Hi Jane!')
        self.assertEqual(replace('[your.dotted]'), 'dotted')
        self.assertEqual(replace('[ your-name ]'), 'Jane')
        self.assertEqual(replace('[colours]'), 'Red, Blue')
        self.assertEqual(replace('[phone]'), '')
        self.assertEqual(replace('[_format_when "j F Y"]'), '1 March 2024')
        self.assertEqual(replace('[unknown] stays'), '[unknown] stays')
        self.assertEqual(replace('[[your-name]] is escaped'), '[your-name] is escaped')

    def test_raw_values_bypass_pipes(self):
        self.assertEqual(replace('[menu] [_raw_menu]'), '1 Yes')
        self.assertEqual(replace('[_raw_missing]'), '')

    def test_special_tags_in_text(self):
        self.assertEqual(replace('[_site_title] <[_site_admin_email]>'), 'My Site <admin@example.com>')
        self.assertEqual(replace('From [_remote_ip] via [_contact_form_title]'), 'From 192.0.2.1 via Contact')

    def test_submitted_value_shadows_special_tag(self):
        context = CONTEXT._replace(posted_data={'_site_title': 'Posted'})
        self.assertEqual(replace('[_site_title]', context=context), 'Posted')

    def test_html(self):
        self.assertEqual(replace('[note]'), 'A & B...')
        self.assertEqual(replace('[note]', html=True), 'A &amp; B&#8230;')

    def test_list_item_separator(self):
        context = CONTEXT._replace(list_item_separator=' / ')
        self.assertEqual(replace('[colours]', context=context), 'Red / Blue')

    def test_resolvers(self):
        def resolve_custom(mail_tag: MailTag, html: bool):
            if mail_tag.tag_name == 'custom':
                return '<custom>' if not html else '&lt;custom&gt;'
            return None

        context = CONTEXT._replace(resolvers=(resolve_custom,))
        self.assertEqual(replace('[custom] [other]', context=context), '<custom> [other]')
        self.assertEqual(replace('[custom]', html=True, context=context), '&lt;custom&gt;')

    def test_callback(self):
        def shout(match: re.Match) -> str:
            return match.group('tag_name').upper()

        mail_tagged_text = MailTaggedText('[a] and [b]', callback=shout)
        self.assertEqual(mail_tagged_text.replace_tags(), 'A and B')

    def test_replaced_tags(self):
        mail_tagged_text = MailTaggedText('[your-name] [phone] [unknown]', context=CONTEXT)
        mail_tagged_text.replace_tags()

        self.assertEqual(mail_tagged_text.replaced_tags, {'[your-name]': 'Jane', '[phone]': ''})

    def test_replace_mail_tags(self):
        content = 'Name: [your-name]\nPhone: [phone]\nNote: [unknown]\nThanks'

        self.assertEqual(
            replace_mail_tags(content, context=CONTEXT),
            'Name: Jane\nPhone: \nNote: [unknown]\nThanks',
        )
        self.assertEqual(
            replace_mail_tags(content, exclude_blank=True, context=CONTEXT),
            'Name: Jane\nNote: [unknown]\nThanks',
        )

    def test_replace_mail_tags_structures(self):
        self.assertEqual(
            replace_mail_tags({'subject': '[your-name]', 'lines': ['[menu]', 3], 'active': True}, context=CONTEXT),
            {'subject': 'Jane', 'lines': ['1', 3], 'active': True},
        )
        self.assertIsNone(replace_mail_tags(None, context=CONTEXT))


if __name__ == '__main__':
    unittest.main()
