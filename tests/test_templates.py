"""
# Contact-Form: test_templates.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `templates.py`.
"""

import unittest

from contactform.messages import get_default_message
from contactform.site import Site
from contactform.templates import DEFAULT_FORM_TEMPLATE, default_mail, default_mail_2, from_email, get_default_template


class TestTemplates(unittest.TestCase):
    def test_from_email(self):
        self.assertEqual(from_email(Site(home_url='http://localhost', admin_email='me@mail.test')), 'me@mail.test')
        self.assertEqual(from_email(Site(home_url='http://127.0.0.1:8000', admin_email='me@mail.test')), 'me@mail.test')
        self.assertEqual(
            from_email(Site(home_url='https://www.example.com/', admin_email='admin@example.com')),
            'admin@example.com',
        )
        self.assertEqual(
            from_email(Site(home_url='https://www.example.com/', admin_email='someone@gmail.com')),
            'wordpress@example.com',
        )

    def test_default_mail(self):
        site = Site(home_url='https://example.com', admin_email='admin@example.com')
        mail = default_mail(site)

        self.assertEqual(mail['sender'], '[_site_title] <admin@example.com>')
        self.assertEqual(mail['recipient'], '[_site_admin_email]')
        self.assertIn('[your-message]', mail['body'])
        self.assertFalse(mail['use_html'])
        self.assertNotIn('active', mail)

        mail_2 = default_mail_2(site)
        self.assertFalse(mail_2['active'])
        self.assertEqual(mail_2['recipient'], '[your-email]')

    def test_get_default_template(self):
        site = Site()

        self.assertEqual(get_default_template('form', site), DEFAULT_FORM_TEMPLATE)
        self.assertEqual(get_default_template('mail', site), default_mail(site))
        self.assertEqual(get_default_template('mail_2', site), default_mail_2(site))
        self.assertEqual(get_default_template('messages', site)['mail_sent_ok'], get_default_message('mail_sent_ok'))
        self.assertIsNone(get_default_template('additional_settings', site))


if __name__ == '__main__':
    unittest.main()
