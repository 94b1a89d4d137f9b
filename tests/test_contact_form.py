"""
# Contact-Form: test_contact_form.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `contact_form.py`.
"""

import unittest

from contactform.contact_form import ContactForm
from contactform.core import create_default_registry
from contactform.exceptions import MissingPropertyException
from contactform.site import Site
from contactform.templates import DEFAULT_FORM_TEMPLATE


SITE = Site(title='My Site', home_url='https://example.com', admin_email='admin@example.com')
FORM = '[text* your-name] [email your-email] [select menu "Sales|sales@example.com" "Support|support@example.com"]'


class TestContactForm(unittest.TestCase):
    def setUp(self):
        self.registry = create_default_registry()

    def test_prop(self):
        contact_form = ContactForm(self.registry, SITE, properties={'form': FORM})

        self.assertEqual(contact_form.prop('form'), FORM)
        self.assertEqual(contact_form.prop('mail_2'), {})
        self.assertEqual(contact_form.prop('additional_settings'), '')

        with self.assertRaises(MissingPropertyException) as context_manager:
            contact_form.prop('nonexistent')
        self.assertEqual(context_manager.exception.missing_property, 'nonexistent')

    def test_initial(self):
        self.assertTrue(ContactForm(self.registry).initial())
        self.assertFalse(ContactForm(self.registry, id_=3).initial())

    def test_message(self):
        contact_form = ContactForm(self.registry, properties={'messages': {'mail_sent_ok': 'Thanks!'}})

        self.assertEqual(contact_form.message('mail_sent_ok'), 'Thanks!')
        self.assertEqual(contact_form.message('invalid_required'), 'Please fill out this field.')
        self.assertEqual(contact_form.message('no_such_message'), '')

    def test_additional_setting(self):
        additional_settings = 'demo_mode: on\nskip_mail:off\n  flamingo_email : [your-email]\nskip_mail: true\nnot a setting'
        contact_form = ContactForm(self.registry, properties={'additional_settings': additional_settings})

        self.assertEqual(contact_form.additional_setting('demo_mode'), ['on'])
        self.assertEqual(contact_form.additional_setting('flamingo_email'), ['[your-email]'])
        self.assertEqual(contact_form.additional_setting('skip_mail'), ['off'])
        self.assertEqual(contact_form.additional_setting('skip_mail', max_count=None), ['off', 'true'])
        self.assertEqual(contact_form.additional_setting('subscribers_only'), [])

        self.assertTrue(contact_form.is_true('demo_mode'))
        self.assertTrue(contact_form.is_true('skip_mail'))
        self.assertFalse(contact_form.is_true('flamingo_email'))
        self.assertFalse(contact_form.is_true('subscribers_only'))

    def test_form_tags(self):
        contact_form = ContactForm(self.registry, properties={'form': FORM + ' [submit "Send"]'})

        self.assertEqual([tag.name for tag in contact_form.form_tags()], ['your-name', 'your-email', 'menu', ''])
        self.assertEqual([tag.name for tag in contact_form.scan_form_tags(basetype='text')], ['your-name'])
        self.assertEqual(
            [tag.name for tag in contact_form.scan_form_tags(feature='name-attr')],
            ['your-name', 'your-email', 'menu'],
        )
        self.assertEqual([tag.type_ for tag in contact_form.scan_form_tags(feature='!name-attr')], ['submit'])
        self.assertEqual(contact_form.form_tags_payload()[2]['values'], ['Sales', 'Support'])

    def test_set_properties_resets_form_tags(self):
        contact_form = ContactForm(self.registry, properties={'form': FORM})
        self.assertEqual(len(contact_form.form_tags()), 3)

        contact_form.set_properties({'form': '[text your-name]'})
        self.assertEqual(len(contact_form.form_tags()), 1)

    def test_get_schema(self):
        contact_form = ContactForm(self.registry, locale='en_US', properties={'form': FORM})
        schema = contact_form.get_schema()

        self.assertIs(contact_form.get_schema(), schema)
        self.assertEqual(schema.locale, 'en_US')
        self.assertEqual(
            [(rule['rule'], rule['field']) for rule in schema.to_dict()['rules']],
            [('required', 'your-name'), ('email', 'your-email'), ('enum', 'menu')],
        )
        self.assertEqual(schema.to_dict()['rules'][2]['accept'], ['Sales', 'Support'])
        self.assertEqual(schema.to_dict()['rules'][1]['error'], 'Please enter an email address.')

    def test_schema_contributors(self):
        def contribute_nothing(schema, contact_form):
            pass

        contributions = []

        def record_contribution(schema, contact_form):
            contributions.append(contact_form)

        registry = create_default_registry()
        registry.add_schema_contributor(contribute_nothing)
        registry.add_schema_contributor(record_contribution)
        contact_form = ContactForm(registry, properties={'form': FORM})
        contact_form.get_schema()
        contact_form.get_schema()

        self.assertEqual(contributions, [contact_form])

    def test_unit_tag(self):
        self.assertEqual(ContactForm(self.registry, id_=7).unit_tag(), 'wpcf7-f7-o1')
        self.assertEqual(ContactForm(self.registry, id_=7).unit_tag(2), 'wpcf7-f7-o2')
        self.assertEqual(ContactForm(self.registry).unit_tag(), 'wpcf7-f0-o1')

    def test_form_html(self):
        contact_form = ContactForm(
            self.registry,
            id_=7,
            locale='en_US',
            properties={'form': '[submit "Send"]', 'additional_settings': 'autop_off: true'},
        )
        form_html = contact_form.form_html()

        self.assertTrue(form_html.startswith('<div class="wpcf7 no-js" id="wpcf7-f7-o1" lang="en-US">\n'))
        self.assertIn(
            '<form action="#wpcf7-f7-o1" method="post" class="wpcf7-form init"'
            ' novalidate="novalidate" data-status="init">',
            form_html,
        )
        self.assertIn('<input type="hidden" name="_wpcf7" value="7" />', form_html)
        self.assertIn('<input type="hidden" name="_wpcf7_unit_tag" value="wpcf7-f7-o1" />', form_html)
        self.assertIn(
            '<input class="wpcf7-form-control has-spinner wpcf7-submit" value="Send" type="submit" />',
            form_html,
        )
        self.assertTrue(form_html.endswith('</form>\n</div>'))

    def test_to_dict_and_from_dict(self):
        data = {
            'id': 5,
            'name': 'contact-form-1',
            'title': 'Contact form 1',
            'locale': 'ja',
            'form': FORM,
            'mail': {'subject': 'Hi'},
            'unknown': 'ignored',
        }
        contact_form = ContactForm.from_dict(data, self.registry, SITE)

        self.assertEqual(contact_form.id_, 5)
        self.assertEqual(contact_form.title, 'Contact form 1')
        self.assertEqual(contact_form.locale, 'ja')
        self.assertIs(contact_form.site, SITE)
        self.assertEqual(
            contact_form.to_dict(),
            {
                'id': 5,
                'name': 'contact-form-1',
                'title': 'Contact form 1',
                'locale': 'ja',
                'form': FORM,
                'mail': {'subject': 'Hi'},
                'mail_2': {},
                'messages': {},
                'additional_settings': '',
            },
        )

    def test_from_template(self):
        contact_form = ContactForm.from_template(self.registry, SITE, title='Contact form 1')

        self.assertTrue(contact_form.initial())
        self.assertEqual(contact_form.prop('form'), DEFAULT_FORM_TEMPLATE)
        self.assertEqual(contact_form.prop('mail')['recipient'], '[_site_admin_email]')
        self.assertFalse(contact_form.prop('mail_2')['active'])
        self.assertEqual(contact_form.message('mail_sent_ok'), 'Thank you for your message. It has been sent.')
        self.assertEqual(contact_form.prop('additional_settings'), '')
        self.assertEqual(
            [tag.name for tag in contact_form.scan_form_tags(feature='name-attr')],
            ['your-name', 'your-email', 'your-subject', 'your-message'],
        )


if __name__ == '__main__':
    unittest.main()
