"""
# Contact-Form: test_swv.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `swv.py` (and the rules it catalogues).
"""

import unittest

from contactform.bases import CompositeRule, RuleViolation, SubmittedInput, UploadedFile, ValidationContext
from contactform.constants import SCHEMA_VERSION
from contactform.exceptions import UnrecognisedRuleException
from contactform.swv import Schema, available_rules, create_rule, meta_schema, rule_from_dict, validate_schema
from contactform.validation import ValidationState


def text_context(posted_data: dict) -> ValidationContext:
    return ValidationContext(SubmittedInput(posted_data))


def file_context(uploaded_files: dict) -> ValidationContext:
    return ValidationContext(SubmittedInput(uploaded_files=uploaded_files), text=False, file=True)


class TestRules(unittest.TestCase):
    def test_required(self):
        rule = create_rule('required', field='name', error='Required.')

        self.assertEqual(rule.validate(text_context({})), RuleViolation('required', 'name', 'Required.'))
        self.assertIsNotNone(rule.validate(text_context({'name': ''})))
        self.assertIsNotNone(rule.validate(text_context({'name': ['', None]})))
        self.assertIsNone(rule.validate(text_context({'name': ['', 'x']})))
        self.assertIsNone(rule.validate(text_context({'name': 0})))

    def test_matches(self):
        rule = create_rule('required', field='name')
        submission = SubmittedInput({})

        self.assertTrue(rule.matches(ValidationContext(submission)))
        self.assertFalse(rule.matches(ValidationContext(submission, text=False, file=True)))
        self.assertFalse(rule.matches(ValidationContext(submission, fields=('other',))))
        self.assertTrue(rule.matches(ValidationContext(submission, fields=('name',))))

        file_rule = create_rule('requiredfile', field='upload')
        self.assertFalse(file_rule.matches(ValidationContext(submission)))
        self.assertTrue(file_rule.matches(ValidationContext(submission, text=False, file=True)))

    def test_format_rules(self):
        self.assertIsNotNone(create_rule('email', field='e').validate(text_context({'e': 'bad'})))
        self.assertIsNone(create_rule('email', field='e').validate(text_context({'e': 'user@example.com'})))
        self.assertIsNone(create_rule('email', field='e').validate(text_context({'e': ''})))
        self.assertIsNotNone(create_rule('url', field='u').validate(text_context({'u': 'example.com'})))
        self.assertIsNone(create_rule('url', field='u').validate(text_context({'u': 'https://example.com'})))
        self.assertIsNotNone(create_rule('tel', field='t').validate(text_context({'t': 'call me'})))
        self.assertIsNone(create_rule('tel', field='t').validate(text_context({'t': '+1 555 0100'})))
        self.assertIsNotNone(create_rule('number', field='n').validate(text_context({'n': 'abc'})))
        self.assertIsNone(create_rule('number', field='n').validate(text_context({'n': '-1.5'})))
        self.assertIsNotNone(create_rule('date', field='d').validate(text_context({'d': '2024-13-01'})))
        self.assertIsNone(create_rule('date', field='d').validate(text_context({'d': '2024-12-01'})))

    def test_enum(self):
        rule = create_rule('enum', field='s', accept=['a', 'b', ''])

        self.assertIsNone(rule.validate(text_context({'s': ['a', 'b']})))
        self.assertIsNotNone(rule.validate(text_context({'s': ['a', 'c']})))
        self.assertIsNone(rule.validate(text_context({'s': ''})))

    def test_items(self):
        posted_data = {'c': ['a', 'b']}

        self.assertIsNotNone(create_rule('maxitems', field='c', threshold=1).validate(text_context(posted_data)))
        self.assertIsNone(create_rule('maxitems', field='c', threshold=2).validate(text_context(posted_data)))
        self.assertIsNotNone(create_rule('minitems', field='c', threshold=3).validate(text_context(posted_data)))
        self.assertIsNone(create_rule('minitems', field='c', threshold='x').validate(text_context(posted_data)))

    def test_unbounded_thresholds(self):
        posted_data = {'c': ['a', 'b']}

        self.assertIsNotNone(create_rule('minitems', field='c', threshold='1e999').validate(text_context(posted_data)))
        self.assertIsNone(create_rule('maxitems', field='c', threshold='1e999').validate(text_context(posted_data)))
        self.assertIsNotNone(create_rule('minlength', field='t', threshold='1e999').validate(text_context({'t': 'abc'})))
        self.assertIsNone(create_rule('maxlength', field='t', threshold='1e999').validate(text_context({'t': 'abc'})))
        self.assertIsNone(create_rule('minitems', field='c', threshold='-1e999').validate(text_context(posted_data)))

    def test_lengths(self):
        self.assertIsNotNone(create_rule('minlength', field='t', threshold=5).validate(text_context({'t': 'abc'})))
        self.assertIsNone(create_rule('minlength', field='t', threshold=5).validate(text_context({'t': ''})))
        self.assertIsNone(create_rule('minlength', field='t', threshold=3).validate(text_context({'t': 'abc'})))
        self.assertIsNotNone(create_rule('maxlength', field='t', threshold=3).validate(text_context({'t': 'abcd'})))
        self.assertIsNone(create_rule('maxlength', field='t', threshold=2).validate(text_context({'t': '\U0001F600'})))
        self.assertIsNotNone(create_rule('maxlength', field='t', threshold=1).validate(text_context({'t': '\U0001F600'})))

    def test_numbers(self):
        self.assertIsNotNone(create_rule('minnumber', field='n', threshold='10').validate(text_context({'n': '5'})))
        self.assertIsNone(create_rule('minnumber', field='n', threshold='10').validate(text_context({'n': '10'})))
        self.assertIsNone(create_rule('minnumber', field='n', threshold='10').validate(text_context({'n': 'abc'})))
        self.assertIsNotNone(create_rule('maxnumber', field='n', threshold='10').validate(text_context({'n': '10.5'})))
        self.assertIsNone(create_rule('maxnumber', field='n', threshold='').validate(text_context({'n': '99'})))

    def test_dates(self):
        self.assertIsNotNone(
            create_rule('mindate', field='d', threshold='2024-01-01').validate(text_context({'d': '2023-12-31'}))
        )
        self.assertIsNone(
            create_rule('mindate', field='d', threshold='2024-01-01').validate(text_context({'d': '2024-01-01'}))
        )
        self.assertIsNotNone(
            create_rule('maxdate', field='d', threshold='2024-01-01').validate(text_context({'d': '2024-01-02'}))
        )
        self.assertIsNone(create_rule('maxdate', field='d', threshold='soon').validate(text_context({'d': '2099-01-01'})))

    def test_files(self):
        small_pdf = UploadedFile('doc.PDF', '/tmp/doc.pdf', 100)
        large_png = UploadedFile('image.png', '/tmp/image.png', 5000)
        program = UploadedFile('program.exe', '/tmp/program.exe', 10)
        no_extension = UploadedFile('README', '/tmp/README', 10)

        self.assertIsNotNone(create_rule('requiredfile', field='f').validate(file_context({})))
        self.assertIsNone(create_rule('requiredfile', field='f').validate(file_context({'f': [small_pdf]})))

        file_rule = create_rule('file', field='f', accept=['.pdf', 'image/*'])
        self.assertIsNone(file_rule.validate(file_context({'f': [small_pdf, large_png]})))
        self.assertIsNotNone(file_rule.validate(file_context({'f': [program]})))
        self.assertIsNotNone(file_rule.validate(file_context({'f': [no_extension]})))

        self.assertIsNotNone(create_rule('maxfilesize', field='f', threshold=1000).validate(file_context({'f': [large_png]})))
        self.assertIsNone(create_rule('maxfilesize', field='f', threshold=1000).validate(file_context({'f': [small_pdf]})))
        self.assertIsNotNone(create_rule('minfilesize', field='f', threshold=1000).validate(file_context({'f': [small_pdf]})))
        self.assertIsNone(create_rule('minfilesize', field='f', threshold=1000).validate(file_context({})))


class TestSwv(unittest.TestCase):
    def test_create_rule(self):
        self.assertEqual(create_rule('required', field='x').rule_name, 'required')
        with self.assertRaises(UnrecognisedRuleException):
            create_rule('bogus', field='x')

    def test_available_rules(self):
        rule_names = available_rules()

        self.assertEqual(len(rule_names), 19)
        self.assertIn('requiredfile', rule_names)
        self.assertIn('maxfilesize', rule_names)
        self.assertEqual(meta_schema()['properties']['rules']['items']['properties']['rule']['enum'], rule_names)

    def test_schema_payload(self):
        schema = Schema(locale='en_US')
        schema.add_rule(create_rule('required', field='your-name', error='Required.'))
        schema.add_rule(create_rule('maxlength', field='your-name', threshold=400, error='Too long.'))
        schema.add_rule(create_rule('enum', field='menu', accept=['a', 'b'], error='Bad option.'))

        self.assertEqual(
            schema.to_dict(),
            {
                'version': SCHEMA_VERSION,
                'locale': 'en_US',
                'rules': [
                    {'rule': 'required', 'field': 'your-name', 'error': 'Required.'},
                    {'rule': 'maxlength', 'field': 'your-name', 'threshold': '400', 'error': 'Too long.'},
                    {'rule': 'enum', 'field': 'menu', 'accept': ['a', 'b'], 'error': 'Bad option.'},
                ],
            },
        )
        self.assertEqual(Schema.from_dict(schema.to_dict()).to_dict(), schema.to_dict())

    def test_rule_from_dict(self):
        composite_rule = rule_from_dict({'rules': [{'rule': 'required', 'field': 'a'}]})
        self.assertIsInstance(composite_rule, CompositeRule)
        self.assertEqual([rule.rule_name for rule in composite_rule.rules()], ['required'])

        with self.assertRaises(UnrecognisedRuleException):
            rule_from_dict({'field': 'a'})

    def test_rule_from_dict_unrecognised_key(self):
        with self.assertRaises(UnrecognisedRuleException) as context_manager:
            rule_from_dict({'rule': 'minlength', 'field': 'a', 'threshold': 3, 'limit': 5})
        self.assertIn('`limit`', str(context_manager.exception))

        with self.assertRaises(UnrecognisedRuleException):
            Schema.from_dict({'rules': [{'rules': [{'rule': 'required', 'field': 'a', 'accept': []}]}]})

        rule = rule_from_dict({'rule': 'enum', 'field': 's', 'accept': ['a'], 'error': 'Bad.'})
        self.assertEqual(rule.to_dict(), {'rule': 'enum', 'field': 's', 'accept': ['a'], 'error': 'Bad.'})

    def test_composite_rule_validate(self):
        composite_rule = CompositeRule()
        composite_rule.add_rule(create_rule('required', field='a', error='A is required.'))
        composite_rule.add_rule(create_rule('required', field='b', error='B is required.'))

        self.assertEqual(composite_rule.validate(text_context({'b': 'x'})).message, 'A is required.')
        self.assertEqual(composite_rule.validate(text_context({'a': 'x'})).message, 'B is required.')
        self.assertIsNone(composite_rule.validate(text_context({'a': 'x', 'b': 'y'})))

    def test_validate_schema_first_invalidation_wins(self):
        schema = Schema()
        schema.add_rule(create_rule('required', field='name', error='Required.'))
        schema.add_rule(create_rule('minlength', field='name', threshold=5, error='Too short.'))
        schema.add_rule(create_rule('maxlength', field='name', threshold=1, error='Too long.'))

        validation = ValidationState()
        validate_schema(schema, text_context({'name': ''}), validation)
        self.assertEqual(validation.invalid_fields['name'].reason, 'Required.')

        validation = ValidationState()
        validate_schema(schema, text_context({'name': 'abc'}), validation)
        self.assertEqual(validation.invalid_fields['name'].reason, 'Too short.')

    def test_validate_schema_nested_and_contexts(self):
        nested_rule = CompositeRule()
        nested_rule.add_rule(create_rule('email', field='email', error='Bad email.'))

        schema = Schema()
        schema.add_rule(create_rule('requiredfile', field='upload', error='File required.'))
        schema.add_rule(nested_rule)

        validation = ValidationState()
        validate_schema(schema, text_context({'email': 'bad'}), validation)
        self.assertEqual(list(validation.invalid_fields), ['email'])

        validate_schema(schema, file_context({}), validation)
        self.assertEqual(list(validation.invalid_fields), ['email', 'upload'])

        validation = ValidationState()
        restricted_context = ValidationContext(SubmittedInput({'email': 'bad'}), fields=('other',))
        validate_schema(schema, restricted_context, validation)
        self.assertTrue(validation.is_valid())


if __name__ == '__main__':
    unittest.main()
