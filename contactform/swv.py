"""
# Contact-Form: swv.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Schema-woven validation: schemas, the rule catalogue, and schema evaluation.
"""

import inspect
from typing import Any

from contactform.bases import CompositeRule, FieldRule, Rule, ValidationContext
from contactform.constants import META_SCHEMA_DESCRIPTION, META_SCHEMA_TITLE, META_SCHEMA_URI, SCHEMA_VERSION
from contactform.exceptions import UnrecognisedRuleException
from contactform.idioms import SWV_FIELD_PATTERN
from contactform.rules import (
    DateRule,
    EmailRule,
    EnumRule,
    FileRule,
    MaxDateRule,
    MaxFileSizeRule,
    MaxItemsRule,
    MaxLengthRule,
    MaxNumberRule,
    MinDateRule,
    MinFileSizeRule,
    MinItemsRule,
    MinLengthRule,
    MinNumberRule,
    NumberRule,
    RequiredFileRule,
    RequiredRule,
    TelRule,
    URLRule,
)
from contactform.validation import ValidationState


RULE_CLASS_FROM_NAME = {
    rule_class.rule_name: rule_class
    for rule_class in (
        RequiredRule,
        RequiredFileRule,
        EmailRule,
        URLRule,
        TelRule,
        NumberRule,
        DateRule,
        FileRule,
        EnumRule,
        MinItemsRule,
        MaxItemsRule,
        MinLengthRule,
        MaxLengthRule,
        MinNumberRule,
        MaxNumberRule,
        MinDateRule,
        MaxDateRule,
        MinFileSizeRule,
        MaxFileSizeRule,
    )
}


class Schema(CompositeRule):
    """
    The root of a rule tree.

    Schema payload:
    ````
    {"version": "Contact Form 7 SWV Schema 2022-10", "locale": "«locale»", "rules": [...]}
    ````
    """
    _version: str
    _locale: str

    def __init__(self, locale: str = '', version: str = SCHEMA_VERSION):
        super().__init__()
        self._version = version
        self._locale = locale

    @property
    def version(self) -> str:
        return self._version

    @property
    def locale(self) -> str:
        return self._locale

    def _properties(self) -> dict:
        return {'version': self._version, 'locale': self._locale}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> 'Schema':
        schema = Schema(locale=data.get('locale', ''), version=data.get('version', SCHEMA_VERSION))
        for rule_data in data.get('rules', []):
            schema.add_rule(rule_from_dict(rule_data))

        return schema


def available_rules() -> list[str]:
    return list(RULE_CLASS_FROM_NAME)


def create_rule(rule_name: str, **parameters) -> Rule:
    try:
        rule_class = RULE_CLASS_FROM_NAME[rule_name]
    except KeyError:
        raise UnrecognisedRuleException(f'error: unrecognised rule `{rule_name}`')

    return rule_class(**parameters)


def rule_from_dict(data: dict[str, Any]) -> Rule:
    if 'rules' in data and 'rule' not in data:
        composite_rule = CompositeRule()
        for rule_data in data['rules']:
            composite_rule.add_rule(rule_from_dict(rule_data))
        return composite_rule

    rule_name = data.get('rule', '')
    parameters = {name: value for name, value in data.items() if name != 'rule'}

    rule_class = RULE_CLASS_FROM_NAME.get(rule_name)
    if rule_class is not None:
        accepted_names = inspect.signature(rule_class).parameters
        for name in parameters:
            if name not in accepted_names:
                raise UnrecognisedRuleException(f'error: unrecognised key `{name}` for rule `{rule_name}`')

    return create_rule(rule_name, **parameters)


def meta_schema() -> dict:
    return {
        '$schema': META_SCHEMA_URI,
        'title': META_SCHEMA_TITLE,
        'description': META_SCHEMA_DESCRIPTION,
        'type': 'object',
        'properties': {
            'version': {'type': 'string'},
            'locale': {'type': 'string'},
            'rules': {
                'type': 'array',
                'items': {
                    'type': 'object',
                    'properties': {
                        'rule': {'type': 'string', 'enum': available_rules()},
                        'field': {'type': 'string', 'pattern': SWV_FIELD_PATTERN},
                        'error': {'type': 'string'},
                        'accept': {'type': 'array', 'items': {'type': 'string'}},
                        'threshold': {'type': 'string'},
                    },
                    'required': ['rule'],
                },
            },
        },
    }


def validate_schema(rule: Rule, context: ValidationContext, validation: ValidationState):
    """
    Evaluate a rule tree against a submission, depth first, recording failures.

    Composite rules are walked into; a field rule runs only if it matches the context
    and its field has not already been invalidated.
    """
    if not rule.matches(context):
        return

    if isinstance(rule, CompositeRule):
        for child_rule in rule.rules():
            if not isinstance(child_rule, CompositeRule):
                validate_schema(child_rule, context, validation)
        return

    if isinstance(rule, FieldRule):
        if not validation.is_valid(rule.field):
            return

        violation = rule.validate(context)
        if violation is not None:
            validation.invalidate(rule.field, violation.message)
