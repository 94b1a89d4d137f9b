"""
# Contact-Form: bases.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Base classes for SWV (schema-woven validation) rules.
"""

import abc
from typing import Any, Iterable, Iterator, Mapping, NamedTuple, Optional

from contactform.utilities import exclude_blank, flatten


class UploadedFile(NamedTuple):
    name: str
    path: str
    size: int


class SubmittedInput:
    """
    Raw posted data and uploaded files of a submission.

    Every posted value is treated as one or more strings:
    nested lists are flattened and blank entries excluded.
    """
    _posted_data: dict[str, Any]
    _uploaded_files: dict[str, list[UploadedFile]]

    def __init__(self,
                 posted_data: Optional[Mapping[str, Any]] = None,
                 uploaded_files: Optional[Mapping[str, Iterable[UploadedFile]]] = None):
        self._posted_data = dict(posted_data or {})
        self._uploaded_files = {
            name: list(files)
            for name, files in (uploaded_files or {}).items()
        }

    @property
    def posted_data(self) -> dict[str, Any]:
        return self._posted_data

    @property
    def uploaded_files(self) -> dict[str, list[UploadedFile]]:
        return self._uploaded_files

    def posted_values(self, field: str) -> list[str]:
        values = [
            str(value)
            for value in flatten(self._posted_data.get(field))
            if value is not None
        ]
        return exclude_blank(values)

    def files(self, field: str) -> list[UploadedFile]:
        return self._uploaded_files.get(field, [])


class ValidationContext(NamedTuple):
    """
    Context of a validation pass.

    `text` and `file` enable rules of the respective kind;
    a non-empty `fields` restricts validation to the named fields.
    """
    submission: SubmittedInput
    text: bool = True
    file: bool = False
    fields: tuple[str, ...] = ()


class RuleViolation(NamedTuple):
    rule_name: str
    field: str
    message: str


class Rule(abc.ABC):
    """
    Base class for a validation rule.
    """
    rule_name: str = ''

    def matches(self, context: ValidationContext) -> bool:
        return True

    @abc.abstractmethod
    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        """
        Validate submitted input, returning None if valid.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def to_dict(self) -> dict:
        """
        Serialise the rule for the schema payload.
        """
        raise NotImplementedError


class FieldRule(Rule, abc.ABC):
    """
    Base class for a rule on a single field.

    Schema syntax:
    ````
    {"rule": "«rule_name»", "field": "«field»", "error": "«error»"}
    ````
    """
    context_kind: str = 'text'

    _field: str
    _error: str

    def __init__(self, field: str, error: str = ''):
        self._field = field
        self._error = error

    @property
    def field(self) -> str:
        return self._field

    @property
    def error(self) -> str:
        return self._error

    def matches(self, context: ValidationContext) -> bool:
        if len(context.fields) > 0 and self._field not in context.fields:
            return False

        if self.context_kind == 'file':
            return context.file

        return context.text

    def violation(self) -> RuleViolation:
        return RuleViolation(self.rule_name, self._field, self._error)

    def _kind_specific_properties(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        return {
            'rule': self.rule_name,
            'field': self._field,
            **self._kind_specific_properties(),
            'error': self._error,
        }


class AcceptRule(FieldRule, abc.ABC):
    """
    Base class for a rule with a list of acceptable values.

    Schema syntax:
    ````
    {"rule": "«rule_name»", "field": "«field»", "accept": ["«value»", ...], "error": "«error»"}
    ````
    """
    _accept: tuple[str, ...]

    def __init__(self, field: str, accept: Iterable[str] = (), error: str = ''):
        super().__init__(field, error)
        if isinstance(accept, str):
            accept = [accept]
        self._accept = tuple(str(value) for value in accept)

    @property
    def accept(self) -> tuple[str, ...]:
        return self._accept

    def _kind_specific_properties(self) -> dict:
        return {'accept': list(self._accept)}


class ThresholdRule(FieldRule, abc.ABC):
    """
    Base class for a rule with a threshold.

    Schema syntax:
    ````
    {"rule": "«rule_name»", "field": "«field»", "threshold": "«threshold»", "error": "«error»"}
    ````
    """
    _threshold: Optional[str]

    def __init__(self, field: str, threshold: Any = None, error: str = ''):
        super().__init__(field, error)
        if threshold is None:
            self._threshold = None
        else:
            self._threshold = str(threshold)

    @property
    def threshold(self) -> Optional[str]:
        return self._threshold

    def _kind_specific_properties(self) -> dict:
        if self._threshold is None:
            return {}

        return {'threshold': self._threshold}


class CompositeRule(Rule):
    """
    A rule composed of child rules.

    Always matches; validation returns the first violation among matching children.
    """
    _rules: list[Rule]

    def __init__(self):
        self._rules = []

    def add_rule(self, rule: Rule):
        self._rules.append(rule)

    def rules(self) -> Iterator[Rule]:
        """
        Iterate over descendant rules, depth first.
        """
        for rule in self._rules:
            yield rule
            if isinstance(rule, CompositeRule):
                yield from rule.rules()

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for rule in self._rules:
            if not rule.matches(context):
                continue

            violation = rule.validate(context)
            if violation is not None:
                return violation

        return None

    def _properties(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        return {
            **self._properties(),
            'rules': [rule.to_dict() for rule in self._rules],
        }
