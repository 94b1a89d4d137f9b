"""
# Contact-Form: rules.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

SWV rules.
"""

import mimetypes
import re
from typing import Optional

from contactform.bases import AcceptRule, FieldRule, RuleViolation, ThresholdRule, ValidationContext
from contactform.checks import is_date, is_email, is_number, is_tel, is_url
from contactform.utilities import count_code_units


def convert_mime_to_extensions(mime_type: str) -> list[str]:
    """
    Convert a MIME type (possibly with a `*` subtype) into file extensions.
    """
    mime_type = mime_type.strip().lower()

    if mime_type.endswith('/*'):
        prefix = mime_type[:-1]
        extensions = [
            extension
            for extension, type_ in sorted(mimetypes.types_map.items())
            if type_.startswith(prefix)
        ]
    else:
        extensions = mimetypes.guess_all_extensions(mime_type)

    return [extension.strip(' .').lower() for extension in extensions]


def threshold_number(threshold: Optional[str]) -> Optional[float]:
    if threshold is None or not is_number(threshold):
        return None

    return float(threshold)


class RequiredRule(FieldRule):
    rule_name = 'required'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        if len(context.submission.posted_values(self._field)) == 0:
            return self.violation()

        return None


class RequiredFileRule(FieldRule):
    rule_name = 'requiredfile'
    context_kind = 'file'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        paths = [uploaded_file.path for uploaded_file in context.submission.files(self._field) if uploaded_file.path]
        if len(paths) == 0:
            return self.violation()

        return None


class EmailRule(FieldRule):
    rule_name = 'email'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for value in context.submission.posted_values(self._field):
            if not is_email(value):
                return self.violation()

        return None


class URLRule(FieldRule):
    rule_name = 'url'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for value in context.submission.posted_values(self._field):
            if not is_url(value):
                return self.violation()

        return None


class TelRule(FieldRule):
    rule_name = 'tel'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for value in context.submission.posted_values(self._field):
            if not is_tel(value):
                return self.violation()

        return None


class NumberRule(FieldRule):
    rule_name = 'number'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for value in context.submission.posted_values(self._field):
            if not is_number(value):
                return self.violation()

        return None


class DateRule(FieldRule):
    rule_name = 'date'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        for value in context.submission.posted_values(self._field):
            if not is_date(value):
                return self.violation()

        return None


class FileRule(AcceptRule):
    """
    Uploaded file names must end with an acceptable extension.

    Each «accept» entry is an extension (`.pdf`) or a MIME type (`image/png`, `image/*`).
    """
    rule_name = 'file'
    context_kind = 'file'

    def acceptable_extensions(self) -> list[str]:
        extensions = []
        for accept in self._accept:
            if re.fullmatch(pattern=r'[.][a-z0-9]+', string=accept, flags=re.IGNORECASE):
                extensions.append(accept.lower())
            else:
                extensions.extend(f'.{extension}' for extension in convert_mime_to_extensions(accept))

        return list(dict.fromkeys(extensions))

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        acceptable_extensions = self.acceptable_extensions()

        for uploaded_file in context.submission.files(self._field):
            if uploaded_file.name == '':
                continue

            last_period_index = uploaded_file.name.rfind('.')
            if last_period_index == -1:
                return self.violation()

            if uploaded_file.name[last_period_index:].lower() not in acceptable_extensions:
                return self.violation()

        return None


class EnumRule(AcceptRule):
    rule_name = 'enum'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        acceptable_values = [value for value in dict.fromkeys(self._accept) if value != '']

        for value in context.submission.posted_values(self._field):
            if value not in acceptable_values:
                return self.violation()

        return None


class MinItemsRule(ThresholdRule):
    rule_name = 'minitems'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        if threshold is None:
            return None

        if len(context.submission.posted_values(self._field)) < threshold:
            return self.violation()

        return None


class MaxItemsRule(ThresholdRule):
    rule_name = 'maxitems'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        if threshold is None:
            return None

        if threshold < len(context.submission.posted_values(self._field)):
            return self.violation()

        return None


class MinLengthRule(ThresholdRule):
    rule_name = 'minlength'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        values = context.submission.posted_values(self._field)
        if threshold is None or len(values) == 0:
            return None

        total_length = sum(count_code_units(value) for value in values)
        if total_length < threshold:
            return self.violation()

        return None


class MaxLengthRule(ThresholdRule):
    rule_name = 'maxlength'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        if threshold is None:
            return None

        total_length = sum(count_code_units(value) for value in context.submission.posted_values(self._field))
        if threshold < total_length:
            return self.violation()

        return None


class MinNumberRule(ThresholdRule):
    rule_name = 'minnumber'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        if threshold is None:
            return None

        for value in context.submission.posted_values(self._field):
            if is_number(value) and float(value) < threshold:
                return self.violation()

        return None


class MaxNumberRule(ThresholdRule):
    rule_name = 'maxnumber'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        if threshold is None:
            return None

        for value in context.submission.posted_values(self._field):
            if is_number(value) and threshold < float(value):
                return self.violation()

        return None


class MinDateRule(ThresholdRule):
    rule_name = 'mindate'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        if not is_date(self._threshold):
            return None

        for value in context.submission.posted_values(self._field):
            if is_date(value) and value < self._threshold:
                return self.violation()

        return None


class MaxDateRule(ThresholdRule):
    rule_name = 'maxdate'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        if not is_date(self._threshold):
            return None

        for value in context.submission.posted_values(self._field):
            if is_date(value) and self._threshold < value:
                return self.violation()

        return None


class MinFileSizeRule(ThresholdRule):
    rule_name = 'minfilesize'
    context_kind = 'file'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        uploaded_files = context.submission.files(self._field)
        if threshold is None or len(uploaded_files) == 0:
            return None

        if sum(uploaded_file.size for uploaded_file in uploaded_files) < threshold:
            return self.violation()

        return None


class MaxFileSizeRule(ThresholdRule):
    rule_name = 'maxfilesize'
    context_kind = 'file'

    def validate(self, context: ValidationContext) -> Optional[RuleViolation]:
        threshold = threshold_number(self._threshold)
        uploaded_files = context.submission.files(self._field)
        if threshold is None or len(uploaded_files) == 0:
            return None

        if threshold < sum(uploaded_file.size for uploaded_file in uploaded_files):
            return self.violation()

        return None
