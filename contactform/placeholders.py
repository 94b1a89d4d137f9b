"""
# Contact-Form: placeholders.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Placeholder protection.
"""

import hashlib
import re
import warnings


BLOCK_PLACEHOLDER_TAG_NAME = 'placeholder:block'
INLINE_PLACEHOLDER_TAG_NAME = 'placeholder:inline'


class PlaceholderMaster:
    """
    Object providing placeholder protection to strings.

    Form-tags (and other embedded markup) should not be altered by the HTML formatter.
    To protect a string from alteration, it is temporarily replaced by a placeholder element
    of the form `<placeholder:block id="«sha1»" />` or `<placeholder:inline id="«sha1»" />`,
    where «sha1» is the hexadecimal SHA-1 digest of the string.
    The formatter treats the former as a block-level void element
    and the latter as a phrasing-content void element.

    Since the placeholder is content-addressed, protecting the same string twice
    gives the same placeholder.
    The very last call to PlaceholderMaster should be to unprotect the text
    (restoring the strings that were protected with a placeholder).
    """
    _string_from_placeholder: dict[str, str]

    def __init__(self):
        self._string_from_placeholder = {}

    def __len__(self) -> int:
        return len(self._string_from_placeholder)

    @staticmethod
    def build_placeholder(string: str, syntax_type_is_block: bool) -> str:
        digest = hashlib.sha1(string.encode()).hexdigest()

        if syntax_type_is_block:
            tag_name = BLOCK_PLACEHOLDER_TAG_NAME
        else:
            tag_name = INLINE_PLACEHOLDER_TAG_NAME

        return f'<{tag_name} id="{digest}" />'

    def protect(self, string: str, syntax_type_is_block: bool = False) -> str:
        """
        Protect a string by converting it to a placeholder.
        """
        placeholder = PlaceholderMaster.build_placeholder(string, syntax_type_is_block)
        self._string_from_placeholder[placeholder] = string

        return placeholder

    def unprotect(self, string: str) -> str:
        """
        Unprotect a string by restoring placeholders to their strings.
        """
        if len(self._string_from_placeholder) == 0:
            return string

        placeholder_pattern = '|'.join(
            re.escape(placeholder)
            for placeholder in self._string_from_placeholder
        )

        return re.sub(
            pattern=placeholder_pattern,
            repl=lambda match: self._string_from_placeholder[match.group()],
            string=string,
        )

    def warn_unrestored(self, string: str):
        """
        Warn about placeholders which have gone missing from a string.
        """
        for placeholder in self._string_from_placeholder:
            if placeholder not in string:
                warnings.warn(
                    f'warning: placeholder `{placeholder}` is missing, '
                    f'so `{self._string_from_placeholder[placeholder]}` cannot be restored\n\n'
                    f'Possible causes:\n'
                    f'- The markup surrounding the placeholder was altered '
                    f'beyond recognition after protection'
                )
