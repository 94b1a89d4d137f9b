"""
# Contact-Form: utilities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Common utility functions.
"""

import calendar
import datetime
import os
import re
import unicodedata
from typing import Any, Iterable, Optional


TEXTURIZE_SUBSTITUTE_FROM_PATTERN = {
    '---': '&#8212;',
    ' -- ': ' &#8212; ',
    '--': '&#8211;',
    ' - ': ' &#8211; ',
    '...': '&#8230;',
    '``': '&#8220;',
    "''": '&#8221;',
    ' (tm)': ' &#8482;',
}
BOOLEAN_ATTRIBUTE_NAMES = (
    'checked',
    'disabled',
    'multiple',
    'readonly',
    'required',
    'selected',
)


def none_to_empty_string(string: Optional[str]) -> str:
    if string is None:
        return ''

    return string


def flatten(value: Any) -> list:
    """
    Flatten arbitrarily nested lists (and tuples) into a flat list.

    A scalar is treated as a one-item list, and None as an empty one.
    """
    if value is None:
        return []

    if not isinstance(value, (list, tuple)):
        return [value]

    flattened = []
    for item in value:
        flattened.extend(flatten(item))

    return flattened


def exclude_blank(values: Iterable) -> list:
    return [value for value in values if value is not None and value != '']


def flat_join(value: Any, separator: str = ', ') -> str:
    return separator.join(
        str(item).strip()
        for item in flatten(value)
        if isinstance(item, (str, int, float))
    )


def strip_quote(text: str) -> str:
    text = text.strip()
    for quote in ('"', "'"):
        if len(text) >= 2 and text.startswith(quote) and text.endswith(quote):
            return text[1:-1]

    return text


def strip_newline(text: str) -> str:
    return str(text).replace('\r', '').replace('\n', '').strip()


def canonicalize(text: str, case: str = 'lower', strip_separators: bool = False) -> str:
    """
    Canonicalize text for lenient comparisons.

    Width variants are folded by NFKC normalisation,
    whitespace runs are collapsed (or removed if `strip_separators`),
    case is folded according to `case` (`lower`, `upper`, or `as-is`),
    and the result is trimmed.
    """
    text = unicodedata.normalize('NFKC', text)
    text = re.sub(
        pattern=r'[\r\n\t ]+',
        repl='' if strip_separators else ' ',
        string=text,
    )

    if case == 'lower':
        text = text.lower()
    elif case == 'upper':
        text = text.upper()

    return text.strip()


def count_code_units(text: str) -> int:
    """
    Count UTF-16 code units, with CRLF counted as a single unit.
    """
    text = text.replace('\r\n', '\n')
    return len(text.encode('utf-16-le')) // 2


def escape_html(value: str) -> str:
    """
    Escape text for HTML, leaving existing character references alone.

    For speed, we make the following assumptions:
    - Entity names are any run of up to 31 letters.
    - Decimal code points are any run of up to 7 digits.
    - Hexadecimal code points are any run of up to 6 digits.
    """
    value = re.sub(
        pattern='''
            [&]
            (?!
                (?:
                    [a-zA-Z]{1,31}
                        |
                    [#] (?: [0-9]{1,7} | [xX] [0-9a-fA-F]{1,6} )
                )
                [;]
            )
        ''',
        repl='&amp;',
        string=value,
        flags=re.VERBOSE,
    )
    value = re.sub(pattern='<', repl='&lt;', string=value)
    value = re.sub(pattern='>', repl='&gt;', string=value)
    value = re.sub(pattern='"', repl='&quot;', string=value)
    value = re.sub(pattern="'", repl='&#039;', string=value)

    return value


def texturize(text: str) -> str:
    """
    Apply typographic substitutions (dashes, ellipses, trade mark) to text.
    """
    return re.sub(
        pattern='|'.join(re.escape(pattern) for pattern in TEXTURIZE_SUBSTITUTE_FROM_PATTERN),
        repl=lambda match: TEXTURIZE_SUBSTITUTE_FROM_PATTERN[match.group()],
        string=text,
    )


def strip_all_tags(text: str) -> str:
    text = re.sub(
        pattern=r'<(?P<element> script | style )[^>]*?>.*?</(?P=element)>',
        repl='',
        string=text,
        flags=re.IGNORECASE | re.DOTALL | re.VERBOSE,
    )
    text = re.sub(
        pattern=r'<!-- .*? --> | < [^\s<>] [^>]* >?',
        repl='',
        string=text,
        flags=re.DOTALL | re.VERBOSE,
    )

    return text.strip()


def format_attributes(attributes: dict[str, Any]) -> str:
    """
    Format a dictionary of attributes into a string for an HTML start tag.

    Values of None or False are omitted, True gives a boolean attribute,
    and an empty string for a boolean attribute name also omits it.
    """
    value_from_name = {}
    for name, value in attributes.items():
        name = name.strip().lower()
        if not re.fullmatch(pattern=r'[a-z_:][a-z_:.0-9-]*', string=name):
            continue

        if name in BOOLEAN_ATTRIBUTE_NAMES and value == '':
            value = False

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)

        if value is None or value is False:
            value_from_name.pop(name, None)
        elif value is True:
            value_from_name[name] = name
        elif isinstance(value, str):
            value_from_name[name] = value.strip()

    return ' '.join(
        f'{name}="{escape_html(value)}"'
        for name, value in value_from_name.items()
    )


def path_join(base: str, path: str) -> str:
    if os.path.isabs(path):
        return path

    return os.path.join(base.rstrip('/\\'), path)


def _hour(date: datetime.date) -> int:
    return getattr(date, 'hour', 0)


def _english_ordinal_suffix(day: int) -> str:
    if day in (11, 12, 13):
        return 'th'

    return {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')


DATE_FORMAT_CHARACTER_FUNCTIONS = {
    'd': lambda date: f'{date.day:02d}',
    'D': lambda date: date.strftime('%a'),
    'j': lambda date: str(date.day),
    'l': lambda date: date.strftime('%A'),
    'N': lambda date: str(date.isoweekday()),
    'S': lambda date: _english_ordinal_suffix(date.day),
    'w': lambda date: str(date.isoweekday() % 7),
    'z': lambda date: str(date.timetuple().tm_yday - 1),
    'W': lambda date: f'{date.isocalendar()[1]:02d}',
    'F': lambda date: date.strftime('%B'),
    'm': lambda date: f'{date.month:02d}',
    'M': lambda date: date.strftime('%b'),
    'n': lambda date: str(date.month),
    't': lambda date: str(calendar.monthrange(date.year, date.month)[1]),
    'L': lambda date: '1' if calendar.isleap(date.year) else '0',
    'o': lambda date: str(date.isocalendar()[0]),
    'Y': lambda date: str(date.year),
    'y': lambda date: f'{date.year % 100:02d}',
    'a': lambda date: 'am' if _hour(date) < 12 else 'pm',
    'A': lambda date: 'AM' if _hour(date) < 12 else 'PM',
    'g': lambda date: str(_hour(date) % 12 or 12),
    'G': lambda date: str(_hour(date)),
    'h': lambda date: f'{_hour(date) % 12 or 12:02d}',
    'H': lambda date: f'{_hour(date):02d}',
    'i': lambda date: f'{getattr(date, "minute", 0):02d}',
    's': lambda date: f'{getattr(date, "second", 0):02d}',
}


def format_date(date: datetime.date, date_format: str) -> str:
    """
    Format a date according to a PHP-style date format string.

    Unrecognised characters are copied as is,
    and a backslash makes the following character literal.
    Time-of-day characters give midnight for a plain date.
    """
    output = []
    characters = iter(date_format)
    for character in characters:
        if character == '\\':
            output.append(next(characters, ''))
            continue

        try:
            output.append(DATE_FORMAT_CHARACTER_FUNCTIONS[character](date))
        except KeyError:
            output.append(character)

    return ''.join(output)
