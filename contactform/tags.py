"""
# Contact-Form: tags.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Scanned form-tags.
"""

import datetime
import re
from typing import Any, Optional, Union

from contactform.checks import is_date
from contactform.constants import KB_IN_BYTES, MB_IN_BYTES
from contactform.pipes import Pipes


OPTION_PATTERN_FROM_PRESET = {
    'date': '[0-9]{4}-[0-9]{2}-[0-9]{2}',
    'int': '[0-9]+',
    'signed_int': '[-]?[0-9]+',
    'num': '(?:[-]?[0-9]+)?(?:[.][0-9]+)?',
    'class': '[-0-9a-zA-Z_]+',
    'id': '[-0-9a-zA-Z_]+',
}
RELATIVE_DATE_DAYS_FROM_UNIT = {
    'day': 1,
    'days': 1,
    'week': 7,
    'weeks': 7,
}


class FormTag:
    """
    A form-tag as scanned from a form template.

    ````
    [«type» «raw_name» «options» "«raw_value»" [...]]
    [«type» «raw_name» «options» "«raw_value»" [...]]«content»[/«type»]
    ````
    - «basetype» is «type» with a trailing asterisk stripped
      (an asterisk marking the field as required).
    - «name» is «raw_name» with dots replaced by underscores.
    - «values» are the pipe befores of the raw values (or the raw values themselves if pipes are disabled).
    - «attr» holds the attribute text if it could not be parsed into options and values.
    """
    _type: str
    _basetype: str
    _raw_name: str
    _name: str
    _options: tuple[str, ...]
    _raw_values: tuple[str, ...]
    _values: tuple[str, ...]
    _pipes: Optional[Pipes]
    _labels: tuple[str, ...]
    _attr: str
    _content: str

    def __init__(self,
                 type_: str,
                 raw_name: str = '',
                 options: Union[list[str], tuple[str, ...]] = (),
                 raw_values: Union[list[str], tuple[str, ...]] = (),
                 values: Optional[Union[list[str], tuple[str, ...]]] = None,
                 pipes: Optional[Pipes] = None,
                 labels: Optional[Union[list[str], tuple[str, ...]]] = None,
                 attr: str = '',
                 content: str = ''):
        if values is None:
            values = raw_values

        if labels is None:
            labels = values

        self._type = type_
        self._basetype = type_.strip('*')
        self._raw_name = raw_name
        self._name = raw_name.replace('.', '_')
        self._options = tuple(options)
        self._raw_values = tuple(raw_values)
        self._values = tuple(value.strip() for value in values)
        self._pipes = pipes
        self._labels = tuple(label.strip() for label in labels)
        self._attr = attr
        self._content = content

    def __repr__(self) -> str:
        return f'FormTag(type_={self._type!r}, raw_name={self._raw_name!r}, options={self._options!r})'

    @property
    def type_(self) -> str:
        return self._type

    @property
    def basetype(self) -> str:
        return self._basetype

    @property
    def raw_name(self) -> str:
        return self._raw_name

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    @property
    def raw_values(self) -> tuple[str, ...]:
        return self._raw_values

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    @property
    def pipes(self) -> Optional[Pipes]:
        return self._pipes

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def attr(self) -> str:
        return self._attr

    @property
    def content(self) -> str:
        return self._content

    def is_required(self) -> bool:
        return self._type.endswith('*')

    def has_option(self, option_name: str) -> bool:
        pattern = f'{re.escape(option_name)}(?::.+)?'
        return self.get_first_match_option(pattern, flags=re.IGNORECASE) is not None

    def get_option(self, option_name: str, pattern: str = '', single: bool = False,
                   ) -> Union[list[str], Optional[str]]:
        """
        Get the value(s) of options of the form `«option_name»:«value»`.

        «pattern» may be a preset name (`date`, `int`, `signed_int`, `num`, `class`, `id`)
        or a regular expression that «value» must fully match.
        Returns the first value (or None) if `single`, else the list of all values.
        """
        pattern = OPTION_PATTERN_FROM_PRESET.get(pattern, pattern)
        if pattern == '':
            pattern = '.+'

        option_pattern = f'{re.escape(option_name)}:{pattern}'
        prefix_length = len(option_name) + 1

        if single:
            match = self.get_first_match_option(option_pattern, flags=re.IGNORECASE)
            if match is None:
                return None
            return match.group()[prefix_length:]

        return [
            match.group()[prefix_length:]
            for match in self.get_all_match_options(option_pattern, flags=re.IGNORECASE)
        ]

    def get_first_match_option(self, pattern: str, flags: int = 0) -> Optional[re.Match]:
        for option in self._options:
            match = re.fullmatch(pattern=pattern, string=option, flags=flags)
            if match is not None:
                return match

        return None

    def get_all_match_options(self, pattern: str, flags: int = 0) -> list[re.Match]:
        matches = []
        for option in self._options:
            match = re.fullmatch(pattern=pattern, string=option, flags=flags)
            if match is not None:
                matches.append(match)

        return matches

    def get_id_option(self) -> Optional[str]:
        return self.get_option('id', 'id', single=True)

    def get_class_option(self, default_classes: str = '') -> Optional[str]:
        classes = default_classes.split(' ') + self.get_option('class', 'class')
        classes = [class_ for class_ in dict.fromkeys(classes) if class_]
        if len(classes) == 0:
            return None

        return ' '.join(classes)

    def get_size_option(self, default: Optional[str] = None) -> Optional[str]:
        size = self.get_option('size', 'int', single=True)
        if size:
            return size

        for match in self.get_all_match_options(r'(?P<size> [0-9]* ) / [0-9]*', flags=re.VERBOSE):
            if match.group('size') != '':
                return match.group('size')

        return default

    def get_maxlength_option(self, default: Optional[str] = None) -> Optional[str]:
        maxlength = self.get_option('maxlength', 'int', single=True)
        if maxlength:
            return maxlength

        match = self.get_first_match_option(r'(?: [0-9]* x? [0-9]* )? / (?P<maxlength> [0-9]+ )', flags=re.VERBOSE)
        if match is not None:
            return match.group('maxlength')

        return default

    def get_minlength_option(self, default: Optional[str] = None) -> Optional[str]:
        minlength = self.get_option('minlength', 'int', single=True)
        if minlength:
            return minlength

        return default

    def get_cols_option(self, default: Optional[str] = None) -> Optional[str]:
        cols = self.get_option('cols', 'int', single=True)
        if cols:
            return cols

        match = self.get_first_match_option(
            r'(?P<cols> [0-9]* ) x (?P<rows> [0-9]* ) (?: / [0-9]+ )?',
            flags=re.VERBOSE,
        )
        if match is not None and match.group('cols') != '':
            return match.group('cols')

        return default

    def get_rows_option(self, default: Optional[str] = None) -> Optional[str]:
        rows = self.get_option('rows', 'int', single=True)
        if rows:
            return rows

        match = self.get_first_match_option(
            r'(?P<cols> [0-9]* ) x (?P<rows> [0-9]* ) (?: / [0-9]+ )?',
            flags=re.VERBOSE,
        )
        if match is not None and match.group('rows') != '':
            return match.group('rows')

        return default

    def get_limit_option(self, default: int = MB_IN_BYTES) -> int:
        """
        Get the byte limit from an option of the form `limit:«number»[kb|mb]`.
        """
        match = self.get_first_match_option(r'limit: (?P<size> [1-9][0-9]* ) (?P<unit> [kKmM]?[bB] )?', flags=re.VERBOSE)
        if match is None:
            return int(default)

        size = int(match.group('size'))
        unit = (match.group('unit') or '').lower()
        if unit == 'kb':
            size *= KB_IN_BYTES
        elif unit == 'mb':
            size *= MB_IN_BYTES

        return size

    def get_date_option(self, option_name: str, today: Optional[datetime.date] = None) -> Optional[str]:
        """
        Get a date option as `YYYY-MM-DD`.

        The option value may be a date in that format, `today`,
        or a relative expression such as `today+7days` or `today_-_1_week`
        (underscores are read as spaces).
        """
        value = self.get_option(option_name, '', single=True)
        if not value:
            return None

        if is_date(value):
            return value

        if today is None:
            today = datetime.date.today()

        match = re.fullmatch(
            pattern=r'''
                (?: today )? [\s]*
                (?:
                    (?P<sign> [+-] ) [\s]*
                    (?P<count> [0-9]+ ) [\s]*
                    (?P<unit> days? | weeks? )
                )?
            ''',
            string=value.replace('_', ' ').strip().lower(),
            flags=re.ASCII | re.VERBOSE,
        )
        if match is None or match.group() == '':
            return None

        date = today
        if match.group('sign') is not None:
            days = int(match.group('count')) * RELATIVE_DATE_DAYS_FROM_UNIT[match.group('unit')]
            if match.group('sign') == '-':
                days = -days
            date += datetime.timedelta(days=days)

        return date.isoformat()

    def get_default_option(self, default_value: Any = '', multiple: bool = False, shifted: bool = False) -> Any:
        """
        Get the default value(s) selected by options of the form `default:«index»[_«index»...]`.

        Indexes are 1-based into «values», or 0-based if `shifted`.
        Returns a list if `multiple`, else the first selected value (or `default_value`).
        """
        selected_values = []
        for option_value in self.get_option('default', '[0-9_]+'):
            for index_string in option_value.split('_'):
                if index_string == '':
                    continue
                index = int(index_string)
                if not shifted:
                    index -= 1
                if 0 <= index < len(self._values):
                    selected_values.append(self._values[index])

        if multiple:
            return selected_values

        if len(selected_values) > 0:
            return selected_values[0]

        return default_value

    def to_dict(self) -> dict:
        return {
            'type': self._type,
            'basetype': self._basetype,
            'name': self._name,
            'options': list(self._options),
            'raw_values': list(self._raw_values),
            'labels': list(self._labels),
            'values': list(self._values),
            'pipes': self._pipes.to_list() if self._pipes is not None else [],
            'content': self._content,
        }
