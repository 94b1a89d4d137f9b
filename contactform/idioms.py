"""
# Contact-Form: idioms.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Common idioms (regular expressions shared by the scanners).
"""

import re
from typing import Iterable


NAME_PATTERN = r'[A-Za-z][-A-Za-z0-9_:.]*'
SWV_FIELD_PATTERN = '^[A-Za-z][-A-Za-z0-9_:]*$'

ATTRIBUTES_PATTERN_COMPILED = re.compile(
    pattern=r'''
        (?P<options> [-+*=0-9a-zA-Z:.!?#$&@_/|%\r\n\t ]*? )
        (?P<values> (?: [\r\n\t ]* "[^"]*" | [\r\n\t ]* '[^']*' )* )
    ''',
    flags=re.VERBOSE,
)
QUOTED_VALUE_PATTERN_COMPILED = re.compile(pattern=r''' "[^"]*" | '[^']*' ''', flags=re.VERBOSE)

MAIL_TAG_PATTERN_COMPILED = re.compile(
    pattern=r'''
        (?P<opening_bracket> \[? )
        \[ [\t ]*
        (?P<tag_name> [a-zA-Z_] [0-9a-zA-Z:._-]* )
        (?P<values> (?: [\t ]+ "[^"]*" | [\t ]+ '[^']*' )* )
        [\t ]* \]
        (?P<closing_bracket> \]? )
    ''',
    flags=re.VERBOSE,
)


def build_form_tag_regex_pattern(type_names: Iterable[str]) -> str:
    """
    Build the master form-tag pattern for the given tag-type names.

    `[«type» «attributes»]`, `[«type» «attributes» /]`,
    and `[«type» «attributes»]«content»[/«type»]`,
    each optionally wrapped in an extra pair of brackets (the literal escape).
    """
    type_alternation = '|'.join(re.escape(type_name) for type_name in type_names)

    return (
        r'(?P<opening_bracket> \[? )'
        r'\['
        f'(?P<type> {type_alternation} )'
        r'(?: [\r\n\t ] (?P<attributes> .*? ) )?'
        r'(?: [\r\n\t ] (?P<slash> / ) )?'
        r'\]'
        r'(?: (?P<content> [^\[]*? ) \[ / (?P=type) \] )?'
        r'(?P<closing_bracket> \]? )'
    )


def compile_form_tag_regex(type_names: Iterable[str]) -> re.Pattern:
    return re.compile(
        pattern=build_form_tag_regex_pattern(type_names),
        flags=re.DOTALL | re.VERBOSE,
    )


def is_escaped_match(match: re.Match) -> bool:
    return match.group('opening_bracket') == '[' and match.group('closing_bracket') == ']'


ESCAPED_TAG_PATTERN_COMPILED = re.compile(
    pattern=r'''
        \[ \[
        (?P<type> [a-zA-Z0-9_*]+ )
        (?P<rest> (?: [\r\n\t ] [^\[\]]* )? )
        \] \]
    ''',
    flags=re.VERBOSE,
)
