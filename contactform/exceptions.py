"""
# Contact-Form: exceptions.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Exception classes.
"""


class MissingPropertyException(Exception):
    _missing_property: str

    def __init__(self, missing_property: str):
        self._missing_property = missing_property

    @property
    def missing_property(self) -> str:
        return self._missing_property


class UnrecognisedRuleException(Exception):
    pass


class UnrecognisedTagTypeException(Exception):
    pass
