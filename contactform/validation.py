"""
# Contact-Form: validation.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Per-submission validation state.
"""

from typing import Iterable, NamedTuple, Optional, Union

from contactform.checks import is_name
from contactform.tags import FormTag


class InvalidField(NamedTuple):
    reason: str
    idref: Optional[str]


class ValidationState:
    """
    Object recording the invalid fields of a submission.

    A field is recorded at most once: the first invalidation wins.
    The HTML id reference of a field comes from the `id:` option of its form-tag.
    """
    _invalid_field_from_name: dict[str, InvalidField]
    _form_tag_from_name: dict[str, FormTag]

    def __init__(self, form_tags: Iterable[FormTag] = ()):
        self._invalid_field_from_name = {}
        self._form_tag_from_name = {}
        for form_tag in form_tags:
            if form_tag.name != '':
                self._form_tag_from_name.setdefault(form_tag.name, form_tag)

    @property
    def invalid_fields(self) -> dict[str, InvalidField]:
        return dict(self._invalid_field_from_name)

    def invalidate(self, target: Union[str, FormTag], message: str):
        if isinstance(target, FormTag):
            form_tag = target
            name = target.name
        else:
            name = target.strip()
            form_tag = self._form_tag_from_name.get(name)

        if not is_name(name) or name in self._invalid_field_from_name:
            return

        idref = None
        if form_tag is not None:
            id_option = form_tag.get_id_option()
            if id_option is not None and is_name(id_option):
                idref = id_option

        self._invalid_field_from_name[name] = InvalidField(message, idref)

    def is_valid(self, name: Optional[str] = None) -> bool:
        if name is None:
            return len(self._invalid_field_from_name) == 0

        return name not in self._invalid_field_from_name
