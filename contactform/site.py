"""
# Contact-Form: site.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Site settings and the collaborators provided by the hosting site.
"""

import abc
import copy
from typing import Any, NamedTuple, Optional

from contactform.constants import DEFAULT_LIST_ITEM_SEPARATOR


class User(NamedTuple):
    login: str = ''
    email: str = ''
    url: str = ''
    first_name: str = ''
    last_name: str = ''
    nickname: str = ''
    display_name: str = ''


class Site(NamedTuple):
    """
    Settings of the hosting site.

    - `content_dir` is the directory that mail attachments must reside in.
    - `upload_max_filesize` is the host's upload ceiling, e.g. `2M`, `512k` or `1g`.
    - `date_format` and `time_format` are PHP-style formats for the `_date` and `_time` mail-tags.
    - `user` is the logged-in user, if any.
    """
    title: str = ''
    description: str = ''
    home_url: str = 'http://localhost'
    admin_email: str = ''
    content_dir: str = '.'
    upload_max_filesize: str = '2M'
    list_item_separator: str = DEFAULT_LIST_ITEM_SEPARATOR
    date_format: str = 'F j, Y'
    time_format: str = 'g:i a'
    secret_key: str = ''
    uses_really_simple_captcha: bool = False
    user: Optional[User] = None


class MetadataStore(abc.ABC):
    """
    Base class for the storage of metadata attached to contact form documents.
    """
    @abc.abstractmethod
    def get_meta(self, form_id: Any, key: str) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    def update_meta(self, form_id: Any, key: str, value: Any):
        raise NotImplementedError

    @abc.abstractmethod
    def delete_meta(self, form_id: Any, key: str):
        raise NotImplementedError


class MemoryMetadataStore(MetadataStore):
    """
    Metadata store kept in memory.
    """
    _value_from_key: dict[tuple[Any, str], Any]

    def __init__(self):
        self._value_from_key = {}

    def get_meta(self, form_id: Any, key: str) -> Any:
        return copy.deepcopy(self._value_from_key.get((form_id, key)))

    def update_meta(self, form_id: Any, key: str, value: Any):
        self._value_from_key[(form_id, key)] = copy.deepcopy(value)

    def delete_meta(self, form_id: Any, key: str):
        self._value_from_key.pop((form_id, key), None)
