"""
# Contact-Form: registry.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Tag-type registry.
"""

import abc
import re
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, NamedTuple, Optional, Union

from contactform.exceptions import UnrecognisedTagTypeException
from contactform.idioms import compile_form_tag_regex

if TYPE_CHECKING:
    from contactform.contact_form import ContactForm
    from contactform.swv import Schema
    from contactform.tags import FormTag


class TagRenderer(abc.ABC):
    """
    Base class for the renderer of a tag type.
    """
    @abc.abstractmethod
    def render(self, tag: 'FormTag') -> str:
        """
        Render a scanned form-tag to markup.
        """
        raise NotImplementedError


class FunctionTagRenderer(TagRenderer):
    """
    A renderer wrapping a plain function of the scanned form-tag.
    """
    _function: Callable[['FormTag'], str]

    def __init__(self, function: Callable[['FormTag'], str]):
        self._function = function

    def render(self, tag: 'FormTag') -> str:
        return self._function(tag)


class TagType(NamedTuple):
    name: str
    renderer: TagRenderer
    features: frozenset[str]


SchemaContributor = Callable[['Schema', 'ContactForm'], None]


class TagTypeRegistry:
    """
    Object mapping tag-type names to their renderers and declared features.

    Names are sanitised to `[a-z0-9_*]` on registration,
    and the first registration of a name wins.
    The master form-tag regex is compiled lazily,
    and only recompiled after the set of names has changed.
    """
    _tag_type_from_name: dict[str, TagType]
    _schema_contributors: list[SchemaContributor]
    _tag_regex_compiled: Optional[re.Pattern]

    def __init__(self):
        self._tag_type_from_name = {}
        self._schema_contributors = []
        self._tag_regex_compiled = None

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._tag_type_from_name

    def __len__(self) -> int:
        return len(self._tag_type_from_name)

    @property
    def names(self) -> list[str]:
        return list(self._tag_type_from_name)

    @property
    def schema_contributors(self) -> list[SchemaContributor]:
        return list(self._schema_contributors)

    @staticmethod
    def sanitise_type_name(type_name: str) -> str:
        type_name = re.sub(pattern=r'[^a-zA-Z0-9_*]+', repl='_', string=type_name)
        type_name = type_name.rstrip('_')

        return type_name.lower()

    @staticmethod
    def normalise_features(features: Union[Iterable[str], Mapping[str, bool], None]) -> frozenset[str]:
        if features is None:
            return frozenset()

        if isinstance(features, Mapping):
            return frozenset(feature for feature, declared in features.items() if declared)

        if isinstance(features, str):
            features = [features]

        return frozenset(feature for feature in features if feature)

    def register(self,
                 names: Union[str, Iterable[str]],
                 renderer: Union[TagRenderer, Callable[['FormTag'], str]],
                 features: Union[Iterable[str], Mapping[str, bool], None] = None):
        if isinstance(names, str):
            names = [names]

        if not isinstance(renderer, TagRenderer):
            renderer = FunctionTagRenderer(renderer)

        features = TagTypeRegistry.normalise_features(features)

        for name in names:
            name = TagTypeRegistry.sanitise_type_name(name)
            if name == '' or name in self._tag_type_from_name:
                continue

            self._tag_type_from_name[name] = TagType(name, renderer, features)
            self._tag_regex_compiled = None

    def remove(self, type_name: str):
        if self._tag_type_from_name.pop(type_name, None) is not None:
            self._tag_regex_compiled = None

    def get(self, type_name: str) -> Optional[TagType]:
        return self._tag_type_from_name.get(type_name)

    def lookup(self, type_name: str) -> TagType:
        try:
            return self._tag_type_from_name[type_name]
        except KeyError:
            raise UnrecognisedTagTypeException(f'error: unrecognised tag type `{type_name}`')

    def supports(self, type_name: str, features: Union[str, Iterable[str]]) -> bool:
        tag_type = self._tag_type_from_name.get(type_name)
        if tag_type is None:
            return False

        requested_features = TagTypeRegistry.normalise_features(features)

        return len(requested_features & tag_type.features) > 0

    def collect(self, features: Union[str, Iterable[str], None] = None, invert: bool = False) -> list[str]:
        requested_features = TagTypeRegistry.normalise_features(features)
        if len(requested_features) == 0:
            return self.names

        return [
            name
            for name, tag_type in self._tag_type_from_name.items()
            if bool(requested_features & tag_type.features) != invert
        ]

    def tag_regex(self) -> Optional[re.Pattern]:
        if len(self._tag_type_from_name) == 0:
            return None

        if self._tag_regex_compiled is None:
            self._tag_regex_compiled = compile_form_tag_regex(self._tag_type_from_name)

        return self._tag_regex_compiled

    def add_schema_contributor(self, contributor: SchemaContributor):
        self._schema_contributors.append(contributor)
