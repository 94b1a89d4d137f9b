"""
# Contact-Form: pipes.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Pipes for selectable values.

A value of the form `«before»|«after»` is displayed as «before»
but submitted (and interpolated into mail) as «after».
"""

import random
from typing import Iterable, Iterator, NamedTuple, Optional

from contactform.utilities import canonicalize


class Pipe(NamedTuple):
    before: str
    after: str

    @staticmethod
    def from_text(text: str) -> 'Pipe':
        before, separator, after = text.partition('|')
        if separator == '':
            before = after = text

        return Pipe(before.strip(), after.strip())


class Pipes:
    """
    Ordered list of pipes parsed from raw values.
    """
    _pipes: list[Pipe]

    def __init__(self, texts: Iterable[str] = ()):
        self._pipes = [Pipe.from_text(text) for text in texts]

    def __iter__(self) -> Iterator[Pipe]:
        return iter(self._pipes)

    def __len__(self) -> int:
        return len(self._pipes)

    def add_pipe(self, text: str):
        self._pipes.append(Pipe.from_text(text))

    def resolve(self, input_: str) -> str:
        """
        Return the «after» of the first pipe whose «before» matches the input,
        comparing canonicalised forms; if none matches, return the input unchanged.
        """
        canonical_input = canonicalize(input_, case='as-is')

        for pipe in self._pipes:
            if canonicalize(pipe.before, case='as-is') == canonical_input:
                return pipe.after

        return input_

    def collect_befores(self) -> list[str]:
        return [pipe.before for pipe in self._pipes]

    def collect_afters(self) -> list[str]:
        return [pipe.after for pipe in self._pipes]

    def zero(self) -> bool:
        return len(self._pipes) == 0

    def pick_random(self) -> Optional[Pipe]:
        if self.zero():
            return None

        return random.choice(self._pipes)

    def to_list(self) -> list[list[str]]:
        return [[pipe.before, pipe.after] for pipe in self._pipes]
