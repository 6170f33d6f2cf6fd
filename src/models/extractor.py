"""
Extractor-specific data models

Type-safe structures handed from the directive extractor to the HTML
tree-construction adapter.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, Optional

from .nodes import DirectiveTag
from ..errors import PlaceholderError


class PlaceholderQueue:
    """
    FIFO of parsed directive tags, drained strictly in source order

    The extractor pushes one tag per sentinel it writes into the template;
    the adapter pops one tag per sentinel it meets while the HTML parser
    walks the rewritten text. Both passes run left to right, so the n-th
    sentinel always receives the n-th tag.

    Example:
        >>> from cowlick.models.nodes import EndIfTag
        >>> queue = PlaceholderQueue()
        >>> queue.push(EndIfTag())
        >>> len(queue)
        1
        >>> queue.pop()
        EndIfTag()
        >>> queue.drained
        True
    """

    def __init__(self, tags: Optional[Iterable[DirectiveTag]] = None) -> None:
        self._tags: Deque[DirectiveTag] = deque(tags or ())
        self.popped = 0

    def push(self, tag: DirectiveTag) -> None:
        self._tags.append(tag)

    def pop(self) -> DirectiveTag:
        """
        Take the tag for the next sentinel

        Raises:
            PlaceholderError: More sentinels than extracted directives
        """
        if not self._tags:
            raise PlaceholderError(
                f"Placeholder #{self.popped + 1} has no directive; "
                "the template contains more sentinel characters than directives"
            )
        self.popped += 1
        return self._tags.popleft()

    @property
    def drained(self) -> bool:
        return not self._tags

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self):
        return iter(self._tags)

    def __repr__(self) -> str:
        return f"PlaceholderQueue({list(self._tags)!r})"


@dataclass
class DirectiveMatch:
    """
    Result of finding a directive opener in template text

    Attributes:
        opener: The opening sequence found ("{{", "{%" or "{#")
        position: Character position where the opener starts
    """
    opener: str
    position: int


@dataclass
class ExtractedTemplate:
    """
    Result of directive extraction

    Attributes:
        rewritten: Template text with every directive replaced by one
                   sentinel character
        queue: Parsed directives in source order
    """
    rewritten: str
    queue: PlaceholderQueue = field(default_factory=PlaceholderQueue)
