from typing import (
    TypeVar, Generic, Callable, Iterator, Iterable, Any, Optional, Union,
    Dict, List, Tuple
)

T = TypeVar('T')
U = TypeVar('U')
K = TypeVar('K')

Chunk = List[T]
Predicate = Callable[[T], bool]
Selector = Callable[[T], U]
KeySelector = Callable[[T], K]
ChunkTransform = Callable[[Chunk], Chunk]

DEFAULT_CHUNK_SIZE = 100


class SequenceExhaustedError(RuntimeError):
    """raised when a single-pass sequence is iterated a second time."""
    pass


class SortKey(Generic[T, K]):
    """one level of an ordering: a key selector and its direction"""

    __slots__ = ('selector', 'descending')

    def __init__(self, selector: KeySelector[T, K], descending: bool = False):
        if not callable(selector):
            raise TypeError(f"sort key selector must be callable, got {type(selector).__name__}")
        self.selector = selector
        self.descending = bool(descending)

    @classmethod
    def coerce(cls, spec: Any) -> 'SortKey':
        """accepts a bare selector, a (selector, descending) pair, or a SortKey"""
        if isinstance(spec, SortKey):
            return spec
        if isinstance(spec, (tuple, list)):
            if len(spec) != 2:
                raise ValueError(f"sort key pair must be (selector, descending), got {len(spec)} items")
            return cls(spec[0], spec[1])
        return cls(spec)

    def __eq__(self, other):
        if not isinstance(other, SortKey):
            return NotImplemented
        return self.selector is other.selector and self.descending == other.descending

    def __hash__(self):
        return hash((id(self.selector), self.descending))

    def __repr__(self) -> str:
        name = getattr(self.selector, '__name__', repr(self.selector))
        return f"SortKey(selector={name}, descending={self.descending})"


def coerce_sort_keys(specs: Iterable[Any]) -> List[SortKey]:
    keys = [SortKey.coerce(spec) for spec in specs]
    if not keys:
        raise ValueError("at least one sort key is required")
    return keys


def rank_of(keys: List[SortKey], item: Any) -> Tuple:
    """the tuple of key values for an item, in priority order"""
    return tuple(key.selector(item) for key in keys)


def compare_ranks(keys: List[SortKey], rank_a: Tuple, rank_b: Tuple) -> int:
    """
    composite comparator over two rank tuples. the first differing position decides,
    and that position's direction flips the sign. returns 0 when every key is equal.
    """
    for key, a, b in zip(keys, rank_a, rank_b):
        if a < b:
            return 1 if key.descending else -1
        if a > b:
            return -1 if key.descending else 1
    return 0
