from __future__ import annotations

import heapq
import logging
from abc import ABC, abstractmethod
from collections import deque
from functools import cmp_to_key
from .types import *

# --- operator surface ---
from .extensions.core import _CoreOperations

# --- accessors ---
from .extensions.terminal import TerminalAccessor

logger = logging.getLogger(__name__)

# --- abstract base class ---

class IChunkSource(ABC, Generic[T]):
    @abstractmethod
    def produce(self) -> Iterator[Chunk]:
        """lazily yield chunks, one per pull"""
        raise NotImplementedError(f"{type(self).__name__} does not implement produce()")

# --- base sequence implementation ---

class Sequence(IChunkSource[T], _CoreOperations[T]):
    """a lazy, pull-based producer of chunks."""

    def __init__(self):
        self.to = TerminalAccessor(self)

    def __iter__(self) -> Iterator[Chunk]:
        return self.produce()

    def collect(self) -> List[T]:
        """drain the pipeline and flatten every chunk into one list"""
        result: List[T] = []
        for chunk in self:
            result.extend(chunk)
        return result

    def collect_chunks(self) -> List[Chunk]:
        """drain the pipeline and return the chunks as emitted"""
        return [chunk for chunk in self]

    @staticmethod
    def from_chunks(*chunks: Chunk) -> 'StaticSequence[T]':
        """wrap pre-formed chunks as a sequence"""
        return StaticSequence(*chunks)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

# --- sources ---

class StaticSequence(Sequence[T]):
    """re-emits a fixed set of caller-supplied chunks. re-iterable."""

    def __init__(self, *chunks: Chunk):
        super().__init__()
        self._chunks = chunks

    def produce(self) -> Iterator[Chunk]:
        for chunk in self._chunks:
            yield chunk

    def __repr__(self) -> str:
        return f"StaticSequence(chunks={len(self._chunks)})"


class GeneratorSequence(Sequence[T]):
    """
    a source backed by an iterator of chunks, or by a zero-argument factory that returns one.
    a factory is called once per pass, so the sequence can be iterated again. a raw iterator
    can only be drained once; a second pass raises SequenceExhaustedError.
    """

    def __init__(self, chunks: Union[Iterable[Chunk], Callable[[], Iterable[Chunk]]]):
        super().__init__()
        if callable(chunks):
            self._factory = chunks
            self._iterator = None
        else:
            self._factory = None
            self._iterator = iter(chunks)
        self._started = False

    @property
    def is_reentrant(self) -> bool:
        return self._factory is not None

    def _open(self) -> Iterator[Chunk]:
        if self._factory is not None:
            return iter(self._factory())
        if self._started:
            logger.warning("single-pass sequence %r was iterated again", self)
            raise SequenceExhaustedError("single-pass sequence has already been consumed")
        self._started = True
        return self._iterator

    def produce(self) -> Iterator[Chunk]:
        for chunk in self._open():
            yield chunk if isinstance(chunk, list) else list(chunk)

    def __repr__(self) -> str:
        mode = "reentrant" if self.is_reentrant else "single-pass"
        return f"GeneratorSequence({mode})"

# --- chunk-wise transforms ---

class TransformSequence(Sequence[U]):
    """applies a filter or a map to each upstream chunk, dropping chunks that end up empty."""

    FILTER = 'filter'
    MAP = 'map'

    def __init__(self, source: Sequence[T], func: Callable, mode: str):
        super().__init__()
        if mode not in (self.FILTER, self.MAP):
            raise ValueError(f"unknown transform mode: '{mode}'")
        if not callable(func):
            raise TypeError(f"{mode} expects a callable, got {type(func).__name__}")
        self._source = source
        self._func = func
        self._mode = mode

    @property
    def mode(self) -> str:
        return self._mode

    def apply(self, chunk: Chunk) -> Chunk:
        if self._mode == self.FILTER:
            return [item for item in chunk if self._func(item)]
        return [self._func(item) for item in chunk]

    def produce(self) -> Iterator[Chunk]:
        for in_chunk in self._source:
            out_chunk = self.apply(in_chunk)
            if out_chunk:
                yield out_chunk
            else:
                logger.debug("%s dropped an empty chunk (%d elements in)", self._mode, len(in_chunk))

    def __repr__(self) -> str:
        return f"TransformSequence(mode={self._mode}, source={self._source!r})"

# --- ordering ---

class OrderedSequence(Sequence[T]):
    """
    sorts the whole upstream by a list of sort keys and emits the result as a single chunk.
    laziness is given up here: the first pull drains the upstream completely.
    """

    def __init__(self, source: Sequence[T], sort_keys: List[SortKey]):
        super().__init__()
        self._source = source
        self._sort_keys = list(sort_keys)

    @property
    def sort_keys(self) -> Tuple[SortKey, ...]:
        return tuple(self._sort_keys)

    def produce(self) -> Iterator[Chunk]:
        data = self._source.collect()
        keys = self._sort_keys
        logger.debug("ordering %d elements on %d key(s)", len(data), len(keys))

        ranked = [(rank_of(keys, item), index) for index, item in enumerate(data)]

        def compare(a, b):
            result = compare_ranks(keys, a[0], b[0])
            if result:
                return result
            # full tie: original position decides, keeping the sort stable
            return (a[1] > b[1]) - (a[1] < b[1])

        ranked.sort(key=cmp_to_key(compare))
        yield [data[index] for _, index in ranked]

    def then_by(self, key_selector: KeySelector[T, K]) -> 'OrderedSequence[T]':
        """secondary sort ascending"""
        return OrderedSequence(self._source, self._sort_keys + [SortKey(key_selector, False)])

    def then_by_descending(self, key_selector: KeySelector[T, K]) -> 'OrderedSequence[T]':
        """secondary sort descending"""
        return OrderedSequence(self._source, self._sort_keys + [SortKey(key_selector, True)])

    def merge_with(self, *others: Sequence[T]) -> 'MergedSequence[T]':
        """
        streams a k-way merge of this sequence with others that are already sorted
        by the same keys. the other sequences are not re-sorted.
        """
        return self.merge(*others, keys=self._sort_keys)

    def __repr__(self) -> str:
        return f"OrderedSequence(keys={self._sort_keys!r})"

# --- combining sources ---

class ConcatenatedSequence(Sequence[T]):
    """drains each source in turn, re-emitting its chunks untouched."""

    def __init__(self, sources: Iterable[Sequence[T]]):
        super().__init__()
        self._sources = tuple(sources)

    def produce(self) -> Iterator[Chunk]:
        for source in self._sources:
            yield from source

    def __repr__(self) -> str:
        return f"ConcatenatedSequence(sources={len(self._sources)})"


class _MergeCursor:
    """per-source read state for a merge: the iterator and the ranked remainder of its last chunk."""

    def __init__(self, index: int, iterator: Iterator[Chunk], keys: List[SortKey]):
        self.index = index
        self._iterator = iterator
        self._keys = keys
        self.buffer: deque = deque()

    def refill(self) -> bool:
        """pull chunks until the buffer holds something. false once the source is spent."""
        while not self.buffer:
            chunk = next(self._iterator, None)
            if chunk is None:
                return False
            self.buffer.extend((rank_of(self._keys, item), item) for item in chunk)
        return True

    @property
    def last_rank(self) -> Tuple:
        return self.buffer[-1][0]

    def take_while(self, condition: Callable[[Tuple], bool]) -> List[Tuple[Tuple, Any]]:
        taken = []
        while self.buffer and condition(self.buffer[0][0]):
            taken.append(self.buffer.popleft())
        return taken

    def take_all(self) -> List[Tuple[Tuple, Any]]:
        taken = list(self.buffer)
        self.buffer.clear()
        return taken


class MergedSequence(Sequence[T]):
    """
    order-preserving k-way merge of sources that are each sorted by the same keys.

    each step refills only the sources whose buffered chunk has been used up, then emits
    everything that is known to come before any element still unseen. the bound for that is
    the frontier: the smallest last-buffered key across live sources. ties go to the source
    listed first, then to upstream position.
    """

    def __init__(self, sources: Iterable[Sequence[T]], sort_keys: List[SortKey]):
        super().__init__()
        self._sources = tuple(sources)
        self._sort_keys = list(sort_keys)

    @property
    def sort_keys(self) -> Tuple[SortKey, ...]:
        return tuple(self._sort_keys)

    def produce(self) -> Iterator[Chunk]:
        keys = self._sort_keys
        order_key = cmp_to_key(lambda a, b: compare_ranks(keys, a, b))
        live = [_MergeCursor(index, iter(source), keys) for index, source in enumerate(self._sources)]

        while True:
            still_live = []
            for cursor in live:
                if cursor.buffer or cursor.refill():
                    still_live.append(cursor)
                else:
                    logger.debug("merge source %d exhausted", cursor.index)
            live = still_live
            if not live:
                return

            frontier_cursor = live[0]
            for cursor in live[1:]:
                if compare_ranks(keys, cursor.last_rank, frontier_cursor.last_rank) < 0:
                    frontier_cursor = cursor
            frontier = frontier_cursor.last_rank

            runs = []
            for cursor in live:
                if cursor is frontier_cursor:
                    runs.append(cursor.take_all())
                elif cursor.index < frontier_cursor.index:
                    runs.append(cursor.take_while(lambda rank: compare_ranks(keys, rank, frontier) <= 0))
                else:
                    runs.append(cursor.take_while(lambda rank: compare_ranks(keys, rank, frontier) < 0))

            # heapq.merge breaks ties by run position, which is source order
            merged = heapq.merge(*runs, key=lambda pair: order_key(pair[0]))
            yield [item for _, item in merged]

    def __repr__(self) -> str:
        return f"MergedSequence(sources={len(self._sources)}, keys={self._sort_keys!r})"
