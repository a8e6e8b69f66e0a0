import typing
from collections.abc import Collection
from itertools import batched
from .types import *

if typing.TYPE_CHECKING:
    from .sequence import Sequence, StaticSequence, GeneratorSequence, MergedSequence

def _check_chunk_size(chunk_size: int) -> None:
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")

def from_chunks(*chunks: Chunk) -> 'StaticSequence[T]':
    """create a sequence from pre-formed chunks"""
    from .sequence import StaticSequence
    return StaticSequence(*chunks)

def from_iterable(data: Iterable[T], chunk_size: int = DEFAULT_CHUNK_SIZE) -> 'GeneratorSequence[T]':
    """
    batch any iterable into chunks of at most chunk_size elements.
    sized collections (lists, tuples, ranges, strings, sets, dicts) can be iterated
    again; iterators and generators are single-pass.
    """
    from .sequence import GeneratorSequence
    _check_chunk_size(chunk_size)
    if isinstance(data, Collection):
        return GeneratorSequence(lambda: (list(batch) for batch in batched(data, chunk_size)))
    return GeneratorSequence(list(batch) for batch in batched(data, chunk_size))

def from_generator(factory: Callable[[], Iterable[Chunk]]) -> 'GeneratorSequence[T]':
    """create a sequence from a callable that returns a fresh chunk iterator for each pass"""
    from .sequence import GeneratorSequence
    if not callable(factory):
        raise TypeError(f"from_generator expects a callable, got {type(factory).__name__}")
    return GeneratorSequence(factory)

def from_pages(fetch_page: Callable[[int], Optional[Iterable[T]]], start: int = 0) -> 'GeneratorSequence[T]':
    """
    pull numbered pages until one comes back empty or None. each page becomes one chunk.
    pages are fetched only as the pipeline asks for them.
    """
    from .sequence import GeneratorSequence

    def pages():
        page_number = start
        while True:
            page = fetch_page(page_number)
            if page is None:
                return
            page = list(page)
            if not page:
                return
            yield page
            page_number += 1

    return GeneratorSequence(pages)

def empty() -> 'StaticSequence[Any]':
    """create a sequence with no chunks"""
    from .sequence import StaticSequence
    return StaticSequence()

def merge_sorted(sources: Iterable['Sequence[T]'], *key_specs: Any) -> 'MergedSequence[T]':
    """streaming k-way merge of sources that are each sorted by key_specs"""
    from .sequence import Sequence, MergedSequence
    sources = list(sources)
    for source in sources:
        if not isinstance(source, Sequence):
            raise TypeError(f"merge_sorted expects Sequence sources, got {type(source).__name__}")
    return MergedSequence(sources, coerce_sort_keys(key_specs))

# --- aliases ---
chunq = from_chunks
C = from_chunks
