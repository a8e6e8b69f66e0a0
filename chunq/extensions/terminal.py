from __future__ import annotations
import typing
import numpy as np
import pandas as pd
from ..types import *

if typing.TYPE_CHECKING:
    from ..sequence import Sequence

_MISSING = object()


class TerminalAccessor(Generic[T]):
    def __init__(self, sequence_instance: 'Sequence[T]'):
        self._sequence = sequence_instance

    def list(self) -> List[T]:
        """drain into a flat list"""
        return self._sequence.collect()

    def chunks(self) -> List[Chunk]:
        """drain into a list of chunks"""
        return self._sequence.collect_chunks()

    def elements(self) -> Iterator[T]:
        """lazily iterate single elements, pulling a chunk only when the previous one is used up"""
        for chunk in self._sequence:
            yield from chunk

    def array(self) -> np.ndarray:
        """convert to numpy array"""
        return np.array(self._sequence.collect())

    def series(self) -> pd.Series:
        """convert to pandas series"""
        return pd.Series(self._sequence.collect())

    def df(self) -> pd.DataFrame:
        """convert to pandas dataframe"""
        return pd.DataFrame(self._sequence.collect())

    def count(self, predicate: Optional[Predicate[T]] = None) -> int:
        """count elements"""
        if predicate is None: return sum(len(chunk) for chunk in self._sequence)
        return sum(1 for x in self.elements() if predicate(x))

    def chunk_count(self) -> int:
        """count chunks"""
        return sum(1 for _ in self._sequence)

    def first(self, predicate: Optional[Predicate[T]] = None) -> T:
        """get first element, stopping the pipeline as soon as it is found"""
        found = self._find_first(predicate)
        if found is _MISSING:
            if predicate is None: raise ValueError("sequence contains no elements")
            raise ValueError("no element satisfies the condition")
        return found

    def first_or_default(self, predicate: Optional[Predicate[T]] = None,
                         default: Optional[T] = None) -> Optional[T]:
        """get first element or default"""
        found = self._find_first(predicate)
        return default if found is _MISSING else found

    def _find_first(self, predicate: Optional[Predicate[T]]) -> Any:
        elements = self.elements()
        try:
            for item in elements:
                if predicate is None or predicate(item):
                    return item
            return _MISSING
        finally:
            elements.close()
