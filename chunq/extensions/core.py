from __future__ import annotations
import typing
from ..types import *

if typing.TYPE_CHECKING:
    from ..sequence import Sequence, TransformSequence, OrderedSequence, ConcatenatedSequence, MergedSequence


def _require_sequences(operation: str, others: typing.Tuple[Any, ...]) -> None:
    from ..sequence import Sequence
    for other in others:
        if not isinstance(other, Sequence):
            raise TypeError(f"{operation} expects Sequence arguments, got {type(other).__name__}")


class _CoreOperations(Generic[T]):
    def filter(self: 'Sequence[T]', predicate: Predicate[T]) -> 'TransformSequence[T]':
        """keep elements matching a predicate, chunk by chunk"""
        from ..sequence import TransformSequence
        return TransformSequence(self, predicate, TransformSequence.FILTER)

    def map(self: 'Sequence[T]', transform: Selector[T, U]) -> 'TransformSequence[U]':
        """project each element to a new form, chunk by chunk"""
        from ..sequence import TransformSequence
        return TransformSequence(self, transform, TransformSequence.MAP)

    def order_by(self: 'Sequence[T]', *key_specs: Any) -> 'OrderedSequence[T]':
        """
        sort by one or more keys. each spec is a selector (ascending), a
        (selector, descending) pair, or a SortKey. earlier specs take priority.
        """
        from ..sequence import OrderedSequence
        return OrderedSequence(self, coerce_sort_keys(key_specs))

    def order_by_descending(self: 'Sequence[T]', key_selector: KeySelector[T, K]) -> 'OrderedSequence[T]':
        """sort elements by a key in descending order"""
        from ..sequence import OrderedSequence
        return OrderedSequence(self, [SortKey(key_selector, True)])

    def concat(self: 'Sequence[T]', *others: 'Sequence[T]') -> 'ConcatenatedSequence[T]':
        """this sequence followed by each of the others, chunk boundaries intact"""
        from ..sequence import ConcatenatedSequence
        _require_sequences("concat", others)
        return ConcatenatedSequence([self, *others])

    def merge(self: 'Sequence[T]', *others: 'Sequence[T]', keys: Iterable[Any]) -> 'MergedSequence[T]':
        """
        streaming merge of this sequence with others, all pre-sorted by the same keys.
        keys takes the same specs as order_by().
        """
        from ..sequence import MergedSequence
        _require_sequences("merge", others)
        return MergedSequence([self, *others], coerce_sort_keys(keys))
