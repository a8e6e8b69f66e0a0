r"""
'      _
'  ___| |__  _   _ _ __   __ _
' / __| '_ \| | | | '_ \ / _` |
'| (__| | | | |_| | | | | (_| |
' \___|_| |_|\__,_|_| |_|\__, |
'                           |_|
"""

# expose the main classes
from .sequence import (
    IChunkSource,
    Sequence,
    StaticSequence,
    GeneratorSequence,
    TransformSequence,
    OrderedSequence,
    ConcatenatedSequence,
    MergedSequence,
)

# expose the factory functions
from .factories import (
    from_chunks,
    from_iterable,
    from_generator,
    from_pages,
    empty,
    merge_sorted,
    chunq,
    C,
)

# expose supporting types
from .types import (
    SortKey,
    SequenceExhaustedError,
    DEFAULT_CHUNK_SIZE,
)

# define what `import *` does
__all__ = [
    "IChunkSource",
    "Sequence",
    "StaticSequence",
    "GeneratorSequence",
    "TransformSequence",
    "OrderedSequence",
    "ConcatenatedSequence",
    "MergedSequence",
    "from_chunks",
    "from_iterable",
    "from_generator",
    "from_pages",
    "empty",
    "merge_sorted",
    "chunq",
    "C",
    "SortKey",
    "SequenceExhaustedError",
    "DEFAULT_CHUNK_SIZE",
]
