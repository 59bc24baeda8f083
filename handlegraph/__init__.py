from .sequences import (
    Sequence,
    SequenceType,
    ShortKnownSequence,
    ShortAmbiguousSequence,
    LongSequence,
    from_bytes,
    from_string,
    from_long,
    long_reference,
    variant_of,
    sequence_hash,
    equal_by_bytes,
)
from .iterators import AutoClosedIterator
from .handles import NodeHandle, EdgeHandle, PathHandle, StepHandle, NodeSequence
from .graph import HandleGraph
from .path_graph import PathGraph
from .convert import to_networkx
from .exceptions import HandleGraphError, InvalidNucleotide, LengthOverflow, Exhausted, NotOnEdge

__version__ = "0.1.0"

__all__ = [
    'Sequence',
    'SequenceType',
    'ShortKnownSequence',
    'ShortAmbiguousSequence',
    'LongSequence',
    'from_bytes',
    'from_string',
    'from_long',
    'long_reference',
    'variant_of',
    'sequence_hash',
    'equal_by_bytes',
    'AutoClosedIterator',
    'NodeHandle',
    'EdgeHandle',
    'PathHandle',
    'StepHandle',
    'NodeSequence',
    'HandleGraph',
    'PathGraph',
    'to_networkx',
    'HandleGraphError',
    'InvalidNucleotide',
    'LengthOverflow',
    'Exhausted',
    'NotOnEdge',
]
