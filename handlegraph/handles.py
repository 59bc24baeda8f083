"""
Value handles for graph entities.

Handles carry no identity: two handles with the same fields are the same handle.
Graph implementations may use these or their own types, as long as they are
hashable values.
"""
from dataclasses import dataclass
from typing import Generic, TypeVar

from .sequences import Sequence

N = TypeVar('N')


@dataclass(frozen=True)
class NodeHandle:
    """One side of a node: its id and whether it is read on the reverse strand."""
    id: int
    reverse: bool = False

    def flip(self) -> 'NodeHandle':
        return NodeHandle(self.id, not self.reverse)


@dataclass(frozen=True)
class EdgeHandle(Generic[N]):
    left: N
    right: N


@dataclass(frozen=True)
class PathHandle:
    id: int


@dataclass(frozen=True)
class StepHandle:
    path_id: int
    rank: int


@dataclass(frozen=True)
class NodeSequence(Generic[N]):
    node: N
    sequence: Sequence
