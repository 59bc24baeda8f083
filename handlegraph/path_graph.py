from abc import abstractmethod
from typing import Generic, Optional, TypeVar

from tqdm import tqdm

from .graph import HandleGraph, N, E
from .iterators import AutoClosedIterator

P = TypeVar('P')
S = TypeVar('S')


class PathGraph(HandleGraph[N, E], Generic[P, S, N, E]):
    """
    A HandleGraph with named paths, each an ordered walk of steps over oriented nodes.
    Ranks count steps from zero; positions count nucleotides from the start of the path.
    """

    @abstractmethod
    def paths(self) -> AutoClosedIterator[P]:
        pass

    @abstractmethod
    def steps(self) -> AutoClosedIterator[S]:
        """Every step of every path."""

    @abstractmethod
    def steps_of(self, path: P) -> AutoClosedIterator[S]:
        """The steps of one path in rank order."""

    @abstractmethod
    def node_of_step(self, step: S) -> N:
        pass

    @abstractmethod
    def path_of_step(self, step: S) -> P:
        pass

    @abstractmethod
    def rank_of_step(self, step: S) -> int:
        pass

    @abstractmethod
    def begin_position_of_step(self, step: S) -> int:
        pass

    @abstractmethod
    def end_position_of_step(self, step: S) -> int:
        pass

    @abstractmethod
    def step_by_rank_and_path(self, path: P, rank: int) -> S:
        pass

    @abstractmethod
    def name_of_path(self, path: P) -> str:
        pass

    @abstractmethod
    def path_by_name(self, name: str) -> Optional[P]:
        pass

    @abstractmethod
    def is_circular(self, path: P) -> bool:
        pass

    @abstractmethod
    def positions_of(self, path: P) -> AutoClosedIterator[int]:
        """The begin position of every step of the path."""

    def steps_of_node_handle(self, node: N) -> AutoClosedIterator[S]:
        return AutoClosedIterator.filter(self.steps(), lambda step: self.equal_nodes(self.node_of_step(step), node))

    def is_empty(self) -> bool:
        """True if the graph has no paths."""
        with self.paths() as paths:
            return not paths.has_next()

    def step_count_in_path(self, path: P, progress: bool = False) -> int:
        count = 0
        with self.steps_of(path) as steps:
            for _ in tqdm(steps, desc=f'Counting steps of {self.name_of_path(path)}', disable=not progress):
                count += 1
        return count

    def step_count(self, progress: bool = False) -> int:
        count = 0
        with self.steps() as steps:
            for _ in tqdm(steps, desc='Counting steps', disable=not progress):
                count += 1
        return count

    def path_count(self) -> int:
        count = 0
        with self.paths() as paths:
            for _ in paths:
                count += 1
        return count

    def step_of_path_by_begin_position(self, path: P, position: int) -> Optional[S]:
        with self.steps_of(path) as steps:
            for step in steps:
                if self.begin_position_of_step(step) == position:
                    return step
        return None

    def step_of_path_by_end_position(self, path: P, position: int) -> Optional[S]:
        with self.steps_of(path) as steps:
            for step in steps:
                if self.end_position_of_step(step) == position:
                    return step
        return None
