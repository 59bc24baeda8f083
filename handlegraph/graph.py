from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from tqdm import tqdm

from .exceptions import NotOnEdge
from .handles import NodeSequence
from .iterators import AutoClosedIterator
from .sequences import Sequence

N = TypeVar('N')
E = TypeVar('E')


class HandleGraph(ABC, Generic[N, E]):
    """
    The topology of a bidirected variation graph: which node sides connect and which
    sequence each node carries.

    Implementations provide the abstract methods; everything else has a default built on
    them. The defaults iterate and are slow, but every one of them closes the iterators it
    opens. Edges are expected to expose .left and .right node handles.
    """

    @abstractmethod
    def from_long(self, node_id: int) -> N:
        """The node handle for a 64-bit value as returned by as_long."""

    @abstractmethod
    def as_long(self, node: N) -> int:
        """A 64-bit value that identifies the node and its orientation."""

    @abstractmethod
    def flip(self, node: N) -> N:
        """The same node read from the other strand."""

    @abstractmethod
    def is_reverse_node_handle(self, node: N) -> bool:
        pass

    @abstractmethod
    def edge(self, left_id: int, right_id: int) -> E:
        """Build an edge handle from the as_long values of both ends."""

    @abstractmethod
    def follow_edges_to_the_right(self, left: N) -> AutoClosedIterator[E]:
        """Edges whose left side is the given node."""

    @abstractmethod
    def follow_edges_to_the_left(self, right: N) -> AutoClosedIterator[E]:
        """Edges whose right side is the given node."""

    @abstractmethod
    def edges(self) -> AutoClosedIterator[E]:
        pass

    @abstractmethod
    def nodes(self) -> AutoClosedIterator[N]:
        pass

    @abstractmethod
    def sequence_of(self, node: N) -> Sequence:
        pass

    @abstractmethod
    def nodes_with_sequence(self, sequence: Sequence) -> AutoClosedIterator[N]:
        pass

    def edge_between(self, left: N, right: N) -> E:
        return self.edge(self.as_long(left), self.as_long(right))

    def forward(self, node: N) -> N:
        if self.is_reverse_node_handle(node):
            return self.flip(node)
        return node

    def equal_nodes(self, a: N, b: N) -> bool:
        """Compare by as_long value; both handles must come from this graph."""
        return self.as_long(a) == self.as_long(b)

    def edge_handle(self, left: N, right: N) -> E:
        """
        The canonical edge joining left to right.
        :param left: node side the edge leaves from
        :param right: node side the edge arrives at
        :return: an edge handle that is stable under edge_handle(edge.left, edge.right)
        """
        left_id = self.as_long(left)
        flipped_right_id = self.as_long(self.flip(right))
        if left_id == flipped_right_id:
            # the edge turns around on a single node side
            flipped_left_id = self.as_long(self.flip(left))
            if flipped_right_id > flipped_left_id:
                return self.edge(flipped_right_id, flipped_left_id)
        return self.edge(left_id, self.as_long(right))

    def traverse_edge_handle(self, edge: E, start: N) -> N:
        """
        The node reached by crossing an edge from one of its sides.
        :param edge: the edge to cross
        :param start: either edge.left, or edge.right on the opposite strand
        """
        if self.equal_nodes(start, edge.left):
            return edge.right
        elif self.equal_nodes(start, self.flip(edge.right)):
            return self.flip(start)
        raise NotOnEdge(f'Cannot view edge {self._describe(edge.left)} -> {self._describe(edge.right)} '
                        f'from non-participant {self._describe(start)}')

    def _describe(self, node: N) -> str:
        return f'{self.as_long(node)} {self.is_reverse_node_handle(node)}'

    def has_edge(self, left: N, right: N) -> bool:
        with self.follow_edges_to_the_right(left) as edges:
            for edge in edges:
                if self.equal_nodes(right, edge.right):
                    return True
        return False

    def has_edge_handle(self, edge: E) -> bool:
        return self.has_edge(edge.left, edge.right)

    def edge_count(self, progress: bool = False) -> int:
        count = 0
        with self.edges() as edges:
            for _ in tqdm(edges, desc='Counting edges', disable=not progress):
                count += 1
        return count

    def node_count(self, progress: bool = False) -> int:
        count = 0
        with self.nodes() as nodes:
            for _ in tqdm(nodes, desc='Counting nodes', disable=not progress):
                count += 1
        return count

    def total_node_sequence_length(self, progress: bool = False) -> int:
        total = 0
        with self.nodes() as nodes:
            for node in tqdm(nodes, desc='Summing sequence lengths', disable=not progress):
                total += len(self.sequence_of(node))
        return total

    def sequence_length_of(self, node: N) -> int:
        return len(self.sequence_of(node))

    def get_base(self, node: N, offset: int) -> int:
        return self.sequence_of(node).byte_at(offset)

    def nodes_with_their_sequence(self) -> AutoClosedIterator[NodeSequence[N]]:
        return AutoClosedIterator.map(self.nodes(), lambda node: NodeSequence(node, self.sequence_of(node)))
