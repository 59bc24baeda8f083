import pytest

from handlegraph import (
    AutoClosedIterator,
    EdgeHandle,
    NodeHandle,
    PathGraph,
    PathHandle,
    StepHandle,
    from_bytes,
)


class TrackingIterator(AutoClosedIterator):
    """Iterator over a list that remembers whether it was closed."""

    def __init__(self, items):
        self._inner = AutoClosedIterator.from_iterator(items)
        self.closed = False

    def has_next(self):
        return self._inner.has_next()

    def next(self):
        return self._inner.next()

    def close(self):
        self.closed = True
        self._inner.close()


class InMemoryPathGraph(PathGraph):
    """
    Minimal PathGraph over dicts and lists. as_long packs a node as id << 1 | reverse.
    Every iterator handed out is recorded so tests can check it was closed.
    """

    def __init__(self, sequences: dict, edges: list, paths: dict, circular: tuple = ()):
        self._sequences = {node_id: from_bytes(s) for node_id, s in sequences.items()}
        self._edges = [EdgeHandle(left, right) for left, right in edges]
        self._names = list(paths)
        self._walks = [paths[name] for name in self._names]
        self._circular = set(circular)
        self.opened = []

    def _track(self, items) -> TrackingIterator:
        iterator = TrackingIterator(list(items))
        self.opened.append(iterator)
        return iterator

    def all_closed(self) -> bool:
        return all(iterator.closed for iterator in self.opened)

    def from_long(self, node_id):
        return NodeHandle(node_id >> 1, bool(node_id & 1))

    def as_long(self, node):
        return (node.id << 1) | int(node.reverse)

    def flip(self, node):
        return node.flip()

    def is_reverse_node_handle(self, node):
        return node.reverse

    def edge(self, left_id, right_id):
        return EdgeHandle(self.from_long(left_id), self.from_long(right_id))

    def follow_edges_to_the_right(self, left):
        found = [e for e in self._edges if e.left == left]
        found += [EdgeHandle(e.right.flip(), e.left.flip()) for e in self._edges
                  if e.right.flip() == left and e.left != left]
        return self._track(found)

    def follow_edges_to_the_left(self, right):
        found = [e for e in self._edges if e.right == right]
        found += [EdgeHandle(e.right.flip(), e.left.flip()) for e in self._edges
                  if e.left.flip() == right and e.right != right]
        return self._track(found)

    def edges(self):
        return self._track(self._edges)

    def nodes(self):
        return self._track(NodeHandle(node_id) for node_id in sorted(self._sequences))

    def sequence_of(self, node):
        sequence = self._sequences[node.id]
        return sequence.flip_strand() if node.reverse else sequence

    def nodes_with_sequence(self, sequence):
        return AutoClosedIterator.filter(self.nodes(), lambda node: self.sequence_of(node) == sequence)

    def paths(self):
        return self._track(PathHandle(i) for i in range(len(self._walks)))

    def steps(self):
        return AutoClosedIterator.flat_map(AutoClosedIterator.map(self.paths(), self.steps_of))

    def steps_of(self, path):
        return self._track(StepHandle(path.id, rank) for rank in range(len(self._walks[path.id])))

    def node_of_step(self, step):
        return self._walks[step.path_id][step.rank]

    def path_of_step(self, step):
        return PathHandle(step.path_id)

    def rank_of_step(self, step):
        return step.rank

    def begin_position_of_step(self, step):
        walk = self._walks[step.path_id]
        return sum(len(self.sequence_of(node)) for node in walk[:step.rank])

    def end_position_of_step(self, step):
        return self.begin_position_of_step(step) + len(self.sequence_of(self.node_of_step(step)))

    def step_by_rank_and_path(self, path, rank):
        if not 0 <= rank < len(self._walks[path.id]):
            raise IndexError(f'Path {self.name_of_path(path)} has no rank {rank}')
        return StepHandle(path.id, rank)

    def name_of_path(self, path):
        return self._names[path.id]

    def path_by_name(self, name):
        if name not in self._names:
            return None
        return PathHandle(self._names.index(name))

    def is_circular(self, path):
        return self.name_of_path(path) in self._circular

    def positions_of(self, path):
        return self._track(self.begin_position_of_step(StepHandle(path.id, rank))
                           for rank in range(len(self._walks[path.id])))


@pytest.fixture
def tracking_iterator():
    return TrackingIterator


@pytest.fixture
def graph() -> InMemoryPathGraph:
    #   1: aacg (short known), 2: ggn (short ambiguous)
    #   3: 20 t (short known), 4: 17 bases with an n (long)
    one, two, three, four = NodeHandle(1), NodeHandle(2), NodeHandle(3), NodeHandle(4)
    return InMemoryPathGraph(
        sequences={1: 'aacg', 2: 'GGN', 3: 't' * 20, 4: 'acgtacgtacgtacgtn'},
        edges=[(one, two), (two, three), (one, three.flip()), (three, four)],
        paths={'ref': [one, two, three, four], 'alt': [one, three.flip()]},
        circular=('alt',),
    )


@pytest.fixture
def empty_graph() -> InMemoryPathGraph:
    return InMemoryPathGraph(sequences={}, edges=[], paths={})
