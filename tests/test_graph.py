import pytest

from handlegraph import EdgeHandle, NodeHandle, NodeSequence, NotOnEdge, from_bytes


def test_handles_are_values():
    assert NodeHandle(1) == NodeHandle(1, False)
    assert NodeHandle(1).flip() == NodeHandle(1, True)
    assert NodeHandle(1).flip().flip() == NodeHandle(1)
    assert len({NodeHandle(1), NodeHandle(1), NodeHandle(1, True)}) == 2


def test_from_long_and_as_long_are_inverse(graph):
    for node in (NodeHandle(1), NodeHandle(1, True), NodeHandle(42, True)):
        assert graph.from_long(graph.as_long(node)) == node


def test_forward(graph):
    assert graph.forward(NodeHandle(3, True)) == NodeHandle(3)
    assert graph.forward(NodeHandle(3)) == NodeHandle(3)


def test_equal_nodes(graph):
    assert graph.equal_nodes(NodeHandle(2), NodeHandle(2))
    assert not graph.equal_nodes(NodeHandle(2), NodeHandle(2, True))


def test_edge_between(graph):
    assert graph.edge_between(NodeHandle(1), NodeHandle(2, True)) == EdgeHandle(NodeHandle(1), NodeHandle(2, True))


def test_edge_handle_on_a_single_node(graph):
    forward, reverse = NodeHandle(1), NodeHandle(1, True)
    assert graph.edge_handle(forward, reverse) == EdgeHandle(forward, reverse)
    assert graph.edge_handle(reverse, forward) == EdgeHandle(reverse, forward)


def test_edge_handle_is_idempotent(graph):
    nodes = [NodeHandle(i, reverse) for i in (1, 2) for reverse in (False, True)]
    for left in nodes:
        for right in nodes:
            edge = graph.edge_handle(left, right)
            assert graph.edge_handle(edge.left, edge.right) == edge


def test_traverse_edge_handle(graph):
    edge = graph.edge_handle(NodeHandle(1), NodeHandle(2))
    assert graph.traverse_edge_handle(edge, NodeHandle(1)) == NodeHandle(2)
    assert graph.traverse_edge_handle(edge, NodeHandle(2, True)) == NodeHandle(2)


def test_traverse_edge_handle_from_elsewhere(graph):
    edge = graph.edge_handle(NodeHandle(1), NodeHandle(2))
    with pytest.raises(NotOnEdge) as exc_info:
        graph.traverse_edge_handle(edge, NodeHandle(3))
    message = str(exc_info.value)
    assert '2 False' in message
    assert '4 False' in message
    assert '6 False' in message


def test_has_edge(graph):
    assert graph.has_edge(NodeHandle(1), NodeHandle(2))
    assert graph.has_edge(NodeHandle(3), NodeHandle(1, True))
    assert not graph.has_edge(NodeHandle(2), NodeHandle(1))
    assert graph.has_edge_handle(EdgeHandle(NodeHandle(3), NodeHandle(4)))
    assert graph.all_closed()


def test_follow_edges(graph):
    with graph.follow_edges_to_the_right(NodeHandle(1)) as edges:
        assert {edge.right for edge in edges} == {NodeHandle(2), NodeHandle(3, True)}
    with graph.follow_edges_to_the_left(NodeHandle(3)) as edges:
        assert {edge.left for edge in edges} == {NodeHandle(2)}


def test_counts(graph):
    assert graph.edge_count() == 4
    assert graph.node_count() == 4
    assert graph.total_node_sequence_length() == 4 + 3 + 20 + 17
    assert graph.all_closed()


def test_counts_with_progress(graph):
    assert graph.node_count(progress=True) == 4
    assert graph.edge_count(progress=True) == 4
    assert graph.all_closed()


def test_counts_of_empty_graph(empty_graph):
    assert empty_graph.node_count() == 0
    assert empty_graph.edge_count() == 0
    assert empty_graph.total_node_sequence_length() == 0
    assert empty_graph.all_closed()


def test_sequences(graph):
    assert graph.sequence_of(NodeHandle(2)).as_string() == 'ggn'
    assert graph.sequence_of(NodeHandle(1, True)).as_string() == 'cgtt'
    assert graph.sequence_length_of(NodeHandle(4)) == 17
    assert graph.get_base(NodeHandle(2), 2) == ord('n')


def test_nodes_with_sequence(graph):
    with graph.nodes_with_sequence(from_bytes('t' * 20)) as nodes:
        assert list(nodes) == [NodeHandle(3)]
    assert graph.all_closed()


def test_nodes_with_their_sequence(graph):
    with graph.nodes_with_their_sequence() as pairs:
        first = pairs.next()
        assert first == NodeSequence(NodeHandle(1), from_bytes('aacg'))
    assert graph.all_closed()


def test_closed_when_iteration_fails(graph):

    class Failing(type(graph)):
        def sequence_of(self, node):
            if node.id == 2:
                raise KeyError(node.id)
            return super().sequence_of(node)

    failing = Failing(sequences={1: 'a', 2: 'c', 3: 'g'}, edges=[], paths={})
    with pytest.raises(KeyError):
        failing.total_node_sequence_length()
    assert failing.opened
    assert failing.all_closed()
