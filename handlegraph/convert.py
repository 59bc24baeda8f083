import time

import networkx as nx
from tqdm import tqdm

from .graph import HandleGraph
from .utils import node_name, node_complement, edge_complement, log_action


def side_name(graph: HandleGraph, node) -> str:
    """Name of a node side in the networkx graph, e.g. '12_+' or '12_-'."""
    return node_name(graph.as_long(graph.forward(node)), graph.is_reverse_node_handle(node))


def to_networkx(graph: HandleGraph,
                include_sequences: bool = True,
                verbose: bool = False,
                log_path: str = None
                ) -> nx.DiGraph:
    """
    Copies a HandleGraph into a networkx DiGraph with two nodes per binode, <id>_+ and <id>_-.
    Every edge of the graph is added together with its complement, so a walk through the
    DiGraph can be read on either strand.
    :param graph: any HandleGraph implementation
    :param include_sequences: store each side's sequence as a lowercase string in the 'sequence'
    node attribute, the _- side holding the reverse complement
    :param verbose: print progress
    :param log_path: if given, time and memory of each phase are appended to this file
    :return: the DiGraph; nodes carry 'direction' (1 or -1), edges carry 'is_representative'
    """
    G = nx.DiGraph()

    start_time = time.time()
    if verbose:
        print("Adding binodes")
    with graph.nodes() as nodes:
        for node in tqdm(nodes, desc='Adding binodes', disable=not verbose):
            forward = graph.forward(node)
            plus = side_name(graph, forward)
            if G.has_node(plus):
                continue
            plus_data = {'direction': 1}
            minus_data = {'direction': -1}
            if include_sequences:
                sequence = graph.sequence_of(forward)
                plus_data['sequence'] = sequence.as_string()
                minus_data['sequence'] = sequence.flip_strand().as_string()
            G.add_node(plus, **plus_data)
            G.add_node(node_complement(plus), **minus_data)
    if log_path:
        log_action(log_path, start_time, "Adding binodes")

    start_time = time.time()
    if verbose:
        print("Adding biedges")
    with graph.edges() as edges:
        for edge in tqdm(edges, desc='Adding biedges', disable=not verbose):
            u, v = side_name(graph, edge.left), side_name(graph, edge.right)
            if G.has_edge(u, v):
                # already added as the complement of an earlier edge
                continue
            G.add_edge(u, v, is_representative=True)
            complement = edge_complement((u, v))
            if not G.has_edge(*complement):
                G.add_edge(*complement, is_representative=False)
    if log_path:
        log_action(log_path, start_time, "Adding biedges")

    if verbose:
        print("Num of binodes:", G.number_of_nodes() // 2)
        print("Num of biedges:", sum(1 for _, _, rep in G.edges(data='is_representative') if rep))
    return G
