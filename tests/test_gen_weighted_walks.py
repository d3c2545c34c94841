"""Tests for alias-table driven random walks on weighted graphs."""

from __future__ import annotations

import random

import networkx as nx
import pytest

from alias_sampler import AliasTable, InvalidInput
from gen_weighted_walks import (
    build_graph,
    preprocess_transition_probs,
    simulate_walks,
    weighted_single_walk,
)


def test_build_graph_weights():
    """Edges without a weight default to 1.0."""
    G = build_graph([(0, 1, 2.5), (1, 2)])
    assert isinstance(G, nx.Graph)
    assert G[0][1]["weight"] == 2.5
    assert G[1][2]["weight"] == 1.0

    D = build_graph([(0, 1)], directed=True)
    assert isinstance(D, nx.DiGraph)
    assert D.has_edge(0, 1) and not D.has_edge(1, 0)


def test_node_tables_follow_edge_weights():
    G = build_graph([("hub", "a", 3.0), ("hub", "b", 1.0), ("hub", "c", 0.0)])
    alias_nodes, _ = preprocess_transition_probs(G)
    table = alias_nodes["hub"]
    assert isinstance(table, AliasTable)
    dist = dict(zip(table.items, table.marginal_probabilities()))
    assert dist["a"] == pytest.approx(0.75)
    assert dist["b"] == pytest.approx(0.25)
    assert dist["c"] == pytest.approx(0.0)


def test_edge_tables_apply_return_and_inout_bias():
    """Returning is weighted 1/p, moving outward 1/q."""
    # 0 - 1 - 2 with a triangle 1 - 3 - 0
    G = build_graph([(0, 1), (1, 2), (1, 3), (3, 0)])
    _, alias_edges = preprocess_transition_probs(G, p=0.5, q=2.0)
    table = alias_edges[(0, 1)]
    dist = dict(zip(table.items, table.marginal_probabilities()))
    # unnormalized: back to 0 -> 2, to 2 -> 0.5, to 3 -> 1
    assert dist[0] == pytest.approx(2.0 / 3.5)
    assert dist[2] == pytest.approx(0.5 / 3.5)
    assert dist[3] == pytest.approx(1.0 / 3.5)


def test_invalid_bias_parameters():
    G = build_graph([(0, 1)])
    with pytest.raises(ValueError):
        preprocess_transition_probs(G, p=0.0)
    with pytest.raises(ValueError):
        preprocess_transition_probs(G, q=-1.0)


def test_zero_weight_edges_never_walked():
    G = build_graph([("s", "good", 1.0), ("s", "bad", 0.0)])
    alias_nodes, alias_edges = preprocess_transition_probs(G)
    rng = random.Random(3)
    for _ in range(200):
        walk = weighted_single_walk(G, 2, "s", alias_nodes, alias_edges, rng)
        assert walk == ["s", "good"]


def test_walk_stops_at_dead_end():
    """A directed walk ends early at a node with no successors."""
    G = build_graph([(0, 1), (1, 2)], directed=True)
    alias_nodes, alias_edges = preprocess_transition_probs(G)
    walk = weighted_single_walk(G, 10, 0, alias_nodes, alias_edges,
                                random.Random(0))
    assert walk == [0, 1, 2]


def test_walk_arguments_validated():
    G = build_graph([(0, 1)])
    alias_nodes, alias_edges = preprocess_transition_probs(G)
    with pytest.raises(ValueError):
        weighted_single_walk(G, 0, 0, alias_nodes, alias_edges)
    with pytest.raises(KeyError):
        weighted_single_walk(G, 3, 99, alias_nodes, alias_edges)


def test_simulate_walks_reproducible_with_seed():
    G = nx.karate_club_graph()
    w1 = simulate_walks(G, 2, 8, p=0.5, q=2.0, rng=random.Random(11))
    w2 = simulate_walks(G, 2, 8, p=0.5, q=2.0, rng=random.Random(11))
    assert w1 == w2
    assert len(w1) == 2 * G.number_of_nodes()
    for walk in w1:
        assert len(walk) == 8
        for u, v in zip(walk, walk[1:]):
            assert G.has_edge(u, v)


def test_simulate_walks_logs_rounds():
    records = []
    G = build_graph([(0, 1), (1, 2)])
    simulate_walks(G, 3, 4, rng=random.Random(0), logger=records.append)
    assert [r["round"] for r in records] == [0, 1, 2]
    assert records[-1]["walks"] == 9


def test_negative_edge_weight_rejected():
    """A negative edge weight fails loudly instead of making a dead end."""
    G = build_graph([("s", "a", -1.0), ("s", "b", 0.0)])
    with pytest.raises(InvalidInput):
        preprocess_transition_probs(G)


def test_all_zero_edges_make_dead_end():
    G = build_graph([("s", "a", 0.0), ("s", "b", 0.0)])
    alias_nodes, alias_edges = preprocess_transition_probs(G)
    assert "s" not in alias_nodes
    assert weighted_single_walk(G, 5, "s", alias_nodes, alias_edges) == ["s"]
