import networkx as nx
import random
from alias_sampler import AliasTable

def build_graph(edge_list, directed=False, weight="weight"):
    """
    Input:
    ------
    edge_list: iterable of (u, v) or (u, v, w) tuples. Edges without an
        explicit weight get weight 1.0.
    directed (bool): Build a DiGraph instead of a Graph.
    """
    G = nx.DiGraph() if directed else nx.Graph()
    for edge in edge_list:
        if len(edge) == 3:
            u, v, w = edge
        else:
            u, v = edge
            w = 1.0
        G.add_edge(u, v, **{weight: float(w)})
    return G

def _neighbor_table(neighbors, weights):
    # Nodes whose out-edges all weigh zero are dead ends.
    if not neighbors or not any(weights):
        return None
    return AliasTable(zip(neighbors, weights))

def preprocess_transition_probs(G, p=1.0, q=1.0, weight="weight"):
    """
    Builds one alias table per node (first step of a walk) and one per
    edge (every later step, biased by the return parameter p and the
    in-out parameter q).

    Returns:
        (alias_nodes, alias_edges): dicts keyed by node and by (src, dst).
        Both sample neighbor nodes directly.
    """
    if p <= 0 or q <= 0:
        raise ValueError(f"p and q must be positive, got p={p}, q={q}.")

    alias_nodes = {}
    alias_edges = {}

    for node in G.nodes():
        neighbors = list(G.neighbors(node))
        weights = [G[node][nbr].get(weight, 1.0) for nbr in neighbors]
        table = _neighbor_table(neighbors, weights)
        if table is not None:
            alias_nodes[node] = table

    for src in G.nodes():
        for dst in G.neighbors(src):
            dst_neighbors = list(G.neighbors(dst))
            weights = []
            for nbr in dst_neighbors:
                w = G[dst][nbr].get(weight, 1.0)
                if nbr == src:
                    w = w / p
                elif not G.has_edge(nbr, src):
                    w = w / q
                weights.append(w)
            table = _neighbor_table(dst_neighbors, weights)
            if table is not None:
                alias_edges[(src, dst)] = table

    return alias_nodes, alias_edges

def weighted_single_walk(
        G,
        walk_length,
        start_node,
        alias_nodes,
        alias_edges,
        rng=None
        ):
    if walk_length < 1:
        raise ValueError(f"walk_length must be at least 1, got {walk_length}.")
    if start_node not in G:
        raise KeyError(f"start_node {start_node!r} is not in the graph.")
    walk = [start_node]

    while len(walk) < walk_length:
        curr = walk[-1]
        if len(walk) == 1:
            table = alias_nodes.get(curr)
        else:
            table = alias_edges.get((walk[-2], curr))
        if table is None:
            break
        walk.append(table.sample(rng))
    return walk

def simulate_walks(G, num_walks, walk_length, p=1.0, q=1.0, rng=None,
                   logger=None, weight="weight"):
    """
    Input:
    ------
    num_walks (int): Walks started from every node.
    walk_length (int): Maximum nodes per walk.
    rng: random.Random (or the random module) used both to shuffle start
        nodes and to draw every step. Seed it for reproducible walks.
    logger: Optional callable taking a dict, see gen_samples.get_logger.
    """
    if rng is None:
        rng = random
    alias_nodes, alias_edges \
        = preprocess_transition_probs(G, p, q, weight)
    nodes = list(G.nodes())
    walks = []

    for round_idx in range(num_walks):
        rng.shuffle(nodes)
        for node in nodes:
            walk = weighted_single_walk(
                G, walk_length, node, alias_nodes, alias_edges, rng
                )
            walks.append(walk)
        if logger:
            logger({
                "event": "walk_round",
                "round": round_idx,
                "walks": len(walks),
            })

    return walks
