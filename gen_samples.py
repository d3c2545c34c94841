import os
import json
import math
import random
from collections import Counter
from datetime import datetime

from alias_sampler import AliasTable, validate_weights

TOTAL_ITERATIONS = 10000
DEFAULT_PAIRS = [('a', 1.0), ('b', 1.0), ('c', 0.5), ('d', 0.0)]

def get_logger(log_file_path, print_to_console=True):
    """
    Returns a logger that writes JSON-formatted logs to file (1 per line).

    Args:
        log_file_path (str): File to append logs to.
        print_to_console (bool): If True, also prints log entries to stdout.

    Returns:
        log_fn (callable): log_fn(message_dict: dict)
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    def log_fn(message_dict):
        message_dict["timestamp"] = datetime.now().isoformat()
        line = json.dumps(message_dict, default=str)
        with open(log_file_path, "a") as f:
            f.write(line + "\n")
        if print_to_console:
            print(line)

    return log_fn

def sample_counts(table, n_draws, rng=None):
    """Tallies `n_draws` samples from `table`."""
    if n_draws < 0:
        raise ValueError(f"n_draws must be non-negative, got {n_draws}.")
    counts = Counter()
    for _ in range(n_draws):
        counts[table.sample(rng)] += 1
    return counts

def empirical_distribution(counts):
    total = sum(counts.values())
    if total == 0:
        return {}
    return {item: c / total for item, c in counts.items()}

def expected_distribution(pairs):
    """
    The distribution an alias table over `pairs` should reproduce,
    i.e. weight / sum(weights) per item, computed from the weights alone.
    Duplicate items accumulate.
    """
    pairs = list(pairs)
    weights = [float(w) for _, w in pairs]
    validate_weights(weights)
    total = math.fsum(weights)
    distribution = {}
    for (item, _), w in zip(pairs, weights):
        distribution[item] = distribution.get(item, 0.0) + w / total
    return distribution

def run(pairs=DEFAULT_PAIRS, n_draws=TOTAL_ITERATIONS, seed=None,
        log_file_path=None, print_to_console=False):
    """
    Builds a table from `pairs`, draws from it and compares the result
    against the target distribution.

    Returns:
        dict with keys "table", "counts", "empirical", "expected".
    """
    logger = None
    if log_file_path is not None:
        logger = get_logger(log_file_path, print_to_console=print_to_console)

    pairs = list(pairs)
    rng = random.Random(seed)
    table = AliasTable(pairs)
    if logger:
        logger({
            "event": "build",
            "n": len(table),
            "probability": list(table.probability),
            "alias": list(table.alias),
        })

    counts = sample_counts(table, n_draws, rng)
    empirical = empirical_distribution(counts)
    expected = expected_distribution(pairs)
    if logger:
        logger({
            "event": "sampled",
            "draws": n_draws,
            "seed": seed,
            "empirical": {str(k): v for k, v in empirical.items()},
            "expected": {str(k): v for k, v in expected.items()},
        })

    return {"table": table,
            "counts": counts,
            "empirical": empirical,
            "expected": expected}


if __name__ == "__main__":
    roulette = AliasTable(DEFAULT_PAIRS)
    for _ in range(10):
        print(roulette.sample())

    result = run(DEFAULT_PAIRS, TOTAL_ITERATIONS)
    print("sample count: ", dict(result["counts"]))
    print("Initial distribution", result["expected"])
    print("Final distribution", result["empirical"])
