"""Constant-time weighted sampling with Vose's Alias Method.

Building a table takes O(n); every draw afterwards takes O(1), two calls to
the random source and two list reads. See
http://www.keithschwarz.com/darts-dice-coins/ for the derivation.
"""
import math
import random

import numpy as np


class InvalidInput(ValueError):
    """Raised when a weighted collection cannot define a distribution."""

    def __init__(self, message, index=None, weight=None):
        super().__init__(message)
        self.index = index
        self.weight = weight


def validate_weights(weights):
    """Returns the total of `weights`, raising InvalidInput if they cannot
    define a distribution."""
    if not weights:
        raise InvalidInput("Cannot build an alias table from an empty collection.")

    total = 0.0
    for i, w in enumerate(weights):
        if math.isnan(w) or math.isinf(w):
            raise InvalidInput(
                f"Weight at index {i} must be finite, got {w!r}.",
                index=i, weight=w,
            )
        if w < 0.0:
            raise InvalidInput(
                f"Weight at index {i} must not be negative, got {w!r}.",
                index=i, weight=w,
            )
        total += w

    if total == 0.0:
        raise InvalidInput("Weights must not all be zero.")
    if math.isinf(total):
        raise InvalidInput("Sum of weights overflows a double.")
    return total


class AliasTable:
    """Immutable alias table over a fixed sequence of weighted items.

    Slot i returns items[i] when a uniform draw falls below probability[i]
    and items[alias[i]] otherwise. The table never holds a random source;
    every sampling call takes one explicitly.
    """

    __slots__ = ("_items", "_probability", "_alias", "_prob_array", "_alias_array")

    def __init__(self, pairs):
        """
        Args:
            pairs (iterable of (value, weight)): Items to sample and their
                non-negative, finite weights. Weights need not sum to 1.

        Raises:
            InvalidInput: if the collection is empty, a weight is negative,
                NaN or infinite, or all weights are zero.
        """
        pairs = list(pairs)
        items = tuple(value for value, _ in pairs)
        weights = [float(w) for _, w in pairs]
        total = validate_weights(weights)

        n = len(weights)
        p = [w / total * n for w in weights]
        probability = [0.0] * n
        alias = list(range(n))
        small, large = [], []

        for i, pi in enumerate(p):
            if pi < 1.0:
                small.append(i)
            else:
                large.append(i)

        while small and large:
            less = small.pop()
            more = large.pop()
            probability[less] = p[less]
            alias[less] = more
            p[more] = (p[more] + p[less]) - 1.0
            if p[more] < 1.0:
                small.append(more)
            else:
                large.append(more)

        # Whatever is left holds exactly its fair share up to rounding.
        for leftover in small + large:
            probability[leftover] = 1.0
            alias[leftover] = leftover

        self._items = items
        self._probability = tuple(probability)
        self._alias = tuple(alias)

        self._prob_array = np.array(probability, dtype=np.float64)
        self._prob_array.setflags(write=False)
        self._alias_array = np.array(alias, dtype=np.int64)
        self._alias_array.setflags(write=False)

    @classmethod
    def build(cls, pairs):
        return cls(pairs)

    @classmethod
    def from_weights(cls, weights):
        """Table whose items are the indices 0..n-1 of `weights`."""
        return cls(enumerate(weights))

    @classmethod
    def from_mapping(cls, weight_map):
        """Table built from a dict {item: weight}, in insertion order."""
        return cls(weight_map.items())

    @property
    def items(self):
        return self._items

    @property
    def probability(self):
        return self._probability

    @property
    def alias(self):
        return self._alias

    def __len__(self):
        return len(self._items)

    def sample_index(self, rng=None):
        """
        Draws one index with probability proportional to its weight.

        Args:
            rng: Anything with randrange(n) and random(), e.g. the random
                module or a random.Random instance. Defaults to the random
                module.

        Returns:
            int: index into `items`.
        """
        if rng is None:
            rng = random
        i = rng.randrange(len(self._probability))
        r = rng.random()
        return i if r < self._probability[i] else self._alias[i]

    def sample(self, rng=None):
        """Draws one item; see sample_index for the rng contract."""
        return self._items[self.sample_index(rng)]

    def sample_array(self, size, rng=None):
        """
        Draws `size` indices at once using a numpy Generator.

        Args:
            size (int): Number of draws.
            rng (numpy.random.Generator): Defaults to np.random.default_rng().

        Returns:
            np.ndarray: int64 indices of shape (size,).
        """
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}.")
        if rng is None:
            rng = np.random.default_rng()
        columns = rng.integers(0, len(self._items), size=size)
        coins = rng.random(size) < self._prob_array[columns]
        return np.where(coins, columns, self._alias_array[columns])

    def sample_many(self, size, rng=None):
        return [self._items[i] for i in self.sample_array(size, rng)]

    def marginal_probabilities(self):
        """
        Returns the probability of drawing each item as implied by the
        table: its own slot's direct hit plus the overflow of every slot
        aliased to it, each slot picked with probability 1/n.
        """
        n = len(self._probability)
        marginal = list(self._probability)
        for j, (pj, aj) in enumerate(zip(self._probability, self._alias)):
            if aj != j:
                marginal[aj] += 1.0 - pj
        return [m / n for m in marginal]

    def __repr__(self):
        return "AliasTable(%r)" % (
            list(zip(self._items, self._probability, self._alias)),)
