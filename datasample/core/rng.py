"""Random number generator construction."""

import random


def make_rng(seed: int | None = None) -> random.Random:
    """
    Create the generator used by a single selector invocation.

    Args:
        seed: Fixed seed for a reproducible run. If None, the generator is
            seeded from the operating system's entropy source.

    Returns:
        A fresh ``random.Random`` instance.
    """
    return random.Random(seed)
