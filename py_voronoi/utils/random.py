"""
Random number generation utilities.

Random site placement goes through one module-level numpy Generator so a
seed reproduces the same layout. The geometry and noise code never uses
randomness.
"""

import hashlib
from typing import Optional, Union

import numpy as np

# Global generator instance
_rng: Optional[np.random.Generator] = None


def _seed_to_int(seed: Union[int, str]) -> int:
    if isinstance(seed, int):
        return seed
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "little")


def make_rng(seed: Optional[Union[int, str]] = None) -> np.random.Generator:
    """Create a standalone generator; string seeds are hashed deterministically."""
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(_seed_to_int(seed))


def set_random_seed(seed: Union[int, str]) -> None:
    """
    Reseed the shared generator.

    Args:
        seed: Integer or string seed
    """
    global _rng
    _rng = make_rng(seed)


def get_rng() -> np.random.Generator:
    """
    Get the shared generator, creating an unseeded one on first use.

    Returns:
        numpy Generator
    """
    global _rng
    if _rng is None:
        _rng = make_rng()
    return _rng
