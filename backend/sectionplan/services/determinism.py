from __future__ import annotations

DEFAULT_SEED = 42

_HASH_MULTIPLIER = 31
_HASH_MODULUS = 2**32


def normalize_seed(seed: int | None) -> int:
    if not seed or seed <= 0:
        return DEFAULT_SEED
    return seed


def tie_break_hash(seed: int, faculty_id: str, section_id: str) -> int:
    """Polynomial rolling hash of ``"{seed}:{faculty}:{section}"``.

    Only used as the last ranking key, so equal scores resolve the same
    way on every run with the same seed.
    """
    value = 0
    for char in f"{seed}:{faculty_id}:{section_id}":
        value = (value * _HASH_MULTIPLIER + ord(char)) % _HASH_MODULUS
    return value
