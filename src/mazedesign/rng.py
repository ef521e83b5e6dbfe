from __future__ import annotations

import hashlib
import logging
import random
import secrets
from typing import Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, bytes, None]


def canonicalize_seed(seed: Seed) -> bytes:
    """Convert an int, str or bytes seed into a stable byte string.

    Hex-like strings ("0x1f") are read as integers so that ``"0x1f"`` and ``31``
    produce the same maze.
    """
    if seed is None:
        return b""
    if isinstance(seed, bytes):
        return seed
    if isinstance(seed, bool):
        raise TypeError("Unsupported seed type: %r" % (type(seed),))
    if isinstance(seed, int):
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got {seed}")
        length = (seed.bit_length() + 7) // 8 or 1
        return seed.to_bytes(length, "big", signed=False)
    if isinstance(seed, str):
        s = seed.strip()
        if s.startswith("0x"):
            try:
                return canonicalize_seed(int(s, 16))
            except ValueError:
                return s.encode("utf-8")
        return s.encode("utf-8")
    raise TypeError("Unsupported seed type: %r" % (type(seed),))


def derive_seed(seed: Seed) -> int:
    """Derive a 64-bit integer seed via BLAKE2b."""
    data = canonicalize_seed(seed)
    h = hashlib.blake2b(b"maze-design:" + data, digest_size=8)
    return int.from_bytes(h.digest(), "big", signed=False)


def make_rng(seed: Optional[Seed] = None) -> random.Random:
    """Return a dedicated ``random.Random`` for one maze generation.

    The caller owns the returned generator; nothing here touches the global
    ``random`` state. Without a seed a fresh one is drawn and logged so the
    design can be reproduced later.
    """
    if seed is None:
        raw = secrets.token_bytes(16)
        logger.info("No maze seed provided; generated random seed: %s", raw.hex())
        seed = raw
    else:
        logger.debug("Using maze seed: %r", seed)
    return random.Random(derive_seed(seed))


__all__ = ["Seed", "canonicalize_seed", "derive_seed", "make_rng"]
