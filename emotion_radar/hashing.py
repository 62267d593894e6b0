"""Content hashing for history identity, de-duplication and provenance.

The hash is a 32-bit polynomial rolling hash (``h = h * 31 + unit``) over the
UTF-16 code units of the text, wrapped to a signed 32-bit integer at every
step, then made non-negative.  It is rendered in base 36.  Text lengths
elsewhere in the package count code points; only the hash works on UTF-16
units, so ids agree with any client using the same JavaScript-style hash.

This is an identity fingerprint, not a security primitive.
"""

import json
import struct
from typing import Optional, Sequence, TypeVar

from .lexicon import lexicon_to_dict

T = TypeVar("T")

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _utf16_units(s: str):
    data = s.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)


def simple_hash(s: str) -> int:
    """Deterministic non-negative 32-bit hash of *s*."""
    h = 0
    for unit in _utf16_units(s):
        h = (h * 31 + unit) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
    return abs(h)


def to_base36(n: int) -> str:
    if n < 0:
        return "-" + to_base36(-n)
    if n == 0:
        return "0"
    out = []
    while n:
        n, rem = divmod(n, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def hash_base36(s: str) -> str:
    return to_base36(simple_hash(s))


def hash_lexicon(lexicon) -> str:
    """Fingerprint of a lexicon, stored on history items for provenance."""
    payload = json.dumps(lexicon_to_dict(lexicon), ensure_ascii=False,
                         separators=(",", ":"))
    return hash_base36(payload)


def seeded_pick(pool: Sequence[T], seed: str) -> Optional[T]:
    """Pick an element of *pool* deterministically from *seed*.

    The same seed always selects the same element; ``None`` for an empty pool.
    """
    if not pool:
        return None
    return pool[simple_hash(seed) % len(pool)]
