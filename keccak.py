"""
Pure-Python Keccak-f[1600] permutation.

The state is a flat list of 25 unsigned 64-bit lanes. Lane (x, y) lives at
index y*5 + x. All arithmetic is done on Python ints and masked back to
64 bits after every step that could overflow.
"""
from typing import List, Sequence


LANES: int = 25
ROUNDS: int = 24

# 64-bit mask (all ones)
_MASK: int = 0xFFFFFFFFFFFFFFFF

# Round constants for the iota step, one per round
ROUND_CONSTANTS: Sequence[int] = (
    0x0000000000000001, 0x0000000000008082, 0x800000000000808A, 0x8000000080008000, 0x000000000000808B,
    0x0000000080000001, 0x8000000080008081, 0x8000000000008009, 0x000000000000008A, 0x0000000000000088,
    0x0000000080008009, 0x000000008000000A, 0x000000008000808B, 0x800000000000008B, 0x8000000000008089,
    0x8000000000008003, 0x8000000000008002, 0x8000000000000080, 0x000000000000800A, 0x800000008000000A,
    0x8000000080008081, 0x8000000000008080, 0x0000000080000001, 0x8000000080008008,
)

# Rotation offsets for the rho step, indexed like the state (y*5 + x)
ROTATION_OFFSETS: Sequence[int] = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)


def rol64(value: int, n: int) -> int:
    """Rotate a 64-bit word left by n bits."""
    n %= 64
    if n == 0:
        return value & _MASK
    return ((value << n) | (value >> (64 - n))) & _MASK


def keccak_f(s: List[int]) -> List[int]:
    """Apply the 24-round Keccak-f[1600] permutation to s in place.

    Each round runs:
    - Theta: xor every lane with the parities of two neighbouring columns.
    - Rho+Pi: rotate each lane and move it to (y, 2x + 3y) in a scratch list.
    - Chi: the non-linear row step, a ^ (~b & c).
    - Iota: xor the round constant into lane (0, 0).

    The same list is returned for convenience.
    """
    if len(s) != LANES:
        raise ValueError("Keccak-f[1600] state must have %d lanes, got %d" % (LANES, len(s)))
    for rc in ROUND_CONSTANTS:
        # Theta
        c = [s[x] ^ s[x + 5] ^ s[x + 10] ^ s[x + 15] ^ s[x + 20] for x in range(5)]
        d = [c[(x + 4) % 5] ^ rol64(c[(x + 1) % 5], 1) for x in range(5)]
        for i in range(LANES):
            s[i] ^= d[i % 5]
        # Rho and Pi
        b = [0] * LANES
        for y in range(5):
            for x in range(5):
                src = x + 5 * y
                b[y + 5 * ((2 * x + 3 * y) % 5)] = rol64(s[src], ROTATION_OFFSETS[src])
        # Chi
        for y in range(5):
            row = b[5 * y:5 * y + 5]
            for x in range(5):
                s[x + 5 * y] = (row[x] ^ ((~row[(x + 1) % 5]) & row[(x + 2) % 5])) & _MASK
        # Iota
        s[0] ^= rc
    return s


def format_state(s: Sequence[int]) -> str:
    """Render the state as five rows (y = 0..4) of five hex lanes."""
    return "\n".join(
        " ".join("%016x" % s[x + 5 * y] for x in range(5)) for y in range(5)
    )
