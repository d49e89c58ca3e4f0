"""
Pure-Python SHAKE128 / SHAKE256 (FIPS 202 extendable-output functions).

A ``Sponge`` owns the 25-lane Keccak state, a byte cursor into the rate
region and a phase. Bytes are xored into and read out of the lanes through
explicit little-endian helpers, so nothing depends on platform byte order.

Typical use goes through the one-shot helpers:

    xof_128(b"hello", 32)
    xof_256(b"hello", 64)

The sponge can also be driven by hand when the input arrives in pieces:

    s = Sponge(256).absorb(b"hel").absorb(b"lo")
    s.finalize()
    out = s.squeeze(32) + s.squeeze(32)   # same as xof_256(b"hello", 64)
"""
import enum
import logging
from typing import Dict, List

from keccak import LANES, format_state, keccak_f


logger = logging.getLogger(__name__)

STATE_BYTES: int = 8 * LANES  # 200

# Rate in bytes for each supported security level; capacity is the rest
RATES: Dict[int, int] = {
    128: 168,  # 1344 bits, capacity 256 bits
    256: 136,  # 1088 bits, capacity 512 bits
}

# Domain separation suffix for SHAKE, already merged with the first pad bit
SHAKE_SUFFIX: int = 0x1F
# Final bit of the multi-rate padding
PAD_LAST: int = 0x80


class InvalidVariant(ValueError):
    """Raised when a sponge is requested for an unsupported security level."""


class InvalidTransition(ValueError):
    """Raised when absorb/finalize/squeeze are called out of order."""


class Phase(enum.Enum):
    ABSORBING = "absorbing"
    FINALIZED = "finalized"
    SQUEEZING = "squeezing"


def _check_length(n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError("output length must be an int, got %s" % type(n).__name__)
    if n < 0:
        raise ValueError("output length must be non-negative, got %d" % n)
    return n


class Sponge:
    """Keccak sponge configured for SHAKE128 or SHAKE256.

    Lifecycle: ``absorb`` any number of times, ``finalize`` exactly once,
    then ``squeeze`` any number of times. Successive squeezes continue the
    same output stream. Anything else raises ``InvalidTransition``.
    """

    def __init__(self, bits: int) -> None:
        if isinstance(bits, bool) or not isinstance(bits, int) or bits not in RATES:
            raise InvalidVariant("unsupported SHAKE variant %r, expected one of %s" % (bits, sorted(RATES)))
        self._bits: int = bits
        self._rate: int = RATES[bits]
        # 5x5 lanes of 64-bit words, stored as a flat list of 25 ints
        self._s: List[int] = [0] * LANES
        # Bytes of the rate region written (absorbing) or read (squeezing) since the last permutation
        self._pos: int = 0
        self._phase: Phase = Phase.ABSORBING

    def __repr__(self) -> str:
        return "Sponge(bits=%d, phase=%s, position=%d)" % (self._bits, self._phase.value, self._pos)

    @property
    def bits(self) -> int:
        return self._bits

    @property
    def rate(self) -> int:
        return self._rate

    @property
    def position(self) -> int:
        return self._pos

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def lanes(self) -> List[int]:
        """A copy of the 25 state lanes."""
        return list(self._s)

    def state_bytes(self) -> bytes:
        """The full 200-byte state in little-endian lane order."""
        return b"".join(lane.to_bytes(8, "little") for lane in self._s)

    # Byte view of the lanes. Byte i is bits 8*(i % 8) .. 8*(i % 8)+7 of lane i // 8.
    def _xor_byte(self, i: int, value: int) -> None:
        self._s[i >> 3] ^= value << (8 * (i & 7))

    def _get_byte(self, i: int) -> int:
        return (self._s[i >> 3] >> (8 * (i & 7))) & 0xFF

    def _permute(self) -> None:
        keccak_f(self._s)
        self._pos = 0

    def absorb(self, data: bytes) -> "Sponge":
        """Xor data into the rate region, permuting each time it fills up.

        The result only depends on the concatenation of everything absorbed,
        not on how it was split between calls. Returns self so calls chain.
        """
        if self._phase is not Phase.ABSORBING:
            raise InvalidTransition("cannot absorb after finalize")
        if isinstance(data, str):
            raise TypeError("absorb() needs a bytes-like object, not str")
        view = memoryview(data)
        if not view.c_contiguous:
            view = memoryview(view.tobytes())
        view = view.cast("B")
        logger.debug("SHAKE%d absorbing %d bytes at position %d", self._bits, len(view), self._pos)
        for byte in view:
            self._xor_byte(self._pos, byte)
            self._pos += 1
            if self._pos == self._rate:
                logger.debug("SHAKE%d rate full, applying permutation", self._bits)
                self._permute()
        return self

    def finalize(self) -> None:
        """Apply SHAKE padding and switch the sponge to squeezing.

        The suffix 0x1F goes at the cursor and 0x80 into the last rate byte.
        Both are xored, so when the cursor sits on the last byte it ends up
        holding data ^ 0x1F ^ 0x80.
        """
        if self._phase is not Phase.ABSORBING:
            raise InvalidTransition("sponge already finalized")
        if self._pos == self._rate:
            self._permute()
        self._xor_byte(self._pos, SHAKE_SUFFIX)
        self._xor_byte(self._rate - 1, PAD_LAST)
        self._permute()
        self._phase = Phase.FINALIZED
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("SHAKE%d finalized, state:\n%s", self._bits, format_state(self._s))

    def squeeze(self, n: int) -> bytes:
        """Read the next n output bytes.

        A permutation runs only when another byte is needed after the rate
        region has been fully read, so squeeze(a) + squeeze(b) equals
        squeeze(a + b) on a fresh sponge.
        """
        _check_length(n)
        if self._phase is Phase.ABSORBING:
            raise InvalidTransition("finalize must be called before squeeze")
        self._phase = Phase.SQUEEZING
        logger.debug("SHAKE%d squeezing %d bytes at position %d", self._bits, n, self._pos)
        out = bytearray(n)
        for i in range(n):
            if self._pos == self._rate:
                logger.debug("SHAKE%d rate exhausted, applying permutation", self._bits)
                self._permute()
            out[i] = self._get_byte(self._pos)
            self._pos += 1
        return bytes(out)


def xof(bits: int, data: bytes, outlen: int) -> bytes:
    """One-shot SHAKE: absorb data, finalize and return outlen bytes."""
    _check_length(outlen)
    sponge = Sponge(bits)
    sponge.absorb(data)
    sponge.finalize()
    return sponge.squeeze(outlen)


def xof_128(data: bytes, outlen: int) -> bytes:
    """SHAKE128 of data, outlen bytes long."""
    return xof(128, data, outlen)


def xof_256(data: bytes, outlen: int) -> bytes:
    """SHAKE256 of data, outlen bytes long."""
    return xof(256, data, outlen)
