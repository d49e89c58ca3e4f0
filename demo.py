import argparse
import logging
import sys
from typing import Iterable, Optional, TextIO

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.backends import default_backend

from shake import RATES, InvalidVariant, xof


logger = logging.getLogger(__name__)

DEMO_MESSAGE = b"Hello, Dilithium!"


# SHAKE computed by the cryptography package, used to cross-check the pure-Python sponge
class ReferenceShake:
    _ALGORITHMS = {128: hashes.SHAKE128, 256: hashes.SHAKE256}

    def __init__(self, bits: int):
        if isinstance(bits, bool) or not isinstance(bits, int) or bits not in self._ALGORITHMS:
            raise InvalidVariant("unsupported SHAKE variant %r" % (bits,))
        self.bits = bits
        self.backend = default_backend()

    def digest(self, data: bytes, outlen: int) -> bytes:
        # cryptography refuses a zero digest size; the empty output needs no hashing
        if outlen == 0:
            return b""
        h = hashes.Hash(self._ALGORITHMS[self.bits](outlen), backend=self.backend)
        h.update(bytes(data))
        return h.finalize()


def check(bits: int, data: bytes, outlen: int) -> bool:
    ours = xof(bits, data, outlen)
    ref = ReferenceShake(bits).digest(data, outlen)
    if ours != ref:
        logger.error("SHAKE%d mismatch for %d input bytes: %s != %s", bits, len(data), ours.hex(), ref.hex())
        return False
    return True


def _print_hex(out: TextIO, label: str, data: bytes) -> None:
    h = data.hex()
    lines = [h[i:i + 64] for i in range(0, len(h), 64)] or [""]
    out.write("%s: %s\n" % (label, ("\n" + " " * (len(label) + 2)).join(lines)))


def run_demo(out: Optional[TextIO] = None) -> bool:
    """Show both variants and the extendable-output property on a fixed message."""
    if out is None:
        out = sys.stdout
    out.write("Input message: %r (%d bytes)\n" % (DEMO_MESSAGE.decode(), len(DEMO_MESSAGE)))

    _print_hex(out, "SHAKE128 (64 bytes)", xof(128, DEMO_MESSAGE, 64))
    _print_hex(out, "SHAKE256 (64 bytes)", xof(256, DEMO_MESSAGE, 64))

    # Same input, different output lengths
    small = xof(128, DEMO_MESSAGE, 16)
    large = xof(128, DEMO_MESSAGE, 256)
    _print_hex(out, "16-byte output", small)
    _print_hex(out, "256-byte output", large[:32])
    out.write("... (%d more bytes)\n" % (len(large) - 32))

    consistent = large[:len(small)] == small
    out.write("First 16 bytes of 256-byte output match 16-byte output: %s\n" % ("yes" if consistent else "NO"))
    return consistent


def _build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Pure-Python SHAKE128/SHAKE256")
    parser.add_argument("-m", "--message", type=str, help="Message to hash")
    parser.add_argument("-f", "--file", type=str, help="File path to hash")
    parser.add_argument("-b", "--bits", type=int, choices=sorted(RATES), default=128, help="SHAKE variant")
    parser.add_argument("-n", "--length", type=int, default=32, help="Output length in bytes")
    parser.add_argument("--check", action="store_true", help="Compare against the cryptography package")
    parser.add_argument("--demo", action="store_true", help="Run the extendable-output demonstration")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log sponge activity")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = _build_cli()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.length < 0:
        parser.error("--length must be non-negative")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if args.demo:
        return 0 if run_demo() else 1

    if args.file:
        try:
            with open(args.file, "rb") as f:
                data = f.read()
        except OSError as e:
            parser.error("cannot read %s: %s" % (args.file, e.strerror or e))
    elif args.message is not None:
        data = args.message.encode()
    else:
        data = sys.stdin.buffer.read()

    if args.check and not check(args.bits, data, args.length):
        sys.stderr.write("SHAKE%d output does not match the reference\n" % args.bits)
        return 1

    sys.stdout.write(xof(args.bits, data, args.length).hex() + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
