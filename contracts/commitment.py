# contracts/commitment.py
# commitment = sha256(uint64_be(choice) + b"|" + uint64_be(nonce)), same bytes the app hashes on reveal
import hashlib
import secrets

SEPARATOR = b"|"
DIGEST_SIZE = 32
UINT64_MAX = 2**64 - 1


def encode_uint64(value: int) -> bytes:
    """Big-endian 8-byte encoding, identical to TEAL itob."""
    if not 0 <= value <= UINT64_MAX:
        raise ValueError(f"{value} does not fit in uint64")
    return int(value).to_bytes(8, "big")


def compute_commitment(choice: int, nonce: int) -> bytes:
    """
    Digest to submit with commit. Pure; the choice is not checked against
    Rock/Paper/Scissors here, that only happens on reveal.
    """
    return hashlib.sha256(encode_uint64(choice) + SEPARATOR + encode_uint64(nonce)).digest()


def new_nonce() -> int:
    return secrets.randbits(64)
