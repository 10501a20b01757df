"""Kasa autokey XOR stream transform applied to every frame on the wire."""

from kasapy.constants import INITIAL_KEY


def _to_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def encrypt(plaintext: bytes | str) -> bytes:
    """Encode a command into a frame.

    Each output byte is the plaintext byte XORed with the previous output
    byte (0xAB for the first one).
    """
    data = _to_bytes(plaintext)
    out = bytearray(len(data))
    key = INITIAL_KEY
    for i, b in enumerate(data):
        key = out[i] = key ^ b
    return bytes(out)


def decrypt(ciphertext: bytes) -> bytes:
    """Decode a received frame. Inverse of :func:`encrypt`."""
    data = _to_bytes(ciphertext)
    out = bytearray(len(data))
    key = INITIAL_KEY
    for i, b in enumerate(data):
        out[i] = key ^ b
        key = b
    return bytes(out)


encode = encrypt
decode = decrypt
