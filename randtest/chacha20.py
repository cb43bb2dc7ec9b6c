"""ChaCha20 block function, stream cipher and keystream generator."""

from __future__ import annotations

import os
import struct
from typing import BinaryIO, Iterator, Sequence

_MASK = 0xFFFFFFFF
_CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)  # "expand 32-byte k"
_ROUNDS = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)
BLOCK_SIZE = 64
KEY_SIZE = 32
NONCE_SIZE = 12


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) & _MASK) | (value >> (32 - shift))


def quarter_round(a: int, b: int, c: int, d: int) -> tuple[int, int, int, int]:
    """Apply the ChaCha quarter round to four 32-bit words."""
    a = (a + b) & _MASK
    d = _rotl(d ^ a, 16)
    c = (c + d) & _MASK
    b = _rotl(b ^ c, 12)
    a = (a + b) & _MASK
    d = _rotl(d ^ a, 8)
    c = (c + d) & _MASK
    b = _rotl(b ^ c, 7)
    return a, b, c, d


def chacha_block(state: Sequence[int]) -> list[int]:
    """Run 20 rounds over a 16-word state and add the input back in."""
    if len(state) != 16:
        raise ValueError("ChaCha20 state must hold 16 words")
    words = [word & _MASK for word in state]
    working = list(words)
    for _ in range(10):
        for a, b, c, d in _ROUNDS:
            working[a], working[b], working[c], working[d] = quarter_round(
                working[a], working[b], working[c], working[d]
            )
    return [(out + inp) & _MASK for out, inp in zip(working, words)]


def random_key(size: int = KEY_SIZE) -> bytes:
    """Return ``size`` bytes from the operating system's random source."""
    if size < 0:
        raise ValueError("key size must not be negative")
    return os.urandom(size)


def _nonce_words(nonce: bytes | bytearray | Sequence[int]) -> tuple[int, int, int]:
    if isinstance(nonce, (bytes, bytearray, memoryview)):
        raw = bytes(nonce)
        if len(raw) != NONCE_SIZE:
            raise ValueError(f"nonce must be {NONCE_SIZE} bytes")
        return struct.unpack("<3I", raw)
    words = tuple(int(word) for word in nonce)
    if len(words) != 3 or any(not 0 <= word <= _MASK for word in words):
        raise ValueError("nonce must be three 32-bit words")
    return words  # type: ignore[return-value]


class ChaCha20:
    """ChaCha20 with a 256-bit key, 96-bit nonce and 32-bit block counter."""

    def __init__(
        self,
        key: bytes,
        nonce: bytes | Sequence[int],
        counter: int = 0,
    ) -> None:
        key = bytes(key)
        if len(key) != KEY_SIZE:
            raise ValueError(f"key must be {KEY_SIZE} bytes")
        if not 0 <= counter <= _MASK:
            raise ValueError("counter must fit in 32 bits")
        self.key = key
        self.nonce = _nonce_words(nonce)
        self.counter = counter

    def _initial_state(self) -> list[int]:
        return [*_CONSTANTS, *struct.unpack("<8I", self.key), self.counter, *self.nonce]

    def _blocks(self, length: int) -> Iterator[bytes]:
        if length < 0:
            raise ValueError("length must not be negative")
        state = self._initial_state()
        for offset in range(0, length, BLOCK_SIZE):
            block = struct.pack("<16I", *chacha_block(state))
            self.counter = (self.counter + 1) & _MASK
            state[12] = self.counter
            if state[12] == 0:
                state[13] = (state[13] + 1) & _MASK
            yield block[: min(BLOCK_SIZE, length - offset)]

    def keystream(self, length: int) -> bytes:
        """Return the next ``length`` keystream bytes, advancing the counter."""
        return b"".join(self._blocks(length))

    def encrypt(self, data: bytes) -> bytes:
        """XOR ``data`` with the keystream; the same call decrypts."""
        data = bytes(data)
        if not data:
            return b""
        stream = self.keystream(len(data))
        mixed = int.from_bytes(data, "big") ^ int.from_bytes(stream, "big")
        return mixed.to_bytes(len(data), "big")

    def write_keystream(self, stream: BinaryIO, length: int) -> int:
        """Write ``length`` keystream bytes to a binary stream; return the count."""
        written = 0
        for block in self._blocks(length):
            stream.write(block)
            written += len(block)
        return written