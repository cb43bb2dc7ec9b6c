import io
import struct

import pytest
from hypothesis import given, settings, strategies as st

from randtest.chacha20 import ChaCha20, chacha_block, quarter_round, random_key

KEY = bytes(range(32))


def test_quarter_round_reference_vector():
    result = quarter_round(0x11111111, 0x01020304, 0x9B8D6F43, 0x01234567)
    assert result == (0xEA2A92F4, 0xCB1CF8CE, 0x4581472E, 0x5881C4BB)


def test_block_reference_vector():
    cipher = ChaCha20(KEY, bytes.fromhex("000000090000004a00000000"), 1)
    assert cipher.keystream(64)[:16] == bytes.fromhex("10f1e7e4d13b5915500fdd1fa32071c4")


def test_encrypt_reference_vector():
    plaintext = (
        b"Ladies and Gentlemen of the class of '99: If I could offer you "
        b"only one tip for the future, sunscreen would be it."
    )
    cipher = ChaCha20(KEY, bytes.fromhex("000000000000004a00000000"), 1)
    ciphertext = cipher.encrypt(plaintext)
    assert len(ciphertext) == len(plaintext)
    assert ciphertext[:16] == bytes.fromhex("6e2e359a2568f98041ba0728dd0d6981")


@settings(max_examples=25)
@given(st.binary(max_size=300), st.integers(min_value=0, max_value=2**32 - 1))
def test_encrypt_round_trip(data, counter):
    nonce = bytes(12)
    ciphertext = ChaCha20(KEY, nonce, counter).encrypt(data)
    assert ChaCha20(KEY, nonce, counter).encrypt(ciphertext) == data


def test_encrypt_is_xor_with_keystream():
    data = bytes(range(100))
    stream = ChaCha20(KEY, (1, 2, 3)).keystream(100)
    assert ChaCha20(KEY, (1, 2, 3)).encrypt(data) == bytes(a ^ b for a, b in zip(data, stream))


def test_consecutive_calls_continue_the_stream():
    whole = ChaCha20(KEY, (7, 8, 9)).keystream(128)
    cipher = ChaCha20(KEY, (7, 8, 9))
    assert cipher.keystream(64) + cipher.keystream(64) == whole


def test_partial_block_still_consumes_a_counter():
    whole = ChaCha20(KEY, (7, 8, 9)).keystream(128)
    cipher = ChaCha20(KEY, (7, 8, 9))
    cipher.keystream(10)
    assert cipher.keystream(64) == whole[64:]


def test_block_function_matches_keystream():
    key_words = struct.unpack("<8I", KEY)
    state = [0x61707865, 0x3320646E, 0x79622D32, 0x6B206574, *key_words, 5, 1, 2, 3]
    block = struct.pack("<16I", *chacha_block(state))
    assert block == ChaCha20(KEY, (1, 2, 3), 5).keystream(64)


def test_block_rejects_short_state():
    with pytest.raises(ValueError):
        chacha_block([0] * 15)


def test_counter_overflow_carries_into_nonce_word():
    stream = ChaCha20(KEY, (1, 2, 3), 0xFFFFFFFF).keystream(128)
    assert stream[64:] == ChaCha20(KEY, (2, 2, 3), 0).keystream(64)


def test_nonce_bytes_are_little_endian_words():
    nonce_bytes = struct.pack("<3I", 10, 20, 30)
    assert ChaCha20(KEY, nonce_bytes).keystream(64) == ChaCha20(KEY, (10, 20, 30)).keystream(64)


def test_write_keystream_matches_keystream():
    sink = io.BytesIO()
    written = ChaCha20(KEY, (4, 5, 6)).write_keystream(sink, 150)
    assert written == 150
    assert sink.getvalue() == ChaCha20(KEY, (4, 5, 6)).keystream(150)


@pytest.mark.parametrize(
    "key, nonce, counter",
    [(bytes(31), bytes(12), 0), (KEY, bytes(11), 0), (KEY, (1, 2), 0), (KEY, bytes(12), 2**32)],
)
def test_invalid_parameters(key, nonce, counter):
    with pytest.raises(ValueError):
        ChaCha20(key, nonce, counter)


def test_negative_length_rejected():
    with pytest.raises(ValueError):
        ChaCha20(KEY, bytes(12)).keystream(-1)


def test_random_key_length_and_variety():
    first, second = random_key(32), random_key(32)
    assert len(first) == 32
    assert first != second