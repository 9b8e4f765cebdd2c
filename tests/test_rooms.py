"""Tests for room code generation and normalization."""
import pytest

from gyrolaser_core.rooms import (
    ROOM_ID_ALPHABET,
    ROOM_ID_LENGTH,
    generate_room_id,
    normalize_room_id,
    is_valid_room_id
)


def test_alphabet_excludes_ambiguous_characters():
    assert len(set(ROOM_ID_ALPHABET)) == len(ROOM_ID_ALPHABET)
    assert ROOM_ID_ALPHABET == ROOM_ID_ALPHABET.upper()
    for ch in "0O1I":
        assert ch not in ROOM_ID_ALPHABET


def test_generated_codes_use_alphabet():
    for _ in range(500):
        code = generate_room_id()
        assert len(code) == ROOM_ID_LENGTH
        assert all(ch in ROOM_ID_ALPHABET for ch in code)


def test_generated_codes_vary():
    codes = {generate_room_id() for _ in range(50)}
    assert len(codes) > 1


def test_generated_codes_normalize_to_themselves():
    code = generate_room_id()
    assert normalize_room_id(code) == code


@pytest.mark.parametrize("raw, expected", [
    ("ABC234", "ABC234"),
    ("abc234", "ABC234"),
    ("  aBc234\n", "ABC234"),
    # digits outside the generator alphabet are still well-formed codes
    ("A0B1C2", "A0B1C2"),
])
def test_normalize_accepts_and_uppercases(raw, expected):
    assert normalize_room_id(raw) == expected


@pytest.mark.parametrize("raw", [
    "",
    "   ",
    "ABC23",
    "ABC2345",
    "ABC-23",
    "AB C23",
    "ÄBC234",
    "ßabcd",
    "\ufb00abcd",
    None,
    123456,
    ["ABC234"],
])
def test_normalize_rejects(raw):
    assert normalize_room_id(raw) is None
    assert not is_valid_room_id(raw)


@pytest.mark.parametrize("raw", ["abc234", " xyz789 ", "QWERTY"])
def test_normalize_is_idempotent(raw):
    once = normalize_room_id(raw)
    assert once is not None
    assert normalize_room_id(once) == once
