import pytest

from xfskit.layout import XSM_WORD_SIZE
from xfskit.word import Word, WordType, atoi


def test_atoi_reads_leading_number():
    assert atoi("  42abc") == 42
    assert atoi("-17") == -17
    assert atoi("abc") == 0


@pytest.mark.parametrize(
    "text, expected",
    [
        ("-12", WordType.INTEGER),
        ("+7", WordType.INTEGER),
        ("123", WordType.INTEGER),
        ("", WordType.INTEGER),
        ("12a", WordType.STRING),
        ("hello", WordType.STRING),
        ("1-2", WordType.STRING),
    ],
)
def test_kind(text, expected):
    assert Word(text).kind() is expected


def test_store_int_round_trip():
    word = Word()
    word.store_int(-305)
    assert word.as_int() == -305
    assert word.as_str() == "-305"
    assert word.kind() is WordType.INTEGER


def test_store_str_truncates_to_word_size():
    word = Word()
    word.store_str("x" * (XSM_WORD_SIZE + 10))
    assert len(word.as_str()) == XSM_WORD_SIZE


def test_constructor_truncates():
    assert len(Word("y" * 40).as_str()) == XSM_WORD_SIZE


def test_string_reads_as_zero():
    assert Word("hello").as_int() == 0


def test_copy_from_is_independent():
    source = Word("abc")
    target = Word()
    target.copy_from(source)
    assert target == source
    source.store_str("zzz")
    assert target.as_str() == "abc"


def test_encrypt_ignores_order_and_gives_integer():
    first = Word("ab")
    second = Word("ba")
    first.encrypt()
    second.encrypt()
    assert first == second
    assert first.kind() is WordType.INTEGER


def test_encrypt_empty_word():
    word = Word("")
    word.encrypt()
    assert word.as_int() == 0