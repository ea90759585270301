import pytest

from uripathfinder.cursor import Cursor
from uripathfinder.expr import (
    ALPHA,
    DIGIT,
    EMPTY,
    HEXDIG,
    Alt,
    Char,
    Lit,
    alternate,
    at_least,
    between,
    char,
    exactly,
    literal,
    optional,
    sequence,
)


def _run(parser, text: bytes) -> tuple[int | None, int]:
    cur = Cursor(text)
    return parser(cur), cur.pos


@pytest.mark.parametrize(
    ("parser", "text", "expected"),
    (
        (ALPHA, b"a", (0, 1)),
        (ALPHA, b"Z", (0, 1)),
        (ALPHA, b"1", (None, 0)),
        (DIGIT, b"7", (0, 1)),
        (DIGIT, b"x", (None, 0)),
        (HEXDIG, b"f", (0, 1)),
        (HEXDIG, b"g", (None, 0)),
        (EMPTY, b"", (0, 0)),
        (char("-._~"), b"~", (0, 1)),
        (literal("::"), b"::1", (0, 2)),
        (literal("::"), b":1", (None, 0)),
        (sequence("%", HEXDIG, HEXDIG), b"%2F", (0, 3)),
        (sequence("%", HEXDIG, HEXDIG), b"%2G", (None, 0)),
        (exactly(2, DIGIT), b"123", (0, 2)),
        (exactly(2, DIGIT), b"1a", (None, 0)),
        (at_least(0, DIGIT), b"abc", (0, 0)),
        (at_least(1, DIGIT), b"abc", (None, 0)),
        (at_least(1, DIGIT), b"12a", (0, 2)),
        (between(1, 4, HEXDIG), b"abcdef", (0, 4)),
        (between(1, 4, HEXDIG), b":", (None, 0)),
        (optional("x"), b"y", (0, 0)),
        (optional("x"), b"x", (0, 1)),
        (alternate(literal("ab"), literal("a")), b"ac", (0, 1)),
    ),
)
def test_parsers(parser, text: bytes, expected: tuple[int | None, int]):
    assert _run(parser, text) == expected


def test_failed_sequence_leaves_cursor():
    cur = Cursor(b"xxab:")
    cur.advance(2)
    assert sequence("ab", "c")(cur) is None
    assert cur.pos == 2


def test_greedy_repetition_does_not_give_back():
    # 1*DIGIT swallows the digit the sequence needs afterwards
    assert _run(sequence(at_least(1, DIGIT), DIGIT), b"123") == (None, 0)


def test_alternate_merges_characters():
    p = alternate("a", char("bc"), Char.range("x", "z"))
    assert isinstance(p, Char)
    assert isinstance(alternate("a", literal("bc")), Alt)


def test_between_rejects_inverted_bounds():
    with pytest.raises(ValueError):
        between(3, 2, DIGIT)


def test_empty_literal_never_matches():
    assert _run(Lit(b""), b"abc") == (None, 0)


def test_classifiers_come_from_cursor():
    def any_high_byte(cur: Cursor) -> int | None:
        if (c := cur.peek()) is not None and c >= 0x80:
            return cur.advance()
        return None

    cur = Cursor(b"\xc3a", alpha=any_high_byte)
    assert ALPHA(cur) == 0
    assert ALPHA(cur) is None
    assert cur.pos == 1


def test_render():
    assert str(Char.range("a", "c")) == "%x61-63"
    assert str(char("a")) == "%x61"
    assert str(at_least(1, DIGIT)) == "1*DIGIT"
    assert str(exactly(4, DIGIT)) == "4DIGIT"
    assert str(between(1, 4, ALPHA)) == "1*4ALPHA"
    assert str(literal("tel:")) == '"tel:"'
