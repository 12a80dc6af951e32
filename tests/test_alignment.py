import pytest

from booking_decoder.alignment import (
    detect_delimiter,
    first_unaligned,
    is_aligned,
    remove_aligned,
    replace_recursive,
)


@pytest.mark.parametrize(
    ("purpose", "expected"),
    [
        ("Miete@SEPA-DE Miete", "@"),
        ("Miete  Januar", "  "),
        ("Barauszahlung", "  "),
    ],
)
def test_detect_delimiter(purpose, expected):
    assert detect_delimiter(purpose) == expected


@pytest.mark.parametrize(
    ("pos", "period", "delimiter_len", "aligned"),
    [
        (0, 22, 1, True),
        (10, 22, 1, False),
        (22, 22, 1, True),
        (23, 22, 1, False),
        (44, 22, 1, False),
        (45, 22, 1, True),
        (68, 22, 1, True),
        (27, 27, 1, True),
        (54, 27, 2, False),
        (56, 27, 2, True),
    ],
)
def test_is_aligned(pos, period, delimiter_len, aligned):
    assert is_aligned(pos, period, delimiter_len) is aligned


def test_delimiter_at_period_is_padding():
    text = "A" * 22 + "@" + "rest"
    assert remove_aligned(text, "@", 22) == "A" * 22 + "rest"
    assert first_unaligned(text, "@", 22) is None


def test_delimiter_inside_column_is_a_separator():
    text = "A" * 10 + "@" + "B"
    assert remove_aligned(text, "@", 22) == text
    assert first_unaligned(text, "@", 22) == 10


def test_padding_repeats_every_full_column():
    # Raw offsets 22 and 45 are both padding.
    text = "A" * 22 + "@" + "B" * 22 + "@" + "C"
    assert first_unaligned(text, "@", 22) is None
    assert remove_aligned(text, "@", 22) == "A" * 22 + "B" * 22 + "C"


def test_first_unaligned_skips_padding_before_separator():
    text = "A" * 22 + "@" + "BBB" + "@" + "C"
    assert first_unaligned(text, "@", 22) == 26


def test_leading_delimiter_is_never_a_separator():
    assert first_unaligned("@abc", "@", 22) is None
    assert remove_aligned("@abc", "@", 22) == "abc"


def test_consecutive_delimiters_are_separators():
    assert remove_aligned("ab@@cd", "@", 22) == "ab@@cd"


def test_multiple_of_period_without_padding_is_a_separator():
    text = "X" * 44 + "@Y"
    assert first_unaligned(text, "@", 22) == 44
    assert remove_aligned(text, "@", 22) == text


def test_padding_run_continues_only_column_by_column():
    # Padding at raw offsets 22 and 45 would continue at 68, not 69.
    text = "A" * 22 + "@" + "B" * 22 + "@" + "C" * 23 + "@D"
    assert first_unaligned(text, "@", 22) == 69
    assert remove_aligned(text, "@", 22) == "A" * 22 + "B" * 22 + "C" * 23 + "@D"


def test_delimiter_right_after_padding_is_dropped():
    assert remove_aligned("A" * 22 + "@@x", "@", 22) == "A" * 22 + "x"


def test_no_delimiter():
    assert first_unaligned("plain text", "@", 22) is None
    assert remove_aligned("plain text", "@", 22) == "plain text"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "@",
        "@@@",
        "ab@@cd",
        "A" * 22 + "@@" + "B",
        "A" * 22 + "@" + "B" * 23 + "@" + "C",
        "A" * 21 + "@" + "@" + "B" * 21 + "@C@D",
        "EREF+1234@MREF+X" * 5,
        "Stromabschlag Vertragsnumme@r 4711",
    ],
)
@pytest.mark.parametrize("period", [22, 27])
def test_remove_aligned_is_idempotent(text, period):
    once = remove_aligned(text, "@", period)
    assert remove_aligned(once, "@", period) == once


def test_remove_aligned_two_space_delimiter():
    text = "X" * 27 + "  " + "Y" * 3 + "  " + "Z"
    assert remove_aligned(text, "  ", 27) == "X" * 27 + "YYY  Z"


@pytest.mark.parametrize(
    ("text", "old", "new", "expected"),
    [
        ("a    b", "  ", " ", "a b"),
        ("a     b", "  ", " ", "a b"),
        ("a@b@@c", "@", " ", "a b  c"),
        ("abc", "@", " ", "abc"),
    ],
)
def test_replace_recursive(text, old, new, expected):
    assert replace_recursive(text, old, new) == expected
