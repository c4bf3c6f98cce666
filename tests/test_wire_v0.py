import pytest

from cryptoballot.errors import FormatError
from cryptoballot.wire import DELIMITER, FIELD_COUNT, join_fields, split_fields


def test_split_five_fields() -> None:
    parts = split_fields(b"a\n\nb\n\nc\n\nd\n\ne")
    assert parts == [b"a", b"b", b"c", b"d", b"e"]


def test_split_accepts_text() -> None:
    assert split_fields("E\n\nr\n\npk\n\nb\n\ns")[0] == b"E"


def test_split_keeps_single_newlines_inside_fields() -> None:
    parts = split_fields(b"a\nx\n\nb\n\nc\n\nd\n\ne")
    assert parts[0] == b"a\nx"


def test_triple_newline_leaves_leading_newline_in_next_field() -> None:
    parts = split_fields(b"a\n\n\nb\n\nc\n\nd\n\ne")
    assert parts[1] == b"\nb"


@pytest.mark.parametrize(
    "raw",
    [b"", b"a\n\nb\n\nc\n\nd", b"a\n\nb\n\nc\n\nd\n\ne\n\nf", b"a\n\nb\n\nc\n\nd\n\ne\n\n"],
)
def test_wrong_field_count(raw: bytes) -> None:
    with pytest.raises(FormatError):
        split_fields(raw)


def test_max_bytes_enforced_before_split() -> None:
    with pytest.raises(FormatError):
        split_fields(b"a\n\nb\n\nc\n\nd\n\ne", max_bytes=5)


def test_join_is_inverse_of_split() -> None:
    fields = [b"E1", b"abc", "pk", b"YmFsbG90", "c2ln"]
    raw = join_fields(fields)
    assert raw.count(DELIMITER) == FIELD_COUNT - 1
    assert split_fields(raw) == [b"E1", b"abc", b"pk", b"YmFsbG90", b"c2ln"]


def test_join_checks_expected_count() -> None:
    with pytest.raises(ValueError):
        join_fields([b"a", b"b"], expected=FIELD_COUNT)


def test_join_rejects_non_text() -> None:
    with pytest.raises(TypeError):
        join_fields([b"a", 3])
