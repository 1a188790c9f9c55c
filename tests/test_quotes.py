import random

import pytest

from winsay import (
    QUOTES_PATH,
    Quote,
    QuotesUnavailableError,
    load_quotes,
    parse_quote_line,
    random_quote,
)


def test_parse_line_with_speaker():
    line = "Don't Panic.|The Hitchhiker's Guide"
    assert parse_quote_line(line) == Quote("Don't Panic.", "The Hitchhiker's Guide")


def test_parse_line_without_speaker():
    assert parse_quote_line("  just text  ") == Quote("just text")


def test_parse_line_with_blank_speaker():
    assert parse_quote_line("moo | ") == Quote("moo", None)


def test_parse_line_splits_on_first_separator():
    assert parse_quote_line("a | b | c") == Quote("a", "b | c")


def test_load_trims_and_drops_blank_lines(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_bytes(b"  first  \r\n\r\n   \nsecond|someone\n")
    assert load_quotes(path) == ["first", "second|someone"]


def test_load_missing_file(tmp_path):
    with pytest.raises(QuotesUnavailableError, match="quotes file missing or empty"):
        load_quotes(tmp_path / "nope.txt")


def test_load_blank_file(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_text("\n   \n\t\n", encoding="utf-8")
    with pytest.raises(QuotesUnavailableError):
        load_quotes(path)


def test_load_undecodable_file(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_bytes(b"\xff\xfe\xfa not utf-8")
    with pytest.raises(QuotesUnavailableError):
        load_quotes(path)


def test_random_quote_single_line(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_text("Moo.|A cow\n", encoding="utf-8")
    assert random_quote(path) == Quote("Moo.", "A cow")


def test_random_quote_is_drawn_from_file(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_text("one\ntwo\nthree\n", encoding="utf-8")
    rng = random.Random(7)
    seen = {random_quote(path, rng).text for _ in range(50)}
    assert seen <= {"one", "two", "three"}
    assert len(seen) > 1


def test_random_quote_is_repeatable_with_seed(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_text("\n".join(f"quote {n}" for n in range(20)), encoding="utf-8")
    first = [random_quote(path, random.Random(42)) for _ in range(3)]
    assert first[0] == first[1] == first[2]


def test_bundled_quotes_file():
    quotes = load_quotes(QUOTES_PATH)
    assert "Don't Panic.|The Hitchhiker's Guide" in quotes
    assert all(parse_quote_line(line).text for line in quotes)


def test_load_strips_byte_order_mark(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_bytes("\ufeffMoo.|Cow\nsecond\n".encode("utf-8"))
    assert load_quotes(path) == ["Moo.|Cow", "second"]
    assert random_quote(path, random.Random(0)) in {Quote("Moo.", "Cow"), Quote("second")}
