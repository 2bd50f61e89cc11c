from __future__ import annotations

import time

import pytest

from typografer.formatting.config import MAX_LEN
from typografer.formatting.rules import clean_paragraphs, normalize_br


def test_normalize_br_collapses_runs() -> None:
    assert normalize_br("a<br/> <br/><br/>b", "<br/>") == "a<br/>b"


def test_normalize_br_strips_trailing_break() -> None:
    assert normalize_br("x<br/>  ", "<br/>") == "x"
    assert normalize_br("x <br/>\n", "<br/>") == "x"


def test_normalize_br_removes_space_before_break() -> None:
    assert normalize_br("a \t<br/>\nb", "<br/>") == "a<br/>\nb"


def test_normalize_br_case_insensitive() -> None:
    assert normalize_br("a<BR/><br/>b", "<br/>") == "a<BR/>b"


def test_normalize_br_tag_is_literal() -> None:
    assert normalize_br("a(br)+(br)+b(br)+", "(br)+") == "a(br)+b"
    assert normalize_br("abrbrb", "(br)+") == "abrbrb"
    assert normalize_br("a.|.b", ".|.") == "a.|.b"


@pytest.mark.parametrize(("text", "br"), [("", "<br/>"), ("a  b", ""), ("no breaks", "<br/>")])
def test_normalize_br_noop(text: str, br: str) -> None:
    assert normalize_br(text, br) == text


def test_clean_paragraphs_trims_and_collapses() -> None:
    assert clean_paragraphs("<p>\n  hello   world  \n</p>", "<p>", "</p>", "<br />") == "<p>hello world</p>"


def test_clean_paragraphs_drops_break_before_close() -> None:
    assert clean_paragraphs("<p>a<br /> \n</p>", "<p>", "</p>", "<br />") == "<p>a</p>"


def test_clean_paragraphs_keeps_space_between_paragraphs() -> None:
    text = "<p> a  b </p>\n\n<p>c\td</p>"
    assert clean_paragraphs(text, "<p>", "</p>", "<br />") == "<p>a b</p>\n\n<p>c d</p>"


def test_clean_paragraphs_delimiters_are_literal() -> None:
    text = "[[  a   b ]] [[c]]"
    assert clean_paragraphs(text, "[[", "]]", "(br)") == "[[a b]] [[c]]"


def test_clean_paragraphs_collapses_real_whitespace_only() -> None:
    text = "<p>a\\s\\sb</p>"
    assert clean_paragraphs(text, "<p>", "</p>", "<br />") == text


@pytest.mark.parametrize(
    ("text", "p_open", "p_close"),
    [("", "<p>", "</p>"), ("a  b", "", "</p>"), ("a  b", "<p>", ""), ("a   b", "<p>", "</p>")],
)
def test_clean_paragraphs_noop(text: str, p_open: str, p_close: str) -> None:
    assert clean_paragraphs(text, p_open, p_close, "<br />") == text


def test_long_whitespace_runs_are_linear() -> None:
    gap = " " * (MAX_LEN - 8)
    started = time.perf_counter()

    assert normalize_br("a" + gap + "b", "<br/>") == "a" + gap + "b"
    assert normalize_br("a" + gap + "<br/>b", "<br/>") == "a<br/>b"
    assert normalize_br("a" + gap + "<br/>" + gap, "<br/>") == "a"
    assert clean_paragraphs("<p>a" + gap + "b</p>", "<p>", "</p>", "<br />") == "<p>a b</p>"
    assert clean_paragraphs("<p>a" + gap + "<br />" + gap + "</p>", "<p>", "</p>", "<br />") == "<p>a</p>"

    # A quadratic scan over these runs takes tens of seconds.
    assert time.perf_counter() - started < 5.0
