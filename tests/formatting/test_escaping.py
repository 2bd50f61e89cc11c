from __future__ import annotations

import pytest

from typografer.formatting.escaping import decode_xml_layer, escape_xml


def test_escape_xml_escapes_ampersand_first() -> None:
    assert escape_xml("a & b < c > d") == "a &amp; b &lt; c &gt; d"
    # An existing entity is escaped once, not turned into `&amp;amp;lt;`.
    assert escape_xml("&lt;") == "&amp;lt;"


def test_decode_xml_layer_removes_exactly_one_layer() -> None:
    assert decode_xml_layer("&amp;laquo;x&amp;raquo;") == "&laquo;x&raquo;"
    assert decode_xml_layer("&amp;amp;") == "&amp;"
    assert decode_xml_layer("&lt;b&gt;") == "&lt;b&gt;"
    assert decode_xml_layer("") == ""


@pytest.mark.parametrize("text", ["Tom & Jerry", "a&b<c>d", "&laquo;x&raquo;", "", "<<&&>>"])
def test_escape_decode_cycle_is_stable(text: str) -> None:
    once = decode_xml_layer(escape_xml(text))
    assert decode_xml_layer(escape_xml(once)) == once


def test_escape_decode_roundtrips_ampersands() -> None:
    assert decode_xml_layer(escape_xml("Tom & Jerry &amp; co")) == "Tom & Jerry &amp; co"
