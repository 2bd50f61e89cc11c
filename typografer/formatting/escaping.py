from __future__ import annotations


def escape_xml(text: str) -> str:
    # `&` first, otherwise the entities produced below would be escaped again.
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def decode_xml_layer(text: str) -> str:
    """Undo exactly one layer of transport escaping.

    The service result is XML-escaped inside the SOAP body, so an entity it
    produced arrives as `&amp;laquo;`. Only `&amp;` is decoded, and only once:
    `&amp;amp;` becomes `&amp;`, not `&`.
    """

    return text.replace("&amp;", "&")
