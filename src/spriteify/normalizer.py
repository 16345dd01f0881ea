"""Markup normalization helpers for hashing and embedding."""

import hashlib
import logging
import re
import xml.etree.ElementTree as ET

logger = logging.getLogger(__name__)

SVG_NAMESPACE: str = "http://www.w3.org/2000/svg"
XLINK_NAMESPACE: str = "http://www.w3.org/1999/xlink"
XML_NAMESPACE: str = "http://www.w3.org/XML/1998/namespace"

_WHITESPACE = re.compile(r"\s+")
_BETWEEN_TAGS = re.compile(r">\s+<")
_BEFORE_TAG_END = re.compile(r"\s+(/?>)")
_AROUND_EQUALS = re.compile(r"\s*=\s*")


def parse_markup(markup: str) -> ET.Element:
    """Parse markup into an element tree with SVG namespaces removed.

    Args:
        markup: Raw or optimized SVG markup.

    Returns:
        Root element of the normalized tree.

    Raises:
        xml.etree.ElementTree.ParseError: If the markup is not well-formed.
    """
    root = ET.fromstring(markup)
    _normalize_element(root)
    return root


def serialize(element: ET.Element) -> str:
    """Serialize an element deterministically, without its tail text."""
    tail = element.tail
    element.tail = None
    try:
        return ET.tostring(element, encoding="unicode").strip()
    finally:
        element.tail = tail


def compact(markup: str) -> str:
    """Reduce markup to a formatting-independent canonical form.

    Whitespace between tags and before tag ends is dropped, whitespace around
    ``=`` is removed and every other run collapses to one space, so
    ``d="M1 2"`` and ``d="M12"`` stay distinct.
    """
    markup = _BETWEEN_TAGS.sub("><", markup.strip())
    markup = _BEFORE_TAG_END.sub(r"\1", markup)
    markup = _AROUND_EQUALS.sub("=", markup)
    return _WHITESPACE.sub(" ", markup)


def content_digest(markup: str) -> str:
    """Return the formatting-insensitive MD5 digest of markup.

    Args:
        markup: Markup text.

    Returns:
        Hex digest of the canonical form produced by :func:`compact`.
    """
    return hashlib.md5(compact(markup).encode("utf-8")).hexdigest()  # noqa: S324


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from a tag or attribute name."""
    return tag.split("}", 1)[1] if tag.startswith("{") else tag


def _normalize_element(element: ET.Element) -> None:
    """Strip SVG namespaces, drop foreign elements and whitespace-only text.

    Elements from editor namespaces (Inkscape, Sodipodi, RDF metadata) are
    removed; ``xlink`` and ``xml`` attributes keep their conventional prefix.
    """
    element.tag = _svg_tag(element.tag)
    attributes: dict[str, str] = {}
    for key, value in element.attrib.items():
        name = _attribute_name(key)
        if name is not None:
            attributes[name] = value
    element.attrib.clear()
    element.attrib.update(attributes)
    if element.text is not None and not element.text.strip():
        element.text = None

    for child in list(element):
        if not isinstance(child.tag, str):
            # comments and processing instructions
            _drop_child(element, child)
            continue
        if child.tag.startswith("{") and not child.tag.startswith(f"{{{SVG_NAMESPACE}}}"):
            logger.debug(f"Dropping foreign element (tag={child.tag})")
            _drop_child(element, child)
            continue
        _normalize_element(child)
        if child.tail is not None and not child.tail.strip():
            child.tail = None


def _drop_child(parent: ET.Element, child: ET.Element) -> None:
    """Remove ``child`` while keeping any meaningful tail text."""
    if child.tail and child.tail.strip():
        previous = None
        for candidate in parent:
            if candidate is child:
                break
            previous = candidate
        if previous is None:
            parent.text = (parent.text or "") + child.tail
        else:
            previous.tail = (previous.tail or "") + child.tail
    parent.remove(child)


def _svg_tag(tag: str) -> str:
    prefix = f"{{{SVG_NAMESPACE}}}"
    if tag.startswith(prefix):
        return tag[len(prefix) :]
    return tag


def _attribute_name(key: str) -> str | None:
    if not key.startswith("{"):
        return key
    namespace, name = key[1:].split("}", 1)
    if namespace == XLINK_NAMESPACE:
        return f"xlink:{name}"
    if namespace == XML_NAMESPACE:
        return f"xml:{name}"
    if namespace == SVG_NAMESPACE:
        return name
    return None
