"""Conversion between raw XML and the attributed tree consumed by the mappers.

Each element becomes a ``dict``: attributes are string values stored under
their (prefixed) name, trimmed text content is stored under ``"$t"`` and child
elements are stored under their (prefixed) tag as a list of nodes, even when
they occur once. The document itself is ``{root_tag: [root_node]}``.
"""

from typing import Any

from lxml import etree

from .config import ParserConfig


TEXT_KEY = "$t"

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


def xml_to_tree(xml: str | bytes, config: ParserConfig | None = None) -> dict[str, Any]:
    """Parse raw XML into an attributed tree.

    Args:
        xml: Raw XML document
        config: Parser configuration (encoding, recovery...)

    Returns:
        Attributed tree rooted at the document element

    Raises:
        etree.XMLSyntaxError: If the markup is malformed
        ValueError: If the document is empty or cannot be decoded
    """
    config = config or ParserConfig()
    data = xml.encode(config.encoding) if isinstance(xml, str) else xml
    parser = etree.XMLParser(
        recover=config.recover_on_error,
        # bytes keep the encoding they declare
        encoding=config.encoding if isinstance(xml, str) else None,
        remove_blank_text=config.remove_blank_text,
        remove_comments=True,
        remove_pis=True,
        resolve_entities=False,
        no_network=True,
        huge_tree=config.huge_tree,
    )
    root = etree.fromstring(data, parser=parser)  # ruff: noqa: S320
    if root is None:
        raise ValueError("XML document has no root element")
    return {_tag_name(root): [_element_to_node(root, {})]}


def tree_to_xml(fragment: dict[str, Any], namespaces: dict | None = None) -> str:
    """Serialize the child elements of an attributed-tree node back to XML.

    Attributes and text of ``fragment`` itself are not part of the output,
    only its child element lists are. Namespaces the output relies on are
    declared on each top-level element, unused ones are left out.

    Args:
        fragment: Attributed tree node
        namespaces: Namespaces in scope at ``fragment`` (see ``namespace_scope``)

    Returns:
        Concatenated XML of the child elements ("" when there are none)

    Raises:
        ValueError: If a prefix is declared neither in scope nor in the fragment
    """
    namespaces = namespace_scope(fragment, namespaces)
    parts = []
    for tag, nodes in fragment.items():
        if not isinstance(nodes, list):
            continue
        for node in nodes:
            if isinstance(node, dict):
                element = _node_to_element(tag, node, namespaces, {})
                etree.cleanup_namespaces(element)
                parts.append(etree.tostring(element, encoding="unicode"))
    return "".join(parts)


def _tag_name(element: etree._Element) -> str:
    localname = etree.QName(element).localname
    return f"{element.prefix}:{localname}" if element.prefix else localname


def _attribute_name(element: etree._Element, key: str) -> str:
    qname = etree.QName(key)
    if qname.namespace is None:
        return qname.localname
    if qname.namespace == XML_NAMESPACE:
        return f"xml:{qname.localname}"
    for prefix, uri in element.nsmap.items():
        if prefix and uri == qname.namespace:
            return f"{prefix}:{qname.localname}"
    return qname.localname


def _element_to_node(element: etree._Element, parent_nsmap: dict) -> dict[str, Any]:
    node: dict[str, Any] = {}

    for prefix, uri in element.nsmap.items():
        if parent_nsmap.get(prefix) != uri:
            node["xmlns" if prefix is None else f"xmlns:{prefix}"] = uri

    for key, value in element.attrib.items():
        node[_attribute_name(element, key)] = value

    chunks = [element.text]
    for child in element:
        chunks.append(child.tail)
        if not isinstance(child.tag, str):
            continue
        node.setdefault(_tag_name(child), []).append(_element_to_node(child, element.nsmap))

    text = "".join(chunk for chunk in chunks if chunk).strip()
    if text:
        node[TEXT_KEY] = text
    return node


def namespace_scope(node: dict[str, Any] | None, inherited: dict | None = None) -> dict:
    """Return the namespaces in scope inside ``node``.

    ``inherited`` holds the namespaces in scope at its parent; the default
    namespace is stored under ``None``.
    """
    namespaces = dict(inherited or {})
    if not isinstance(node, dict):
        return namespaces
    for key, value in node.items():
        if key == "xmlns":
            namespaces[None] = value
        elif key.startswith("xmlns:"):
            namespaces[key[len("xmlns:"):]] = value
    return namespaces


def _qualify(name: str, namespaces: dict, default_namespace: bool) -> str:
    if ":" not in name:
        uri = namespaces.get(None) if default_namespace else None
        return f"{{{uri}}}{name}" if uri else name
    prefix, localname = name.split(":", 1)
    if prefix == "xml":
        return f"{{{XML_NAMESPACE}}}{localname}"
    if prefix not in namespaces:
        raise ValueError(f"Namespace prefix '{prefix}' is not declared")
    return f"{{{namespaces[prefix]}}}{localname}"


def _node_to_element(
    tag: str, node: dict[str, Any], inherited: dict, emitted: dict
) -> etree._Element:
    # inherited: namespaces in scope, emitted: namespaces declared by the output ancestors
    namespaces = namespace_scope(node, inherited)
    local_nsmap = {
        prefix: uri for prefix, uri in namespaces.items() if emitted.get(prefix) != uri
    }
    element = etree.Element(_qualify(tag, namespaces, True), nsmap=local_nsmap or None)

    for key, value in node.items():
        if key == TEXT_KEY or key == "xmlns" or key.startswith("xmlns:"):
            continue
        if isinstance(value, str):
            element.set(_qualify(key, namespaces, False), value)

    if isinstance(node.get(TEXT_KEY), str):
        element.text = node[TEXT_KEY]

    for key, value in node.items():
        if isinstance(value, list):
            for child in value:
                if isinstance(child, dict):
                    element.append(_node_to_element(key, child, namespaces, namespaces))
    return element


__all__ = ["TEXT_KEY", "xml_to_tree", "tree_to_xml", "namespace_scope"]
