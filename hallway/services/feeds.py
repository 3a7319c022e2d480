import xml.etree.ElementTree as ET


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1] if "}" in tag else tag


def _child(node: ET.Element, name: str) -> ET.Element | None:
    for child in node:
        if _local(child.tag) == name:
            return child
    return None


def _text(node: ET.Element | None) -> str:
    if node is None:
        return ""
    return " ".join("".join(node.itertext()).split())


def _category(entry: ET.Element) -> str:
    # <category>text</category>, then <category term="..."/>, then <dc:subject>
    categories = [child for child in entry if _local(child.tag) == "category"]
    for node in categories:
        value = _text(node)
        if value:
            return value
    for node in categories:
        term = (node.get("term") or "").strip()
        if term:
            return term
    for child in entry:
        if _local(child.tag) == "subject":
            value = _text(child)
            if value:
                return value
    return ""


def extract_feed_items(xml: bytes | str, limit: int | None = None) -> list[dict[str, str]]:
    """
    Titles and categories of an RSS <item> or Atom <entry> list.

    Malformed input yields an empty list; the caller shows a placeholder.
    """
    try:
        root = ET.fromstring(xml)
    except (ET.ParseError, ValueError, TypeError):
        return []

    entries = [node for node in root.iter() if _local(node.tag) == "item"]
    if not entries:
        entries = [node for node in root.iter() if _local(node.tag) == "entry"]

    items: list[dict[str, str]] = []
    for entry in entries:
        title = _text(_child(entry, "title"))
        if not title:
            continue
        items.append({"title": title, "category": _category(entry)})
        if limit is not None and len(items) >= limit:
            break
    return items
