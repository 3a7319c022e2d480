import json
from typing import Any

from bs4 import BeautifulSoup

from hallway.services.compiler import DATA_ELEMENT_ID


def parse_document(document: bytes | str | None) -> dict[str, Any] | None:
    """
    Recover the embedded Hallway blob from a compiled document.

    Returns None when the data element is missing or does not hold a JSON
    object. No field validation happens here; callers default missing
    fields when they build a Hallway from the result.
    """
    if not document:
        return None
    if isinstance(document, bytes):
        document = document.decode("utf-8", errors="replace")
    soup = BeautifulSoup(document, "html.parser")
    node = soup.find("script", id=DATA_ELEMENT_ID)
    if node is None:
        return None
    try:
        data = json.loads(node.string or "")
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
