"""
Info panel rich text cleanup.

This is a narrow blocklist, not an allow-list sanitizer: it removes
<script> elements, inline event handler attributes (on*) and attributes
whose value uses the javascript: scheme. Everything else the editor
produced passes through. It is meant for operator-authored text only.
"""
import re

from bs4 import BeautifulSoup

_JS_SCHEME = re.compile(r"^\s*javascript\s*:", re.IGNORECASE)
# Browsers ignore control characters and whitespace inside a scheme.
_SCHEME_NOISE = re.compile(r"[\x00-\x20]+")


def is_javascript_url(value: str) -> bool:
    return bool(_JS_SCHEME.match(_SCHEME_NOISE.sub("", value)))


def sanitize_info_html(raw: str | None) -> str:
    if not raw or not raw.strip():
        return ""
    soup = BeautifulSoup(raw, "html.parser")
    for node in soup.find_all("script"):
        node.decompose()
    for tag in soup.find_all(True):
        for attr in list(tag.attrs):
            value = tag.attrs[attr]
            if isinstance(value, list):
                value = " ".join(value)
            if attr.lower().startswith("on"):
                del tag.attrs[attr]
            elif isinstance(value, str) and is_javascript_url(value):
                del tag.attrs[attr]
    return str(soup)
