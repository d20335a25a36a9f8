import re
from typing import List, Optional

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"[\s\u00a0]+")


def normalize_text(value: Optional[str]) -> str:
    """Collapse whitespace runs (including non-breaking spaces) and trim."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def extract_links(html: str, href_prefix: str) -> List[str]:
    """Return raw href values containing *href_prefix*, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    hrefs = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if href and href_prefix in href:
            hrefs.append(href)
    return hrefs


def extract_meta(html: str, field: str) -> Optional[str]:
    """Content of the first <meta> whose property or name equals *field*."""
    soup = BeautifulSoup(html, "html.parser")
    for attrs in ({"property": field}, {"name": field}):
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            return tag["content"]
    return None


def extract_first_heading(html: str) -> Optional[str]:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    heading = soup.find("h1")
    if heading is None:
        return None
    return heading.get_text(separator=" ") or None

