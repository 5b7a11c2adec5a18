"""
Parser for documentation listing pages.

Extracts book entries from HTML rendered by the browser session.
"""
from typing import Callable, Dict, List, Tuple, Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from src.domain.docs_entities import BookEntry


TILE_SELECTOR = "rh-tile"
TILE_LINK_SELECTOR = "h3 a"


def extract_structured(
    html: str,
    selector: str,
    field_mapping: Callable[[Tag], Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Apply field_mapping to every element of the rendered HTML matching selector.

    Args:
        html: Rendered page HTML
        selector: CSS selector of the repeated element
        field_mapping: Maps one element to a dict of fields

    Returns:
        One dict per matching element, in document order
    """
    soup = BeautifulSoup(html or "", "html.parser")
    return [field_mapping(element) for element in soup.select(selector)]


def _tile_fields(base_url: str) -> Callable[[Tag], Dict[str, str]]:
    def mapping(tile: Tag) -> Dict[str, str]:
        link = tile.select_one(TILE_LINK_SELECTOR)
        if link is None:
            return {"title": "", "url": ""}
        href = (link.get("href") or "").strip()
        return {
            "title": link.get_text(strip=True),
            "url": urljoin(base_url, href) if href else "",
        }
    return mapping


def parse_book_tiles(html: str, base_url: str = "") -> Tuple[BookEntry, ...]:
    """
    Parse the book tiles of a product listing page.

    Tiles without a heading link still yield an entry with empty fields;
    rejecting them is left to the consumer.

    Args:
        html: Rendered listing page HTML
        base_url: URL the page was loaded from, for relative links

    Returns:
        Tuple of BookEntry in page order
    """
    rows = extract_structured(html, TILE_SELECTOR, _tile_fields(base_url))
    return tuple(BookEntry(title=row["title"], detail_url=row["url"]) for row in rows)
