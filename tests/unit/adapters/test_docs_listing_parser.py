"""
Tests for the documentation listing parser.
"""
from src.domain.docs_entities import BookEntry
from src.infrastructure.adapters.docs_listing_parser import (
    extract_structured,
    parse_book_tiles,
)


LISTING_HTML = """
<html><body>
  <rh-tile><h3><a href="/en/documentation/prod/1.0/html/installing">  Installing  </a></h3></rh-tile>
  <rh-tile><h3><a href="https://docs.example.com/en/documentation/prod/1.0/html/release_notes">Release notes</a></h3></rh-tile>
  <rh-tile><p>Tile without a heading link</p></rh-tile>
</body></html>
"""

BASE = "https://docs.example.com/en/documentation/prod/1.0"


class TestParseBookTiles:
    """Tests for parse_book_tiles."""

    def test_extracts_title_and_absolute_link(self):
        books = parse_book_tiles(LISTING_HTML, base_url=BASE)

        assert books[0] == BookEntry(
            title="Installing",
            detail_url="https://docs.example.com/en/documentation/prod/1.0/html/installing",
        )
        assert books[1].detail_url == (
            "https://docs.example.com/en/documentation/prod/1.0/html/release_notes"
        )

    def test_keeps_tiles_without_link_as_empty_entries(self):
        """Malformed tiles are not dropped by the parser."""
        books = parse_book_tiles(LISTING_HTML, base_url=BASE)

        assert len(books) == 3
        assert books[2] == BookEntry(title="", detail_url="")

    def test_no_tiles(self):
        assert parse_book_tiles("<html><body><p>nothing</p></body></html>") == ()

    def test_empty_html(self):
        assert parse_book_tiles("") == ()


class TestExtractStructured:
    """Tests for the generic selector + field mapping extraction."""

    def test_applies_mapping_in_document_order(self):
        html = "<ul><li data-id='1'>one</li><li data-id='2'>two</li></ul>"

        rows = extract_structured(
            html, "li", lambda el: {"id": el.get("data-id"), "text": el.get_text()}
        )

        assert rows == [{"id": "1", "text": "one"}, {"id": "2", "text": "two"}]
