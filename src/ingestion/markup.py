"""Markup queries over chat-log HTML, backed by BeautifulSoup."""

from __future__ import annotations

import bs4

# Speaker names are wrapped in either tag depending on the log exporter
BOLD_TAGS = ["b", "strong"]


def parse_document(html: str) -> bs4.BeautifulSoup:
    return bs4.BeautifulSoup(html, "html.parser")


def find_log_entries(doc: bs4.BeautifulSoup | str) -> list[bs4.Tag]:
    """Return every paragraph-level log entry, in document order."""
    if isinstance(doc, str):
        doc = parse_document(doc)
    return doc.find_all("p")


def plain_text(node: bs4.Tag) -> str:
    return node.get_text()


def first_bold_span(node: bs4.Tag) -> bs4.Tag | None:
    """Return the first bold-styled descendant of *node*, if any."""
    return node.find(BOLD_TAGS)
