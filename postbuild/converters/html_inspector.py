"""
Generated Page Inspector

Reads a page back after the build to confirm it is a real HTML document
and to report what pandoc put in it: title, table of contents, code
blocks and MathML.
"""

import os
from dataclasses import dataclass


@dataclass
class PageSummary:
    """What a generated page contains."""
    title: str
    toc_entries: int
    code_blocks: int
    math_elements: int
    has_body: bool

    @property
    def is_empty(self) -> bool:
        return not self.has_body


def inspect_html(html: str) -> PageSummary:
    """Parse an HTML string and summarize it."""
    try:
        from bs4 import BeautifulSoup
    except ImportError:
        raise RuntimeError("beautifulsoup4 is not installed. Run: pip install beautifulsoup4")

    soup = BeautifulSoup(html, "html.parser")

    title = ""
    title_tag = soup.find("title")
    if title_tag and title_tag.string:
        title = title_tag.string.strip()
    elif soup.find("h1"):
        title = soup.find("h1").get_text(" ", strip=True)

    # pandoc wraps --toc output in <nav id="TOC">
    toc = soup.find(id="TOC")
    toc_entries = len(toc.find_all("li")) if toc else 0

    body = soup.find("body") or soup
    has_body = bool(body.get_text(strip=True)) or bool(body.find(True))

    return PageSummary(
        title=title,
        toc_entries=toc_entries,
        code_blocks=len(soup.find_all("pre")),
        math_elements=len(soup.find_all("math")),
        has_body=has_body,
    )


def inspect_file(html_path: str) -> PageSummary:
    """Read and summarize a generated HTML file."""
    if not os.path.isfile(html_path):
        raise FileNotFoundError(f"HTML file not found: {html_path}")

    with open(html_path, "r", encoding="utf-8", errors="replace") as f:
        return inspect_html(f.read())
