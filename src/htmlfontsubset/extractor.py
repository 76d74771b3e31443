# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Collection of the characters a document actually renders.

The body's text content (markup and attributes ignored) and the text of
every inline ``<script>`` element are scanned. Script bodies count because
they commonly inject strings into the page at runtime.

Documents are parsed with the HTML5 tree construction rules, so content
placed after ``</body>`` or ``</html>`` ends up in the body the same way
a browser renders it.
"""

import logging
from pathlib import Path

from lxml import etree
from lxml.html import html5parser

from .exceptions import ExtractionError

logger = logging.getLogger(__name__)

# Local names, so the lookups hold with or without the XHTML namespace
_find_body = etree.XPath("//*[local-name() = 'body']")
_find_scripts = etree.XPath("//*[local-name() = 'script']")
_string_content = etree.XPath("string()")


def _parse_document(document_text: str) -> etree._Element:
    """Parses markup into an lxml tree using html5lib.

    HTML5 parsing never fails: missing ``<html>``, ``<head>`` and
    ``<body>`` elements are implied and empty input gives an empty body.
    """
    return html5parser.document_fromstring(document_text)


def extract_characters(document_text: str) -> set[str]:
    """Returns the distinct characters rendered by an HTML document.

    Args:
        document_text: Raw document markup.

    Returns:
        Set of single-character strings found in the body text or in any
        inline script. Empty if the document has neither.
    """
    root = _parse_document(document_text)
    characters: set[str] = set()

    for body in _find_body(root):
        characters.update(_string_content(body))

    for script in _find_scripts(root):
        characters.update(_string_content(script))

    return characters


def extract_document(path: Path) -> set[str]:
    """Reads a document from disk and extracts its characters.

    Args:
        path: Path to the HTML document.

    Returns:
        Set of characters used by the document.

    Raises:
        ExtractionError: If the document cannot be read or decoded.
    """
    try:
        document_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ExtractionError(f"Cannot read document {path}: {e}") from e

    characters = extract_characters(document_text)
    logger.debug("%s: %d distinct character(s)", path, len(characters))
    return characters
