# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Rewriting of base64 font data URIs embedded in HTML documents.

Only the payload of the first ``url(data:<media>;charset=utf-8;base64,...)``
reference is replaced; every other character of the document, including
the media type and charset annotation, is preserved.
"""

import base64
import functools
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .exceptions import PatchError
from .utils import FORMAT_MEDIA_TYPES

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = FORMAT_MEDIA_TYPES["woff2"]


@dataclass(frozen=True)
class EmbeddedFont:
    """Location of an embedded font payload inside a document.

    Attributes:
        start: Offset of the first payload character.
        end: Offset just past the last payload character.
        media_type: Media type annotated on the data URI.
        payload: The base64 payload text.
    """

    start: int
    end: int
    media_type: str
    payload: str


@functools.lru_cache(maxsize=16)
def font_uri_pattern(media_type: str) -> re.Pattern[str]:
    """Compiles the data URI pattern for a media type.

    The URI may be bare or wrapped in single or double quotes.
    """
    return re.compile(
        r"url\(\s*(?P<quote>[\"']?)data:"
        + re.escape(media_type)
        + r";charset=utf-8;base64,(?P<payload>[^)\"']*)(?=(?P=quote)\s*\))"
    )


def encode_font(font_bytes: bytes) -> str:
    """Encodes font bytes as standard base64 text."""
    return base64.b64encode(font_bytes).decode("ascii")


def find_embedded_font(
    document_text: str, media_type: str = DEFAULT_MEDIA_TYPE
) -> EmbeddedFont | None:
    """Locates the first embedded font data URI in a document.

    Args:
        document_text: Raw document text.
        media_type: Media type the data URI must carry.

    Returns:
        EmbeddedFont describing the payload span, or None if absent.
    """
    match = font_uri_pattern(media_type).search(document_text)
    if match is None:
        return None
    return EmbeddedFont(
        start=match.start("payload"),
        end=match.end("payload"),
        media_type=media_type,
        payload=match.group("payload"),
    )


def patch_document(
    document_text: str,
    font_bytes: bytes,
    media_type: str = DEFAULT_MEDIA_TYPE,
) -> str:
    """Replaces the first embedded font payload with new font bytes.

    Args:
        document_text: Raw document text.
        font_bytes: Font to embed.
        media_type: Media type the data URI must carry.

    Returns:
        The updated text, or the unchanged text if the document has no
        matching data URI.
    """
    embedded = find_embedded_font(document_text, media_type)
    if embedded is None:
        return document_text

    return (
        document_text[: embedded.start]
        + encode_font(font_bytes)
        + document_text[embedded.end :]
    )


def patch_file(
    path: Path,
    font_bytes: bytes,
    media_type: str = DEFAULT_MEDIA_TYPE,
) -> bool:
    """Patches a document on disk in place.

    The file is only rewritten when it contains a matching data URI.

    Args:
        path: Path to the HTML document.
        font_bytes: Font to embed.
        media_type: Media type the data URI must carry.

    Returns:
        True if an embedded font was found and replaced.

    Raises:
        PatchError: If the document cannot be read or written.
    """
    try:
        # newline="" keeps line endings byte-identical
        with path.open(encoding="utf-8", newline="") as f:
            document_text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PatchError(f"Cannot read document {path}: {e}") from e

    if find_embedded_font(document_text, media_type) is None:
        return False

    updated = patch_document(document_text, font_bytes, media_type)

    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(updated)
    except OSError as e:
        raise PatchError(f"Cannot write document {path}: {e}") from e

    logger.debug("Patched embedded font in %s", path)
    return True
