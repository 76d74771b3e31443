# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Pytest fixtures for the htmlfontsubset test suite."""

import string
from io import BytesIO
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

# Characters the test font has glyphs for
FONT_CHARACTERS = string.ascii_letters + string.digits + " .,!?\"'()"

PLACEHOLDER_PAYLOAD = "AAAA"


def build_font(characters: str = FONT_CHARACTERS) -> bytes:
    """Builds a minimal TrueType font with one box glyph per character.

    Args:
        characters: Characters to map in the cmap.

    Returns:
        TTF data as bytes.
    """
    glyph_names = [".notdef"] + [f"uni{ord(char):04X}" for char in characters]
    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_names)
    fb.setupCharacterMap(
        {ord(char): f"uni{ord(char):04X}" for char in characters}
    )

    glyphs = {}
    for name in glyph_names:
        pen = TTGlyphPen(None)
        pen.moveTo((0, 0))
        pen.lineTo((500, 0))
        pen.lineTo((500, 700))
        pen.lineTo((0, 700))
        pen.closePath()
        glyphs[name] = pen.glyph()

    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics({name: (500, 0) for name in glyph_names})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Test", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    fb.setupHead(unitsPerEm=1000)

    buf = BytesIO()
    fb.font.save(buf)
    return buf.getvalue()


def make_html(
    body: str = "",
    script: str | None = None,
    payload: str = PLACEHOLDER_PAYLOAD,
    media_type: str = "application/font-woff2",
) -> str:
    """Builds an HTML page embedding a font as a base64 data URI.

    Args:
        body: Markup placed inside <body>.
        script: Optional inline script text placed in <head>.
        payload: Base64 payload of the embedded font.
        media_type: Media type of the data URI.

    Returns:
        Document text.
    """
    script_tag = f"<script>{script}</script>" if script is not None else ""
    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n<style>\n"
        "@font-face { font-family: 'Test'; "
        f"src: url(data:{media_type};charset=utf-8;base64,{payload}) "
        "format('woff2'); }\n"
        f"</style>\n{script_tag}\n</head>\n"
        f"<body>{body}</body>\n</html>\n"
    )


# -- Fixtures --


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Temporary directory for tests.

    Args:
        tmp_path: Pytest-provided temporary directory.

    Returns:
        Path to the temporary directory.
    """
    return tmp_path


@pytest.fixture
def font_bytes() -> bytes:
    """Minimal TrueType font covering ASCII letters and digits."""
    return build_font()


@pytest.fixture
def font_path(tmp_dir: Path, font_bytes: bytes) -> Path:
    """Minimal TrueType font on disk.

    Args:
        tmp_dir: Temporary directory.
        font_bytes: Font data as bytes.

    Returns:
        Path to the font file.
    """
    path = tmp_dir / "F.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture
def site_dir(tmp_dir: Path) -> Path:
    """Site with two pages: text "Hello" and a script with "World".

    Returns:
        Path to the site directory.
    """
    site = tmp_dir / "site"
    site.mkdir()
    (site / "a.html").write_text(make_html(body="Hello"), encoding="utf-8")
    (site / "b.html").write_text(
        make_html(script='console.log("World")'), encoding="utf-8"
    )
    return site
