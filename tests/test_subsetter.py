# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for font subsetting."""

import logging
from io import BytesIO

import pytest
from conftest import build_font
from fontTools.ttLib import TTFont

from htmlfontsubset.exceptions import SubsetError
from htmlfontsubset.subsetter import (
    FontToolsBackend,
    missing_characters,
    subset_font,
)


def _open(data: bytes) -> TTFont:
    return TTFont(BytesIO(data))


class TestSubsetFont:
    """Tests for subset_font with the fontTools backend."""

    def test_keeps_requested_characters(self, font_bytes: bytes) -> None:
        """Only the requested characters remain in the cmap."""
        result = subset_font(font_bytes, set("Hello"), "ttf")

        font = _open(result)
        assert set(font.getBestCmap()) == {ord(c) for c in "Helo"}

    def test_drops_unused_glyphs(self, font_bytes: bytes) -> None:
        """The subset has fewer glyphs and fewer bytes than the source."""
        result = subset_font(font_bytes, {"a"}, "ttf")

        assert len(result) < len(font_bytes)
        glyph_order = _open(result).getGlyphOrder()
        assert glyph_order[0] == ".notdef"
        assert len(glyph_order) == 2

    def test_default_format_is_woff2(self, font_bytes: bytes) -> None:
        """Without a format, the output is WOFF2."""
        result = subset_font(font_bytes, {"a"})

        assert result[:4] == b"wOF2"
        assert _open(result).flavor == "woff2"

    def test_woff_format(self, font_bytes: bytes) -> None:
        result = subset_font(font_bytes, {"a"}, "woff")
        assert result[:4] == b"wOFF"

    def test_plain_sfnt_format(self, font_bytes: bytes) -> None:
        result = subset_font(font_bytes, {"a"}, "ttf")
        assert result[:4] == b"\x00\x01\x00\x00"

    def test_empty_character_set(self, font_bytes: bytes) -> None:
        """An empty set keeps only .notdef."""
        result = subset_font(font_bytes, set(), "ttf")

        font = _open(result)
        assert font.getGlyphOrder() == [".notdef"]

    def test_missing_glyph_skipped(
        self, font_bytes: bytes, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Characters absent from the font are skipped with a warning."""
        with caplog.at_level(logging.WARNING, logger="htmlfontsubset"):
            result = subset_font(font_bytes, {"a", "日"}, "ttf")

        assert set(_open(result).getBestCmap()) == {ord("a")}
        assert "U+65E5" in caplog.text

    def test_corrupt_font_raises(self) -> None:
        """Data that is not a font raises SubsetError."""
        with pytest.raises(SubsetError, match="Cannot read source font"):
            subset_font(b"not a font at all", {"a"})

    def test_empty_font_data_raises(self) -> None:
        with pytest.raises(SubsetError):
            subset_font(b"", {"a"})

    def test_unknown_format_raises(self, font_bytes: bytes) -> None:
        with pytest.raises(SubsetError, match="Invalid font format"):
            subset_font(font_bytes, {"a"}, "svg")

    def test_font_without_cmap_raises(self) -> None:
        """A font without cmap cannot be subset by characters."""
        font = _open(build_font("ab"))
        del font["cmap"]
        buf = BytesIO()
        font.save(buf)

        with pytest.raises(SubsetError, match="no cmap"):
            subset_font(buf.getvalue(), {"a"})

    def test_woff2_source_accepted(self, font_bytes: bytes) -> None:
        """An already compressed source font can be subset again."""
        woff2 = subset_font(font_bytes, set("abc"))

        result = subset_font(woff2, {"a"}, "ttf")

        assert set(_open(result).getBestCmap()) == {ord("a")}


class TestCustomBackend:
    """Tests for pluggable backends."""

    def test_backend_receives_set_and_format(self) -> None:
        """subset_font delegates to the given backend."""
        calls = []

        class RecordingBackend:
            def subset(self, font_bytes, characters, target_format):
                calls.append((font_bytes, characters, target_format))
                return b"subset"

        result = subset_font(b"font", "aab", "woff", backend=RecordingBackend())

        assert result == b"subset"
        assert calls == [(b"font", {"a", "b"}, "woff")]

    def test_backend_error_wrapped(self) -> None:
        """Arbitrary backend exceptions are reported as SubsetError."""

        class FailingBackend:
            def subset(self, font_bytes, characters, target_format):
                raise RuntimeError("encoder crashed")

        with pytest.raises(
            SubsetError, match="Font subsetting failed: encoder crashed"
        ):
            subset_font(b"font", {"a"}, "woff2", backend=FailingBackend())

    def test_backend_subset_error_passes_through(self) -> None:
        class RejectingBackend:
            def subset(self, font_bytes, characters, target_format):
                raise SubsetError("Unsupported font")

        with pytest.raises(SubsetError, match="^Unsupported font$"):
            subset_font(b"font", {"a"}, backend=RejectingBackend())

    def test_missing_recorded_on_backend(self, font_bytes: bytes) -> None:
        """FontToolsBackend keeps the characters of the last call without glyph."""
        backend = FontToolsBackend()

        backend.subset(font_bytes, {"a", "é", "日"}, "ttf")
        assert backend.missing == {"é", "日"}

        backend.subset(font_bytes, {"a"}, "ttf")
        assert backend.missing == set()

    def test_preconfigured_options(self, font_bytes: bytes) -> None:
        """Options passed to FontToolsBackend are used."""
        from fontTools.subset import Options

        options = Options()
        options.retain_gids = True
        backend = FontToolsBackend(options=options)

        result = backend.subset(font_bytes, {"b"}, "ttf")

        # retain_gids keeps the empty slot of "a" in front of "b"
        assert len(_open(result).getGlyphOrder()) >= 3


class TestMissingCharacters:
    """Tests for missing_characters."""

    def test_reports_absent(self, font_bytes: bytes) -> None:
        assert missing_characters(font_bytes, {"a", "é", "日"}) == {
            "é",
            "日",
        }

    def test_nothing_missing(self, font_bytes: bytes) -> None:
        assert missing_characters(font_bytes, set("Hello")) == set()
