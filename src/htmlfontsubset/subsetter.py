# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Font subsetting for the characters used by a set of documents.

Glyph selection, closure over layout features and container encoding are
left to ``fontTools.subset``. The backend is pluggable: anything with a
``subset(font_bytes, characters, target_format)`` method can replace the
fontTools implementation.
"""

import logging
from collections.abc import Iterable
from io import BytesIO
from typing import Protocol

from fontTools.subset import Options, Subsetter
from fontTools.ttLib import TTFont

from .exceptions import SubsetError
from .utils import DEFAULT_FORMAT, FORMAT_FLAVORS, validate_format

logger = logging.getLogger(__name__)


class SubsetBackend(Protocol):
    """Capability that reduces a font to a set of characters."""

    def subset(
        self, font_bytes: bytes, characters: set[str], target_format: str
    ) -> bytes: ...


def _load_font(font_bytes: bytes) -> TTFont:
    """Loads font bytes into a TTFont.

    Raises:
        SubsetError: If the data is not a readable font.
    """
    try:
        tt_font = TTFont(BytesIO(font_bytes))
        has_cmap = "cmap" in tt_font
        if has_cmap:
            # Force the cmap to load so corrupt tables surface here
            tt_font.getBestCmap()
    except Exception as e:
        raise SubsetError(f"Cannot read source font: {e}") from e

    # Characters are mapped to glyphs through the cmap only
    if not has_cmap:
        tt_font.close()
        raise SubsetError("Source font has no cmap table")
    return tt_font


def _codepoints(characters: Iterable[str]) -> set[int]:
    return {ord(char) for char in characters}


def _missing_from_cmap(cmap: dict[int, str], characters: Iterable[str]) -> set[str]:
    return {char for char in characters if ord(char) not in cmap}


def missing_characters(font_bytes: bytes, characters: Iterable[str]) -> set[str]:
    """Returns the requested characters that the font has no glyph for.

    Args:
        font_bytes: Complete source font.
        characters: Characters to look up.

    Returns:
        Subset of ``characters`` absent from the font's best cmap.

    Raises:
        SubsetError: If the font cannot be read.
    """
    tt_font = _load_font(font_bytes)
    try:
        cmap = tt_font.getBestCmap() or {}
    finally:
        tt_font.close()
    return _missing_from_cmap(cmap, characters)


class FontToolsBackend:
    """Subsets fonts with ``fontTools.subset``.

    Layout features are all retained so that ligatures and contextual
    forms reachable from the requested characters stay available. Names
    and the ``.notdef`` outline are kept.

    Attributes:
        missing: Characters of the last call that had no glyph.
    """

    def __init__(self, options: Options | None = None) -> None:
        """Initializes the backend.

        Args:
            options: Optional preconfigured fontTools options. The flavor
                is always overridden per call.
        """
        self.options = options
        self.missing: set[str] = set()

    def _make_options(self, flavor: str | None) -> Options:
        if self.options is not None:
            options = self.options
        else:
            options = Options()
            options.layout_features = ["*"]
            options.notdef_outline = True
            options.name_legacy = True
            options.name_IDs = ["*"]
            options.name_languages = ["*"]
        options.flavor = flavor
        return options

    def subset(
        self, font_bytes: bytes, characters: set[str], target_format: str
    ) -> bytes:
        """Subsets font bytes down to the glyphs for ``characters``.

        Characters without a glyph in the font are logged and skipped.

        Args:
            font_bytes: Complete source font.
            characters: Characters to retain.
            target_format: One of the keys of FORMAT_FLAVORS.

        Returns:
            Encoded subset font.

        Raises:
            SubsetError: If the font is unreadable or cannot be encoded.
        """
        try:
            flavor = FORMAT_FLAVORS[validate_format(target_format)]
        except ValueError as e:
            raise SubsetError(str(e)) from e

        tt_font = _load_font(font_bytes)
        try:
            cmap = tt_font.getBestCmap() or {}
            self.missing = _missing_from_cmap(cmap, characters)
            if self.missing:
                missing = sorted(self.missing)
                logger.warning(
                    "Font has no glyph for %d character(s): %s",
                    len(missing),
                    " ".join(f"U+{ord(char):04X}" for char in missing),
                )

            options = self._make_options(flavor)
            subsetter = Subsetter(options=options)
            subsetter.populate(unicodes=_codepoints(characters))
            subsetter.subset(tt_font)

            tt_font.flavor = flavor
            output = BytesIO()
            tt_font.save(output)
            return output.getvalue()
        except Exception as e:
            raise SubsetError(f"Font subsetting failed: {e}") from e
        finally:
            tt_font.close()


def subset_font(
    font_bytes: bytes,
    characters: Iterable[str],
    target_format: str = DEFAULT_FORMAT,
    *,
    backend: SubsetBackend | None = None,
) -> bytes:
    """Builds a subset of a font containing only the given characters.

    Args:
        font_bytes: Complete source font.
        characters: Characters to retain glyphs for.
        target_format: Output container format ('woff2', 'woff', 'ttf',
            'otf').
        backend: Optional subsetting backend. Defaults to fontTools.

    Returns:
        Subset font bytes in the requested format.

    Raises:
        SubsetError: If subsetting fails.
    """
    if backend is None:
        backend = FontToolsBackend()

    character_set = set(characters)
    logger.debug(
        "Subsetting %d byte font to %d character(s) as %s",
        len(font_bytes),
        len(character_set),
        target_format,
    )
    try:
        subset_bytes = backend.subset(font_bytes, character_set, target_format)
    except SubsetError:
        raise
    except Exception as e:
        raise SubsetError(f"Font subsetting failed: {e}") from e
    logger.debug("Subset font size: %d bytes", len(subset_bytes))
    return subset_bytes
