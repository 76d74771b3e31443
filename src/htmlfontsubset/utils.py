# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions and shared constants for htmlfontsubset."""

import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Only files with this suffix are treated as documents
DOCUMENT_SUFFIX = ".html"

DEFAULT_FORMAT = "woff2"

# Output container format -> fontTools flavor (None = plain sfnt)
FORMAT_FLAVORS: dict[str, str | None] = {
    "woff2": "woff2",
    "woff": "woff",
    "ttf": None,
    "otf": None,
}

# Media type written in front of the base64 payload of the data URI
FORMAT_MEDIA_TYPES = {
    "woff2": "application/font-woff2",
    "woff": "application/font-woff",
    "ttf": "application/x-font-ttf",
    "otf": "application/x-font-opentype",
}

SUFFIX_FORMATS = {
    ".woff2": "woff2",
    ".woff": "woff",
    ".ttf": "ttf",
    ".otf": "otf",
}


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for htmlfontsubset.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for htmlfontsubset.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    package_logger = logging.getLogger("htmlfontsubset")
    package_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return package_logger


def validate_format(target_format: str) -> str:
    """Validates and normalizes an output font format.

    Args:
        target_format: Format name (e.g., 'woff2', 'TTF').

    Returns:
        Lowercased format name.

    Raises:
        ValueError: If the format is not supported.
    """
    format_lower = target_format.lower()
    if format_lower not in FORMAT_FLAVORS:
        raise ValueError(
            f"Invalid font format: {target_format}. "
            f"Allowed: {', '.join(sorted(FORMAT_FLAVORS))}"
        )
    return format_lower


def format_from_path(path: Path) -> str:
    """Derives the output format from a font file suffix.

    Unknown suffixes fall back to DEFAULT_FORMAT.
    """
    return SUFFIX_FORMATS.get(path.suffix.lower(), DEFAULT_FORMAT)


def media_type_for_format(target_format: str) -> str:
    """Returns the data URI media type used for a font format."""
    return FORMAT_MEDIA_TYPES[validate_format(target_format)]


def format_size(num_bytes: int) -> str:
    """Formats a byte count for display (e.g., '12.3 KB')."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"
