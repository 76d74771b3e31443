# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""htmlfontsubset - Shrink embedded web fonts to the characters HTML uses."""

from importlib.metadata import PackageNotFoundError, version

from .collector import collect_documents
from .exceptions import (
    ExtractionError,
    HtmlFontSubsetError,
    NotFoundError,
    PatchError,
    SubsetError,
    UsageError,
)
from .extractor import extract_characters, extract_document
from .patcher import find_embedded_font, patch_document, patch_file
from .pipeline import PipelineState, SubsetRunResult, subset_documents
from .subsetter import FontToolsBackend, SubsetBackend, subset_font

try:
    __version__ = version("htmlfontsubset")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    "subset_documents",
    "SubsetRunResult",
    "PipelineState",
    "collect_documents",
    "extract_characters",
    "extract_document",
    "subset_font",
    "SubsetBackend",
    "FontToolsBackend",
    "find_embedded_font",
    "patch_document",
    "patch_file",
    "HtmlFontSubsetError",
    "UsageError",
    "NotFoundError",
    "ExtractionError",
    "SubsetError",
    "PatchError",
]
