# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Core logic: one font subset shared by many HTML documents.

A run walks through a fixed sequence of states. All documents are
scanned before the single subset is built, and no document is patched
until the subset font has been written.
"""

# Standard Library
import enum
import logging
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

# Third Party
from tqdm import tqdm

# Local
from .collector import collect_documents
from .exceptions import NotFoundError, SubsetError, UsageError
from .extractor import extract_document
from .patcher import patch_file
from .subsetter import FontToolsBackend, SubsetBackend, subset_font
from .utils import format_from_path, media_type_for_format, validate_format

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineState(enum.Enum):
    """Stages of a subsetting run."""

    INIT = "init"
    COLLECTING = "collecting"
    EXTRACTING = "extracting"
    SUBSETTING = "subsetting"
    PATCHING = "patching"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SubsetRunResult:
    """Result of a subsetting run.

    Attributes:
        input_font: Path to the source font.
        output_font: Path of the written subset font.
        target_format: Container format of the subset font.
        media_type: Data URI media type that was patched.
        state: Final pipeline state.
        documents: Collected documents, in processing order.
        characters: Union of characters over all documents.
        missing_characters: Requested characters the font has no glyph for.
        patched: Documents whose embedded font was replaced.
        unpatched: Documents without a matching embedded font.
        source_size: Size of the source font in bytes.
        subset_size: Size of the subset font in bytes.
        warnings: List of warnings during the run.
        processing_time: Processing time in seconds.
    """

    input_font: Path
    output_font: Path
    target_format: str
    media_type: str
    state: PipelineState = PipelineState.INIT
    documents: list[Path] = field(default_factory=list)
    characters: set[str] = field(default_factory=set)
    missing_characters: set[str] = field(default_factory=set)
    patched: list[Path] = field(default_factory=list)
    unpatched: list[Path] = field(default_factory=list)
    source_size: int = 0
    subset_size: int = 0
    warnings: list[str] = field(default_factory=list)
    processing_time: float = 0.0

    @property
    def document_count(self) -> int:
        """Number of processed documents."""
        return len(self.documents)


def _progress(items: list[T], desc: str, show_progress: bool) -> Iterator[T]:
    """Wraps a list in a tqdm progress bar if requested."""
    if not show_progress:
        yield from items
        return

    with tqdm(total=len(items), desc=desc, unit="file", ncols=80) as progress_bar:
        for item in items:
            progress_bar.set_postfix_str(getattr(item, "name", str(item)))
            yield item
            progress_bar.update(1)


def accumulate_characters(
    documents: Iterable[Path], show_progress: bool = False
) -> set[str]:
    """Builds the union of characters over all documents.

    Args:
        documents: Documents to scan, in order.
        show_progress: If True, a progress bar is shown.

    Returns:
        Set of all characters used by any document.

    Raises:
        ExtractionError: If any document cannot be read.
    """
    characters: set[str] = set()
    for document in _progress(list(documents), "Scanning", show_progress):
        characters |= extract_document(document)
    return characters


def _write_subset(
    input_font: Path,
    output_font: Path,
    characters: set[str],
    target_format: str,
    backend: SubsetBackend | None,
    result: SubsetRunResult,
) -> bytes:
    """Builds the subset font and writes it to the output path.

    Returns:
        The bytes as read back from the written output file.

    Raises:
        SubsetError: If the font cannot be read, subsetted or written.
    """
    try:
        font_bytes = input_font.read_bytes()
    except OSError as e:
        raise SubsetError(f"Cannot read font {input_font}: {e}") from e
    result.source_size = len(font_bytes)

    if backend is None:
        backend = FontToolsBackend()

    subset_bytes = subset_font(font_bytes, characters, target_format, backend=backend)
    # Custom backends report missing glyphs themselves, if at all
    result.missing_characters = set(getattr(backend, "missing", set()))

    try:
        output_font.parent.mkdir(parents=True, exist_ok=True)
        output_font.write_bytes(subset_bytes)
        written = output_font.read_bytes()
    except OSError as e:
        raise SubsetError(f"Cannot write subset font {output_font}: {e}") from e

    result.subset_size = len(written)
    logger.info(
        "Subsetted font saved to: %s (%d -> %d bytes)",
        output_font,
        result.source_size,
        result.subset_size,
    )
    return written


def subset_documents(
    input_font: Path | str,
    output_font: Path | str,
    inputs: Iterable[Path | str],
    *,
    target_format: str | None = None,
    media_type: str | None = None,
    backend: SubsetBackend | None = None,
    show_progress: bool = False,
) -> SubsetRunResult:
    """Subsets a font to the characters of many documents and re-embeds it.

    Args:
        input_font: Path to the source font.
        output_font: Path where the subset font is written. Parent
            directories are created as needed.
        inputs: HTML files or directories, in processing order.
        target_format: Output format. Derived from the output suffix
            if None.
        media_type: Data URI media type to patch. Derived from the
            format if None.
        backend: Optional subsetting backend. Defaults to fontTools.
        show_progress: If True, progress bars are shown.

    Returns:
        SubsetRunResult describing the run.

    Raises:
        UsageError: If no document inputs are given.
        NotFoundError: If the font or any input path does not exist.
        ExtractionError: If a document cannot be read.
        SubsetError: If the subset font cannot be built or written.
        PatchError: If a document cannot be patched.
    """
    start_time = time.monotonic()
    input_font = Path(input_font)
    output_font = Path(output_font)
    inputs = list(inputs)

    try:
        resolved_format = validate_format(
            target_format or format_from_path(output_font)
        )
    except ValueError as e:
        raise UsageError(str(e)) from e

    result = SubsetRunResult(
        input_font=input_font,
        output_font=output_font,
        target_format=resolved_format,
        media_type=media_type or media_type_for_format(resolved_format),
    )

    try:
        # Init
        if not inputs:
            raise UsageError("At least one document or directory is required")
        if not input_font.is_file():
            raise NotFoundError(f"Input font not found: {input_font}")

        result.state = PipelineState.COLLECTING
        result.documents = collect_documents(inputs)
        logger.info("Processing %d HTML file(s)...", len(result.documents))

        result.state = PipelineState.EXTRACTING
        result.characters = accumulate_characters(result.documents, show_progress)
        logger.info("Collected %d distinct character(s)", len(result.characters))

        result.state = PipelineState.SUBSETTING
        logger.info("Creating font subset...")
        subset_bytes = _write_subset(
            input_font,
            output_font,
            result.characters,
            resolved_format,
            backend,
            result,
        )

        result.state = PipelineState.PATCHING
        for document in _progress(result.documents, "Patching", show_progress):
            logger.debug("Updating %s...", document)
            if patch_file(document, subset_bytes, result.media_type):
                result.patched.append(document)
            else:
                logger.warning(
                    "No embedded %s font found in %s, left unchanged",
                    result.media_type,
                    document,
                )
                result.unpatched.append(document)
                result.warnings.append(f"No embedded font found in {document}")

        result.state = PipelineState.DONE
    except Exception:
        logger.debug("Run failed in state: %s", result.state.value)
        result.state = PipelineState.FAILED
        raise
    finally:
        result.processing_time = time.monotonic() - start_time

    logger.info(
        "All files processed: %d patched, %d without embedded font",
        len(result.patched),
        len(result.unpatched),
    )
    return result
