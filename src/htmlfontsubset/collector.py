# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Resolution of file and directory arguments into document paths."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .exceptions import NotFoundError
from .utils import DOCUMENT_SUFFIX

logger = logging.getLogger(__name__)


def is_document(path: Path, suffix: str = DOCUMENT_SUFFIX) -> bool:
    """Checks whether a file name carries the document suffix."""
    return path.name.endswith(suffix)


def walk_directory(directory: Path, suffix: str = DOCUMENT_SUFFIX) -> list[Path]:
    """Recursively lists all documents below a directory.

    Entries of each directory are visited in sorted name order and
    subdirectories are descended into where they appear, so the result
    is depth-first and stable across platforms.

    Args:
        directory: Directory to walk.
        suffix: Required file name suffix.

    Returns:
        Ordered list of matching file paths.
    """
    documents: list[Path] = []
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        entry_path = directory / entry.name
        if entry.is_dir():
            documents.extend(walk_directory(entry_path, suffix))
        elif is_document(entry_path, suffix):
            documents.append(entry_path)

    return documents


def collect_documents(
    inputs: Iterable[Path | str],
    suffix: str = DOCUMENT_SUFFIX,
) -> list[Path]:
    """Resolves file and directory arguments into a flat document list.

    Files are kept if their name ends with ``suffix``. Directories are
    expanded in place. Overlapping inputs are not de-duplicated.

    Args:
        inputs: File or directory paths, in processing order.
        suffix: Required file name suffix.

    Returns:
        Ordered list of document paths.

    Raises:
        NotFoundError: If any input path does not exist.
    """
    documents: list[Path] = []

    for item in inputs:
        path = Path(item)
        if not path.exists():
            raise NotFoundError(f"Path not found: {path}")

        if path.is_dir():
            found = walk_directory(path, suffix)
            logger.debug("Found %d document(s) in %s", len(found), path)
            documents.extend(found)
        elif is_document(path, suffix):
            documents.append(path)
        else:
            logger.debug("Skipping %s: not a %s file", path, suffix)

    return documents
