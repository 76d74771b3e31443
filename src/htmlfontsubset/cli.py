# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Click-based CLI for htmlfontsubset.

This module provides the command-line interface for subsetting a
font to the characters used by HTML documents and re-embedding it.
"""

# Standard Library
import logging
import sys
from pathlib import Path

# Third Party
import click
from colorama import Fore, Style, init

# Local
from . import __version__
from .exceptions import (
    ExtractionError,
    NotFoundError,
    PatchError,
    SubsetError,
    UsageError,
)
from .pipeline import SubsetRunResult, subset_documents
from .utils import FORMAT_FLAVORS, format_size, setup_logging

EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_FILE_NOT_FOUND = 3
EXIT_EXTRACTION_FAILED = 4
EXIT_SUBSET_FAILED = 5
EXIT_PATCH_FAILED = 6

USAGE = "Usage: htmlfontsubset <inputFont> <outputFont> [...htmlFiles]"

logger = logging.getLogger(__name__)


def print_success(msg: str) -> None:
    """Prints a success message in green.

    Args:
        msg: The message to output.
    """
    click.echo(f"{Fore.GREEN}\u2713{Style.RESET_ALL} {msg}")


def print_error(msg: str) -> None:
    """Prints an error message in red.

    Args:
        msg: The error message to output.
    """
    click.echo(f"{Fore.RED}\u2717 Error:{Style.RESET_ALL} {msg}", err=True)


def print_warning(msg: str) -> None:
    """Prints a warning in yellow.

    Args:
        msg: The warning to output.
    """
    click.echo(f"{Fore.YELLOW}\u26a0{Style.RESET_ALL} {msg}")


def _print_result(result: SubsetRunResult, quiet: bool) -> None:
    """Prints the run summary in a formatted way.

    Args:
        result: The run result.
        quiet: If True, nothing is printed.
    """
    if quiet:
        return

    print_success(
        f"Subsetted font saved to: {result.output_font} "
        f"({len(result.characters)} characters, "
        f"{format_size(result.source_size)} -> {format_size(result.subset_size)})"
    )
    for warning in result.warnings:
        print_warning(warning)
    click.echo(
        f"Processed {result.document_count} HTML file(s) "
        f"in {result.processing_time:.2f}s."
    )


@click.command()
@click.argument("input_font", required=False, type=click.Path())
@click.argument("output_font", required=False, type=click.Path())
@click.argument("documents", nargs=-1, type=click.Path())
@click.option(
    "--format",
    "target_format",
    type=click.Choice(sorted(FORMAT_FLAVORS)),
    default=None,
    help="Output font format (default: derived from OUTPUT_FONT, else woff2)",
)
@click.option(
    "--media-type",
    default=None,
    help="Media type of the embedded data URI to replace "
    "(default: derived from the format, e.g. application/font-woff2)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only output errors",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Detailed output",
)
@click.version_option(version=__version__)
def main(
    input_font: str | None,
    output_font: str | None,
    documents: tuple[str, ...],
    target_format: str | None,
    media_type: str | None,
    quiet: bool,
    verbose: bool,
) -> None:
    """Subsets a font to the characters used by HTML documents.

    INPUT_FONT is the source font. OUTPUT_FONT is where the subset is
    written. DOCUMENTS are HTML files or directories (searched
    recursively); their embedded base64 font is replaced in place.
    """
    # Initialize colorama for Windows compatibility
    init()

    setup_logging(verbose=verbose, quiet=quiet)

    try:
        if input_font is None or output_font is None or not documents:
            raise UsageError(USAGE)

        result = subset_documents(
            Path(input_font),
            Path(output_font),
            [Path(document) for document in documents],
            target_format=target_format,
            media_type=media_type,
            show_progress=not quiet,
        )
        _print_result(result, quiet)
        exit_code = EXIT_SUCCESS

    except UsageError as e:
        click.echo(str(e), err=True)
        exit_code = EXIT_USAGE_ERROR
    except NotFoundError as e:
        print_error(str(e))
        exit_code = EXIT_FILE_NOT_FOUND
    except ExtractionError as e:
        print_error(str(e))
        exit_code = EXIT_EXTRACTION_FAILED
    except SubsetError as e:
        print_error(f"Error creating font subset: {e}")
        exit_code = EXIT_SUBSET_FAILED
    except PatchError as e:
        print_error(str(e))
        exit_code = EXIT_PATCH_FAILED
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {e}")
        exit_code = EXIT_GENERAL_ERROR

    sys.exit(exit_code)
