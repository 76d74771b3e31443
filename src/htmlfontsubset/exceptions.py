# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for htmlfontsubset."""


class HtmlFontSubsetError(Exception):
    """Base exception for all htmlfontsubset errors."""


class UsageError(HtmlFontSubsetError):
    """Insufficient or invalid arguments."""


class NotFoundError(HtmlFontSubsetError):
    """A required input path does not exist."""


class ExtractionError(HtmlFontSubsetError):
    """A document could not be read or parsed."""


class SubsetError(HtmlFontSubsetError):
    """The font could not be subsetted or written."""


class PatchError(HtmlFontSubsetError):
    """A document could not be patched in place."""
