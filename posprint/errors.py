from __future__ import annotations


class ReportError(Exception):
    """Base class for everything raised while building or printing a report."""


class LayoutConfigError(ReportError, ValueError):
    """The geometry cannot hold a single line of content."""


class ContentTooTallError(LayoutConfigError):
    """A content block is taller than the usable area of an empty page."""

    def __init__(self, needed: float, usable: float) -> None:
        super().__init__(
            f"Content block of {needed:.2f}mm cannot fit a page with {usable:.2f}mm of usable height"
        )
        self.needed = needed
        self.usable = usable


class PaginationStateError(ReportError, RuntimeError):
    """An operation was called out of order (e.g. numbering before finalize)."""


class SurfaceError(ReportError):
    """The document surface could not allocate a page or a font."""


class PrintError(ReportError):
    """Handing a saved document to the printer failed."""


class IngestError(ReportError, ValueError):
    """Report rows could not be read from the input file."""
