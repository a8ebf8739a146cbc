"""Title and timestamp header for exported pages."""

from onenote_md.config import ExportConfig
from onenote_md.errors import MalformedTimestamp
from onenote_md.model.page import Page
from onenote_md.utils import format_timestamp

# Line 0 is the converter's title, lines 1-5 its metadata block.
CONVERTER_HEADER_LINES = 6
SEPARATOR = "---"


def inject_front_matter(lines: list[str], page: Page, config: ExportConfig) -> list[str]:
    """Replace the converter header with the page title and optional timestamp.

    Raises MalformedTimestamp when the header is enabled and the page
    timestamp cannot be parsed.
    """
    header = [f"# {page.name}"]

    if config.include_timestamp_header:
        display = format_timestamp(page.timestamp)
        if display is None:
            raise MalformedTimestamp(
                f"Unrecognized timestamp '{page.timestamp}'", page=page.name
            )
        header.extend([display, SEPARATOR])

    return header + lines[CONVERTER_HEADER_LINES:]
