"""Section model representing an ordered list of pages."""

from dataclasses import dataclass, field

from onenote_md.model.page import Page


@dataclass
class Section:
    """A section containing pages in document order."""

    name: str = ""
    pages: list[Page] = field(default_factory=list)
