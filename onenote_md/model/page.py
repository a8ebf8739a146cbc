"""Page model representing a single OneNote page."""

from dataclasses import dataclass, field

from onenote_md.model.asset import InsertedFile


@dataclass
class Page:
    """A single page in a OneNote section.

    ``level`` is the nesting depth relative to the section (1-3). A page at
    level L > 1 is a subpage of the most recent page at level L - 1.
    """

    name: str = ""
    content_id: str = ""
    level: int = 1
    timestamp: str = ""
    inserted_files: list[InsertedFile] = field(default_factory=list)
