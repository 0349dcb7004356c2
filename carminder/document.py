"""Document class for files attached to a car."""

import uuid
from datetime import date
from typing import Optional


class Document:
    """A file (insurance policy, registration, invoice...) attached to a car."""

    def __init__(
        self,
        name: str,
        type: str,
        size: int = 0,
        date_added: Optional[date] = None,
        notes: Optional[str] = None,
        path: Optional[str] = None,
        id: Optional[uuid.UUID] = None,
    ):
        self.id = id or uuid.uuid4()
        self.name = name
        self.type = type
        self.size = size
        self.date_added = date_added or date.today()
        self.notes = notes
        self.path = path

    @property
    def kind(self) -> str:
        """'image', 'pdf' or 'other', from the MIME type."""
        if "image" in (self.type or ""):
            return "image"
        if self.type == "application/pdf":
            return "pdf"
        return "other"

    @property
    def formatted_size(self) -> str:
        size = float(self.size)
        for unit in ("bytes", "KB", "MB"):
            if size < 1000:
                return f"{size:,.0f} {unit}" if unit == "bytes" else f"{size:,.1f} {unit}"
            size /= 1000
        return f"{size:,.1f} GB"
