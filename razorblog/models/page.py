# razorblog/models/page.py
from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class Page:
    """One slice of a newest-first listing."""
    items: List[Any] = field(default_factory=list)
    limit: int = 10
    offset: int = 0

    @property
    def next_offset(self):
        # A short page means the listing is exhausted.
        if len(self.items) < self.limit:
            return None
        return self.offset + self.limit
