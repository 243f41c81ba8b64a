# razorblog/models/share.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any

from razorblog.utils.datetime_utils import DateTimeUtils


@dataclass(frozen=True)
class Share:
    """Firestore 'shares' collection document. Append-only, never updated."""
    share_id: str
    post_id: str
    platform: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Share":
        processed_data = DateTimeUtils.from_firestore(data.copy())
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)
