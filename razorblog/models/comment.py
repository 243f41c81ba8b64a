# razorblog/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any

from razorblog.utils.datetime_utils import DateTimeUtils


@dataclass
class Comment:
    """
    Firestore 'comments' collection document.
    Commenters are not authenticated; ``username`` is free text.
    ``like_count`` always equals ``len(liked_by)``.
    """
    comment_id: str
    post_id: str
    username: str
    content: str
    like_count: int = 0
    liked_by: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        processed_data = DateTimeUtils.from_firestore(data.copy())
        if processed_data.get('liked_by') is None:
            processed_data['liked_by'] = []
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)
