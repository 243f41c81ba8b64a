# razorblog/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from razorblog.utils.datetime_utils import DateTimeUtils


@dataclass
class Post:
    """
    Firestore 'posts' collection document.

    ``readers`` only ever moves up through ``firestore.Increment``.
    ``liked_by`` is mutated only through ``ArrayUnion``/``ArrayRemove``, so an
    author id appears in it at most once.
    """
    post_id: str
    author_id: str
    title: str
    content: str
    category: str = ""
    image_url: Optional[str] = None
    readers: int = 0
    liked_by: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Post":
        processed_data = DateTimeUtils.from_firestore(data.copy())
        if processed_data.get('liked_by') is None:
            processed_data['liked_by'] = []
        if processed_data.get('readers') is None:
            processed_data['readers'] = 0
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @property
    def like_count(self) -> int:
        return len(self.liked_by)
