# razorblog/models/author.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from razorblog.utils.datetime_utils import DateTimeUtils


@dataclass
class Author:
    """
    Document structure of the Firestore 'authors' collection.
    ``password_hash`` never leaves the service layer; the response schemas do not declare it.
    """
    author_id: str
    name: str
    email: str
    password_hash: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: str = ""
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Author":
        processed_data = DateTimeUtils.from_firestore(data.copy())
        # Documents written before the bio field existed.
        if processed_data.get('bio') is None:
            processed_data['bio'] = ""
        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class EmailClaim:
    """'author_emails' document keyed by the normalised email. Makes email uniqueness a transactional write."""
    author_id: str


def normalize_email(email: str) -> str:
    return email.strip().lower()
