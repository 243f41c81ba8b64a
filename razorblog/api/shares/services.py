# razorblog/api/shares/services.py
import logging
from dataclasses import asdict
from typing import Dict, Any, List
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from razorblog.core.exceptions import InvalidInput, StorageFailure
from razorblog.models.share import Share
from razorblog.utils.datetime_utils import DateTimeUtils
from razorblog.utils.ids import new_id


class ShareService:
    """Append-only log of share events. There is no update or delete path."""
    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.shares_ref = self.db.collection('shares')

    def create_share(self, post_id: str, platform: str) -> Dict[str, Any]:
        if not post_id or not platform:
            raise InvalidInput("post_id and platform are required")

        share = Share(share_id=new_id(), post_id=post_id, platform=platform)
        try:
            self.shares_ref.document(share.share_id).set(DateTimeUtils.for_firestore(asdict(share)))
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Share creation failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return asdict(share)

    def list_shares(self, post_id: str) -> List[Dict[str, Any]]:
        """Every share of a post in the order they were recorded."""
        query = (self.shares_ref
                 .where('post_id', '==', post_id)
                 .order_by('created_at'))
        try:
            return [asdict(Share.from_dict(doc.to_dict())) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Share listing failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
