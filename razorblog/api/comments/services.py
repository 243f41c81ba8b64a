# razorblog/api/comments/services.py

import logging
from dataclasses import asdict
from typing import Dict, Any
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from razorblog.core.exceptions import AlreadyLiked, BlogError, InvalidInput, NotFound, StorageFailure
from razorblog.models.comment import Comment
from razorblog.models.page import Page
from razorblog.utils.datetime_utils import DateTimeUtils
from razorblog.utils.ids import new_id


class CommentService:
    """
    Reader comments on posts.
    - Anyone may comment by supplying a display name.
    - A name can like a given comment at most once.
    """
    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()
        self.comments_ref = self.db.collection('comments')

    def create_comment(self, post_id: str, username: str, content: str) -> Dict[str, Any]:
        if not post_id or not username or not content:
            raise InvalidInput("post_id, username, and content are required")

        new_comment = Comment(
            comment_id=new_id(),
            post_id=post_id,
            username=username,
            content=content,
        )
        try:
            self.comments_ref.document(new_comment.comment_id).set(DateTimeUtils.for_firestore(asdict(new_comment)))
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Comment creation failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return asdict(new_comment)

    def list_comments(self, post_id: str, limit: int = 10, offset: int = 0) -> Page:
        """Comments of one post, newest first."""
        query = (self.comments_ref
                 .where('post_id', '==', post_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .offset(offset)
                 .limit(limit))
        try:
            comments = [asdict(Comment.from_dict(doc.to_dict())) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Comment listing failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return Page(items=comments, limit=limit, offset=offset)

    def like_comment(self, comment_id: str, username: str) -> Dict[str, Any]:
        """
        Records a like by ``username`` and returns the updated comment.

        The membership check and the write share one transaction. Firestore
        re-runs the transaction when the comment changes underneath it, so two
        concurrent likes with the same name cannot both be recorded.
        """
        if not username:
            raise InvalidInput("username is required")

        transaction = self.db.transaction()

        @firestore.transactional
        def _like_in_transaction(transaction, comment_id: str, username: str):
            comment_ref = self.comments_ref.document(comment_id)
            snapshot = comment_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound("Comment not found.")

            comment = Comment.from_dict(snapshot.to_dict())
            if username in comment.liked_by:
                raise AlreadyLiked()

            transaction.update(comment_ref, {
                'like_count': firestore.Increment(1),
                'liked_by': firestore.ArrayUnion([username]),
            })
            comment.like_count += 1
            comment.liked_by.append(username)
            return comment

        try:
            updated = _like_in_transaction(transaction, comment_id, username)
        except BlogError:
            raise
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Comment like failed (comment_id: {comment_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return asdict(updated)

    def delete_comment(self, comment_id: str) -> None:
        comment_ref = self.comments_ref.document(comment_id)
        try:
            if not comment_ref.get().exists:
                raise NotFound("Comment not found.")
            comment_ref.delete()
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Comment deletion failed (comment_id: {comment_id}): {e}", exc_info=True)
            raise StorageFailure() from e
