# razorblog/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from razorblog.api.authors.services import AuthorService
from razorblog.core.exceptions import NotFound, StorageFailure
from razorblog.models.page import Page
from razorblog.models.post import Post
from razorblog.utils.datetime_utils import DateTimeUtils
from razorblog.utils.ids import new_id


class PostService:
    """
    Posts and the engagement operations on them.

    Reader counting and like/unlike are single atomic field transforms, so
    concurrent viewers and likers never lose or duplicate an update.
    Update and delete act on the id alone; the caller's identity is not
    compared with the post's author.
    """
    UPDATABLE_FIELDS = ('title', 'content', 'image_url', 'category')

    def __init__(self, author_service: AuthorService, db=None):
        self.db = db if db is not None else firestore.client()
        self.posts_ref = self.db.collection('posts')
        self.author_service = author_service

    def create_post(self, author_id: str, title: str, content: str,
                    image_url: Optional[str] = None, category: str = "") -> Dict[str, Any]:
        """``author_id`` must come from the authenticated token, never from the request body."""
        new_post = Post(
            post_id=new_id(),
            author_id=author_id,
            title=title,
            content=content,
            image_url=image_url,
            category=category or "",
        )
        try:
            self.posts_ref.document(new_post.post_id).set(DateTimeUtils.for_firestore(asdict(new_post)))
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post creation failed (author_id: {author_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return self._to_view(new_post)

    def view_post(self, post_id: str) -> Dict[str, Any]:
        """Returns the post with its author's name; counts the view on a best-effort basis."""
        post_ref = self.posts_ref.document(post_id)
        try:
            post_ref.update({'readers': firestore.Increment(1)})
        except gcp_exceptions.NotFound:
            pass  # reported below by the read
        except gcp_exceptions.GoogleAPIError as e:
            logging.warning(f"Reader count increment failed (post_id: {post_id}): {e}")

        post = self._get(post_id)
        names = self.author_service.get_names([post.author_id])
        return self._to_view(post, names.get(post.author_id, ""))

    def update_post(self, post_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        update_data = {k: v for k, v in fields.items() if k in self.UPDATABLE_FIELDS}
        update_data['updated_at'] = DateTimeUtils.now()
        try:
            self.posts_ref.document(post_id).update(DateTimeUtils.for_firestore(update_data))
        except gcp_exceptions.NotFound as e:
            raise NotFound("Post not found.") from e
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post update failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        return self._to_view(self._get(post_id))

    def delete_post(self, post_id: str) -> None:
        post_ref = self.posts_ref.document(post_id)
        self._get(post_id)
        try:
            post_ref.delete()
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post deletion failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        logging.info(f"Post deleted (post_id: {post_id})")

    def list_posts(self, limit: int = 10, offset: int = 0) -> Page:
        """Newest first. Author names for the whole page come from one batched lookup."""
        query = (self.posts_ref
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .offset(offset)
                 .limit(limit))
        posts = self._run(query)
        names = self.author_service.get_names([post.author_id for post in posts])
        items = [self._to_view(post, names.get(post.author_id, "")) for post in posts]
        return Page(items=items, limit=limit, offset=offset)

    def list_by_author(self, author_id: str) -> List[Dict[str, Any]]:
        """All posts of one author, newest first, unpaginated."""
        # Backed by the (author_id, created_at DESC) index in firestore.indexes.json.
        query = (self.posts_ref
                 .where('author_id', '==', author_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        posts = self._run(query)
        name = self.author_service.get_names([author_id]).get(author_id, "")
        return [self._to_view(post, name) for post in posts]

    # --- Likes ---
    def like_post(self, post_id: str, author_id: str) -> None:
        """Set insert. Liking twice leaves one entry."""
        self._update_likes(post_id, firestore.ArrayUnion([author_id]))

    def unlike_post(self, post_id: str, author_id: str) -> None:
        """Set remove. Unliking a post the author never liked changes nothing."""
        self._update_likes(post_id, firestore.ArrayRemove([author_id]))

    def _update_likes(self, post_id: str, transform) -> None:
        try:
            self.posts_ref.document(post_id).update({'liked_by': transform})
        except gcp_exceptions.NotFound as e:
            raise NotFound("Post not found.") from e
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post like update failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e

    # --- Helpers ---
    def _get(self, post_id: str) -> Post:
        try:
            doc = self.posts_ref.document(post_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post lookup failed (post_id: {post_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        if not doc.exists:
            raise NotFound("Post not found.")
        return Post.from_dict(doc.to_dict())

    def _run(self, query) -> List[Post]:
        try:
            return [Post.from_dict(doc.to_dict()) for doc in query.stream()]
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Post query failed: {e}", exc_info=True)
            raise StorageFailure() from e

    @staticmethod
    def _to_view(post: Post, author_name: str = "") -> Dict[str, Any]:
        post_data = asdict(post)
        post_data['like_count'] = post.like_count
        post_data['author_name'] = author_name
        return post_data
