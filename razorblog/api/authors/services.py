# razorblog/api/authors/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from razorblog.core.exceptions import Conflict, NotFound, StorageFailure, Unauthenticated, BlogError
from razorblog.core.passwords import hash_password, verify_password, burn_verification
from razorblog.core.security import TokenService
from razorblog.models.author import Author, EmailClaim, normalize_email
from razorblog.utils.datetime_utils import DateTimeUtils
from razorblog.utils.ids import new_id


class AuthorService:
    """
    Credential store: author records, registration, login and self-service updates.

    Email uniqueness is enforced by claiming an ``author_emails`` document inside
    the same Firestore transaction that writes the author, so two concurrent
    registrations for one address cannot both succeed.
    """
    UPDATABLE_FIELDS = ('name', 'email', 'phone', 'password', 'avatar_url', 'bio')

    def __init__(self, token_service: TokenService, db=None):
        self.db = db if db is not None else firestore.client()
        self.authors_ref = self.db.collection('authors')
        self.emails_ref = self.db.collection('author_emails')
        self.token_service = token_service

    # --- Registration / login ---
    def register(self, name: str, email: str, password: str, phone: Optional[str] = None) -> Author:
        """Creates an author. Raises Conflict if the email is already claimed."""
        email = normalize_email(email)
        new_author = Author(
            author_id=new_id(),
            name=name,
            email=email,
            password_hash=hash_password(password),
            phone=phone or None,
        )
        transaction = self.db.transaction()

        @firestore.transactional
        def _register_in_transaction(transaction, author: Author):
            email_ref = self.emails_ref.document(author.email)
            if email_ref.get(transaction=transaction).exists:
                raise Conflict()
            transaction.set(email_ref, asdict(EmailClaim(author_id=author.author_id)))
            transaction.set(self.authors_ref.document(author.author_id), DateTimeUtils.for_firestore(asdict(author)))

        try:
            _register_in_transaction(transaction, new_author)
        except BlogError:
            raise
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Author registration failed (email: {email}): {e}", exc_info=True)
            raise StorageFailure() from e

        logging.info(f"Author registered (author_id: {new_author.author_id})")
        return new_author

    def authenticate(self, email: str, password: str) -> str:
        """
        Returns the author id for valid credentials.
        An unknown email and a wrong password raise the same Unauthenticated.
        """
        author = self._find_by_email(normalize_email(email))
        if author is None:
            burn_verification(password)
            raise Unauthenticated()
        if not verify_password(password, author.password_hash):
            raise Unauthenticated()
        return author.author_id

    def login(self, email: str, password: str) -> Tuple[str, str]:
        author_id = self.authenticate(email, password)
        return self.token_service.issue(author_id), author_id

    # --- CRUD ---
    def get(self, author_id: str) -> Author:
        try:
            doc = self.authors_ref.document(author_id).get()
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Author lookup failed (author_id: {author_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        if not doc.exists:
            raise NotFound("Author not found.")
        return Author.from_dict(doc.to_dict())

    def update(self, author_id: str, fields: Dict[str, Any]) -> None:
        """
        Partial merge: only the supplied allow-listed fields change.
        A supplied password is re-hashed; an email change moves the email claim.
        """
        update_data = {k: v for k, v in fields.items() if k in self.UPDATABLE_FIELDS}
        if 'password' in update_data:
            update_data['password_hash'] = hash_password(update_data.pop('password'))
        if 'email' in update_data:
            update_data['email'] = normalize_email(update_data['email'])
        update_data['updated_at'] = DateTimeUtils.now()

        transaction = self.db.transaction()

        @firestore.transactional
        def _update_in_transaction(transaction, author_id: str, update_data: Dict[str, Any]):
            author_ref = self.authors_ref.document(author_id)
            snapshot = author_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound("Author not found.")

            old_email = snapshot.to_dict().get('email')
            new_email = update_data.get('email')
            if new_email and new_email != old_email:
                new_claim_ref = self.emails_ref.document(new_email)
                if new_claim_ref.get(transaction=transaction).exists:
                    raise Conflict()
                transaction.set(new_claim_ref, asdict(EmailClaim(author_id=author_id)))
                if old_email:
                    transaction.delete(self.emails_ref.document(old_email))

            transaction.update(author_ref, DateTimeUtils.for_firestore(update_data))

        try:
            _update_in_transaction(transaction, author_id, update_data)
        except BlogError:
            raise
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Author update failed (author_id: {author_id}): {e}", exc_info=True)
            raise StorageFailure() from e

    def delete(self, author_id: str) -> None:
        """Hard delete. Tokens already issued to this author stay valid until they expire."""
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction, author_id: str):
            author_ref = self.authors_ref.document(author_id)
            snapshot = author_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFound("Author not found.")
            email = snapshot.to_dict().get('email')
            transaction.delete(author_ref)
            if email:
                transaction.delete(self.emails_ref.document(email))

        try:
            _delete_in_transaction(transaction, author_id)
        except BlogError:
            raise
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Author deletion failed (author_id: {author_id}): {e}", exc_info=True)
            raise StorageFailure() from e
        logging.info(f"Author deleted (author_id: {author_id})")

    def get_names(self, author_ids) -> Dict[str, str]:
        """Display names for a batch of author ids. Missing authors map to ''."""
        unique_ids = list(dict.fromkeys(author_ids))
        names = {author_id: "" for author_id in unique_ids}
        if not unique_ids:
            return names
        refs = [self.authors_ref.document(author_id) for author_id in unique_ids]
        try:
            for doc in self.db.get_all(refs):
                if doc.exists:
                    names[doc.id] = doc.to_dict().get('name', "")
        except gcp_exceptions.GoogleAPIError as e:
            # Names are decoration; the listing itself still succeeds.
            logging.warning(f"Author name lookup failed for {len(unique_ids)} ids: {e}")
        return names

    def _find_by_email(self, email: str) -> Optional[Author]:
        try:
            query = self.authors_ref.where('email', '==', email).limit(1).stream()
            author_doc = next(query, None)
        except gcp_exceptions.GoogleAPIError as e:
            logging.error(f"Author lookup by email failed: {e}", exc_info=True)
            raise StorageFailure() from e
        if author_doc is None:
            return None
        return Author.from_dict(author_doc.to_dict())
