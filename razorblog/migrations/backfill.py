# razorblog/migrations/backfill.py
"""
Out-of-band data backfills. Safe to re-run: documents that already have the
field (or the claim) are left alone.

Usage:
    python -m razorblog.migrations.backfill authors bio --default '""'
    python -m razorblog.migrations.backfill --email-claims
"""

import argparse
import json
import logging
from typing import Any, Tuple

from razorblog.models.author import normalize_email

BATCH_SIZE = 400  # Firestore caps a batch at 500 writes.


def backfill_missing_field(db, collection_name: str, field_name: str, default: Any) -> Tuple[int, int]:
    """
    Sets ``field_name`` to ``default`` on every document of the collection that lacks it.
    Returns ``(scanned, modified)``.
    """
    scanned, modified = 0, 0
    batch = db.batch()
    pending = 0

    for doc in db.collection(collection_name).stream():
        scanned += 1
        if field_name in (doc.to_dict() or {}):
            continue
        batch.update(doc.reference, {field_name: default})
        pending += 1
        modified += 1
        if pending >= BATCH_SIZE:
            batch.commit()
            batch = db.batch()
            pending = 0

    if pending:
        batch.commit()

    logging.info(f"Backfill {collection_name}.{field_name}: scanned {scanned}, modified {modified}")
    return scanned, modified


def backfill_email_claims(db) -> Tuple[int, int]:
    """
    Creates the 'author_emails' claim for authors stored before claims existed.
    When two legacy authors share an email, the first one streamed keeps the claim
    and the other is logged for manual cleanup.
    """
    authors_ref = db.collection('authors')
    emails_ref = db.collection('author_emails')
    scanned, created = 0, 0

    for doc in authors_ref.stream():
        scanned += 1
        data = doc.to_dict() or {}
        email = data.get('email')
        if not email:
            continue
        claim_ref = emails_ref.document(normalize_email(email))
        claim = claim_ref.get()
        if claim.exists:
            if claim.to_dict().get('author_id') != doc.id:
                logging.warning(f"Duplicate email on legacy author (author_id: {doc.id}); claim kept by another author")
            continue
        claim_ref.set({'author_id': doc.id})
        created += 1

    logging.info(f"Email claim backfill: scanned {scanned}, created {created}")
    return scanned, created


def _parse_default(raw: str) -> Any:
    # JSON when it parses ('0', 'true', '[]', '""'), the raw text otherwise.
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def main(argv=None):
    parser = argparse.ArgumentParser(description="Backfill missing fields in Firestore collections.")
    parser.add_argument('collection', nargs='?', help="collection name, e.g. authors")
    parser.add_argument('field', nargs='?', help="field to add where missing, e.g. bio")
    parser.add_argument('--default', default='""', help="value to set (JSON, or plain text)")
    parser.add_argument('--email-claims', action='store_true', help="create missing author email claims")
    args = parser.parse_args(argv)

    if not args.email_claims and not (args.collection and args.field):
        parser.error("either --email-claims or both collection and field are required")

    from razorblog import create_app
    app = create_app()

    if args.email_claims:
        scanned, created = backfill_email_claims(app.db)
        print(f"Scanned {scanned} authors, created {created} email claims")
    if args.collection and args.field:
        scanned, modified = backfill_missing_field(app.db, args.collection, args.field, _parse_default(args.default))
        print(f"Matched {scanned} documents in '{args.collection}'")
        print(f"Modified {modified} documents")


if __name__ == '__main__':
    main()
