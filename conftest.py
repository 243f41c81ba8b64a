# conftest.py
"""
Shared pytest fixtures.

``FakeFirestore`` is an in-memory stand-in for ``firestore.client()`` covering
what the services use: documents, equality filters with ordering/offset/limit,
``Increment``/``ArrayUnion``/``ArrayRemove`` transforms, batches and
transactions driven by ``firestore.transactional``. ``fail()`` makes chosen
operations raise ``ServiceUnavailable`` to exercise storage-failure paths.
Transactions abort with ``Aborted`` when a document they read was written
before they commit, and ``before_next_commit()`` injects such a competing write.
"""

import copy
import itertools
import uuid
from collections import defaultdict

import pytest
from firebase_admin import firestore
from google.api_core import exceptions as gcp_exceptions

from razorblog import create_app
from razorblog.api.authors.services import AuthorService
from razorblog.api.comments.services import CommentService
from razorblog.api.posts.services import PostService
from razorblog.api.shares.services import ShareService
from razorblog.core.security import TokenService

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"


def _apply_update(current, updates):
    result = copy.deepcopy(current)
    for key, value in updates.items():
        if isinstance(value, firestore.Increment):
            result[key] = result.get(key, 0) + value.value
        elif isinstance(value, firestore.ArrayUnion):
            existing = list(result.get(key) or [])
            for item in value.values:
                if item not in existing:
                    existing.append(item)
            result[key] = existing
        elif isinstance(value, firestore.ArrayRemove):
            result[key] = [item for item in (result.get(key) or []) if item not in value.values]
        else:
            result[key] = copy.deepcopy(value)
    return result


class FakeDocumentSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field_path):
        return copy.deepcopy(self._data.get(field_path))


class FakeDocumentReference:
    def __init__(self, client, collection_name, doc_id):
        self._client = client
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def path(self):
        return f"{self._collection_name}/{self.id}"

    @property
    def _docs(self):
        return self._client._store[self._collection_name]

    def get(self, transaction=None):
        self._client._check('get')
        if transaction is not None:
            transaction._read_versions.setdefault(self.path, self._client._versions[self.path])
        return FakeDocumentSnapshot(self, self._docs.get(self.id))

    def set(self, document_data, merge=False):
        self._client._check('set')
        self._write('set', document_data)

    def create(self, document_data):
        self._client._check('set')
        self._write('create', document_data)

    def update(self, field_updates):
        self._client._check('update')
        self._write('update', field_updates)

    def delete(self):
        self._client._check('delete')
        self._write('delete', None)

    def _write(self, op, data):
        self._client._versions[self.path] += 1
        if op == 'set':
            self._docs[self.id] = copy.deepcopy(data)
        elif op == 'create':
            if self.id in self._docs:
                raise gcp_exceptions.AlreadyExists(f"Document already exists: {self.path}")
            self._docs[self.id] = copy.deepcopy(data)
        elif op == 'update':
            if self.id not in self._docs:
                raise gcp_exceptions.NotFound(f"No document to update: {self.path}")
            self._docs[self.id] = _apply_update(self._docs[self.id], data)
        elif op == 'delete':
            self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, client, collection_name, filters=(), orders=(), offset=0, limit=None):
        self._client = client
        self._collection_name = collection_name
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes):
        params = dict(filters=self._filters, orders=self._orders, offset=self._offset, limit=self._limit)
        params.update(changes)
        return FakeQuery(self._client, self._collection_name, **params)

    def where(self, field_path, op_string, value):
        if op_string not in ('==', 'in'):
            raise NotImplementedError(op_string)
        return self._copy(filters=self._filters + ((field_path, op_string, value),))

    def order_by(self, field_path, direction=firestore.Query.ASCENDING):
        return self._copy(orders=self._orders + ((field_path, direction),))

    def offset(self, num_to_skip):
        return self._copy(offset=num_to_skip)

    def limit(self, count):
        return self._copy(limit=count)

    def _matches(self, data):
        for field_path, op_string, value in self._filters:
            if op_string == '==' and data.get(field_path) != value:
                return False
            if op_string == 'in' and data.get(field_path) not in value:
                return False
        return True

    def stream(self, transaction=None):
        self._client._check('query')
        docs = self._client._store[self._collection_name]
        rows = [(doc_id, data) for doc_id, data in docs.items() if self._matches(data)]
        for field_path, direction in reversed(self._orders):
            rows.sort(key=lambda row: row[1].get(field_path), reverse=direction == firestore.Query.DESCENDING)
        rows = rows[self._offset:]
        if self._limit is not None:
            rows = rows[:self._limit]
        for doc_id, data in rows:
            yield FakeDocumentSnapshot(FakeDocumentReference(self._client, self._collection_name, doc_id), data)

    def get(self, transaction=None):
        return list(self.stream())


class FakeCollectionReference(FakeQuery):
    def __init__(self, client, collection_name):
        super().__init__(client, collection_name)
        self.id = collection_name

    def document(self, document_id=None):
        return FakeDocumentReference(self._client, self._collection_name, document_id or uuid.uuid4().hex[:20])


class FakeWriteBatch:
    def __init__(self, client):
        self._client = client
        self._writes = []

    def set(self, reference, document_data, merge=False):
        self._writes.append(('set', reference, document_data))

    def create(self, reference, document_data):
        self._writes.append(('create', reference, document_data))

    def update(self, reference, field_updates):
        self._writes.append(('update', reference, field_updates))

    def delete(self, reference):
        self._writes.append(('delete', reference, None))

    def commit(self):
        """All writes apply, or none do."""
        self._client._check('commit')
        saved = copy.deepcopy(self._client._store)
        try:
            for op, reference, data in self._writes:
                reference._write(op, data)
        except Exception:
            self._client._store = saved
            raise
        results = [object() for _ in self._writes]
        self._writes = []
        return results


class FakeTransaction(FakeWriteBatch):
    """Duck-types the private hooks ``firestore.transactional`` drives."""
    _ids = itertools.count(1)

    def __init__(self, client, max_attempts=5):
        super().__init__(client)
        self._max_attempts = max_attempts
        self._read_only = False
        self._id = None
        self._read_versions = {}

    @property
    def id(self):
        return self._id

    @property
    def in_progress(self):
        return self._id is not None

    def _clean_up(self):
        self._writes = []
        self._id = None
        self._read_versions = {}

    def _begin(self, retry_id=None):
        self._id = str(next(self._ids)).encode()

    def _rollback(self):
        self._clean_up()

    def _commit(self):
        """Aborts, like Firestore, when a document read in the transaction changed since."""
        try:
            self._client._run_commit_hooks()
            for path, version in self._read_versions.items():
                if self._client._versions[path] != version:
                    raise gcp_exceptions.Aborted(f"Contention on {path}")
            return self.commit()
        finally:
            self._clean_up()

    def get(self, ref_or_query):
        if isinstance(ref_or_query, FakeDocumentReference):
            return ref_or_query.get(transaction=self)
        return ref_or_query.stream(transaction=self)


class FakeFirestore:
    def __init__(self):
        self._store = defaultdict(dict)
        self._failures = set()
        self._versions = defaultdict(int)
        self._commit_hooks = []

    def collection(self, collection_name):
        return FakeCollectionReference(self, collection_name)

    def get_all(self, references, field_paths=None, transaction=None):
        self._check('get')
        for reference in references:
            yield reference.get(transaction=transaction)

    def batch(self):
        return FakeWriteBatch(self)

    def transaction(self, **kwargs):
        return FakeTransaction(self, **kwargs)

    def fail(self, *operations):
        """Makes the named operations ('get', 'set', 'update', 'delete', 'query', 'commit') fail."""
        self._failures.update(operations)

    def recover(self):
        self._failures.clear()

    def before_next_commit(self, hook):
        """Runs ``hook`` once, just before the next transaction commits (a competing writer)."""
        self._commit_hooks.append(hook)

    def _run_commit_hooks(self):
        while self._commit_hooks:
            self._commit_hooks.pop(0)()

    def _check(self, operation):
        if operation in self._failures:
            raise gcp_exceptions.ServiceUnavailable(f"simulated outage during {operation}")


# =====================================================================================
# Fixtures
# =====================================================================================

@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET)


@pytest.fixture
def author_service(db, token_service):
    return AuthorService(token_service=token_service, db=db)


@pytest.fixture
def post_service(db, author_service):
    return PostService(author_service=author_service, db=db)


@pytest.fixture
def comment_service(db):
    return CommentService(db=db)


@pytest.fixture
def share_service(db):
    return ShareService(db=db)


@pytest.fixture
def app(db):
    return create_app(config_name='testing', db=db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register_and_login(client):
    """Registers an author over HTTP and returns ``(author_id, headers)``."""
    def _register_and_login(email="a@x.com", password="secret1", name="Alice"):
        response = client.post('/api/authors/register', json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.get_json()
        response = client.post('/api/authors/login', json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        body = response.get_json()
        return body['author_id'], {"Authorization": f"Bearer {body['token']}"}
    return _register_and_login
