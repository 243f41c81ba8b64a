# razorblog/api/authors/test_author_services.py
import pytest

from razorblog.core.exceptions import Conflict, NotFound, StorageFailure, Unauthenticated
from razorblog.core.passwords import verify_password


def test_register_stores_hash_not_password(author_service, db):
    author = author_service.register("Alice", "Alice@Example.com ", "secret1")

    stored = db.collection('authors').document(author.author_id).get().to_dict()
    assert stored['email'] == "alice@example.com"
    assert 'password' not in stored
    assert stored['password_hash'] != "secret1"
    assert verify_password("secret1", stored['password_hash'])
    assert db.collection('author_emails').document("alice@example.com").get().to_dict() == {
        'author_id': author.author_id
    }


def test_register_duplicate_email_conflicts(author_service, db):
    author_service.register("Alice", "a@x.com", "secret1")
    with pytest.raises(Conflict):
        author_service.register("Alicia", "A@X.com", "secret2")
    assert len(list(db.collection('authors').stream())) == 1


def test_authenticate_and_login(author_service, token_service):
    author = author_service.register("Alice", "a@x.com", "secret1")
    assert author_service.authenticate("a@x.com", "secret1") == author.author_id

    token, author_id = author_service.login("A@x.com", "secret1")
    assert author_id == author.author_id
    assert token_service.validate(token) == author.author_id


def test_unknown_email_and_wrong_password_look_the_same(author_service):
    author_service.register("Alice", "a@x.com", "secret1")

    with pytest.raises(Unauthenticated) as wrong_password:
        author_service.authenticate("a@x.com", "wrong-pass")
    with pytest.raises(Unauthenticated) as unknown_email:
        author_service.authenticate("nobody@x.com", "secret1")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()


def test_update_rehashes_password_and_moves_email(author_service, db):
    author = author_service.register("Alice", "a@x.com", "secret1")
    author_service.update(author.author_id, {
        'password': "newsecret",
        'email': "New@X.com",
        'bio': "hello",
        'created_at': "ignored",
    })

    updated = author_service.get(author.author_id)
    assert updated.bio == "hello"
    assert updated.email == "new@x.com"
    assert updated.name == "Alice"
    assert updated.created_at == author.created_at
    assert verify_password("newsecret", updated.password_hash)
    assert not db.collection('author_emails').document("a@x.com").get().exists
    assert db.collection('author_emails').document("new@x.com").get().exists

    with pytest.raises(Unauthenticated):
        author_service.authenticate("new@x.com", "secret1")
    assert author_service.authenticate("new@x.com", "newsecret") == author.author_id


def test_update_to_taken_email_conflicts(author_service):
    alice = author_service.register("Alice", "a@x.com", "secret1")
    author_service.register("Bob", "b@x.com", "secret1")
    with pytest.raises(Conflict):
        author_service.update(alice.author_id, {'email': "b@x.com"})
    assert author_service.get(alice.author_id).email == "a@x.com"


def test_update_missing_author(author_service):
    with pytest.raises(NotFound):
        author_service.update("0b6a1d6c-2f7e-4b8e-9a3c-5d4e3f2a1b0c", {'bio': "x"})


def test_delete_releases_email(author_service):
    author = author_service.register("Alice", "a@x.com", "secret1")
    author_service.delete(author.author_id)

    with pytest.raises(NotFound):
        author_service.get(author.author_id)
    with pytest.raises(NotFound):
        author_service.delete(author.author_id)
    # The address can be registered again.
    author_service.register("Alice", "a@x.com", "secret1")


def test_get_names(author_service):
    alice = author_service.register("Alice", "a@x.com", "secret1")
    missing = "0b6a1d6c-2f7e-4b8e-9a3c-5d4e3f2a1b0c"
    assert author_service.get_names([alice.author_id, missing, alice.author_id]) == {
        alice.author_id: "Alice",
        missing: "",
    }
    assert author_service.get_names([]) == {}


def test_storage_failures_are_wrapped(author_service, db):
    db.fail('commit', 'query')
    with pytest.raises(StorageFailure):
        author_service.register("Alice", "a@x.com", "secret1")
    with pytest.raises(StorageFailure):
        author_service.authenticate("a@x.com", "secret1")


def test_competing_registration_claims_email_once(author_service, db):
    # A second registration for the same address lands between our read and our commit.
    db.before_next_commit(lambda: author_service.register("Bob", "a@x.com", "secret2"))
    with pytest.raises(Conflict):
        author_service.register("Alice", "a@x.com", "secret1")

    authors = [doc.to_dict() for doc in db.collection('authors').stream()]
    assert [a['name'] for a in authors] == ["Bob"]
    claim = db.collection('author_emails').document("a@x.com").get().to_dict()
    assert claim['author_id'] == authors[0]['author_id']
