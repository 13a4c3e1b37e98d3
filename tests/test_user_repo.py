import pytest

from rolegate.core.errors import DuplicateEmail, NotFound
from rolegate.infra.user_repo import UserRepo


def test_insert_assigns_id_and_default_role(user_repo):
    u = user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    assert u.id
    assert u.role == "user"
    assert user_repo.find_by_email("ann@x.com") == u
    assert user_repo.find_by_id(u.id) == u


def test_records_survive_a_new_repo_instance(user_repo):
    u = user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    again = UserRepo(user_repo.path)
    assert again.find_by_email("ann@x.com") == u


def test_email_lookup_is_exact(user_repo):
    user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    assert user_repo.find_by_email("Ann@x.com") is None
    assert user_repo.find_by_email("") is None


def test_duplicate_email_is_rejected_by_the_store(user_repo):
    user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    with pytest.raises(DuplicateEmail):
        user_repo.insert(name="Other Ann", email="ann@x.com", password_hash="h2")
    assert len(user_repo.list_all()) == 1


def test_update_role_is_idempotent(user_repo):
    u = user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    user_repo.update_role(u.id, "admin")
    user_repo.update_role(u.id, "admin")
    assert user_repo.find_by_id(u.id).role == "admin"


def test_update_role_unknown_id_or_role(user_repo):
    u = user_repo.insert(name="Ann", email="ann@x.com", password_hash="h")
    with pytest.raises(NotFound):
        user_repo.update_role("missing", "admin")
    with pytest.raises(ValueError):
        user_repo.update_role(u.id, "root")


def test_list_all_keeps_insertion_order(user_repo):
    for i in range(3):
        user_repo.insert(name=f"U{i}", email=f"u{i}@x.com", password_hash="h")
    assert [u.name for u in user_repo.list_all()] == ["U0", "U1", "U2"]
