"""Tests for the reported-username store (SQLite storage layer)."""

import pytest

from github_weekly_report.tools.user_store import SqliteUserStore


@pytest.fixture
def store(tmp_path) -> SqliteUserStore:
    return SqliteUserStore(tmp_path / "nested" / "users.db")


class TestContainsAndInsert:
    def test_first_sighting_is_new(self, store):
        assert store.contains_and_insert("alice") is True

    def test_second_sighting_is_not_new(self, store):
        store.contains_and_insert("alice")
        assert store.contains_and_insert("alice") is False

    def test_keys_are_independent(self, store):
        store.contains_and_insert("alice")
        assert store.contains_and_insert("bob") is True

    def test_creates_parent_directory(self, store):
        store.contains_and_insert("alice")
        assert store.db_file.exists()


class TestPersistence:
    def test_survives_reopen(self, tmp_path):
        db_file = tmp_path / "users.db"
        SqliteUserStore(db_file).contains_and_insert("alice")

        reopened = SqliteUserStore(db_file)
        assert reopened.contains_and_insert("alice") is False
        assert reopened.list_users() == ["alice"]

    def test_list_users_in_first_seen_order(self, store):
        for name in ("carol", "alice", "bob", "alice"):
            store.contains_and_insert(name)
        assert store.list_users() == ["carol", "alice", "bob"]

    def test_empty(self, store):
        assert store.list_users() == []
