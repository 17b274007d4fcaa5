"""Tests for UserService."""

import pytest

from errors import StorageError, ValidationError
from models.account import Account


class TestUserService:
    """Tests for UserService."""

    def test_create_user(self, services):
        """Test creating a user seeds the default accounts and categories."""
        user = services.users.create("Ana Souza", "ana", email="ana@example.com")

        assert user.id
        assert user.username == "ana"
        assert user.email == "ana@example.com"
        assert [a.id for a in user.accounts] == ["acc1", "acc2", "acc3", "acc4", "acc5"]
        assert len(user.categories) == 14
        assert services.users.find(user.id) == user

    def test_defaults_are_copied(self, services):
        """Test that changing one user's accounts does not affect others."""
        first = services.users.create("Ana", "ana")
        first.accounts.append(Account("acc9", "Savings", "bank"))

        second = services.users.create("Bruno", "bruno")

        assert len(second.accounts) == 5

    def test_find_by_username_case_insensitive(self, services):
        user = services.users.create("Ana", "Ana")

        assert services.users.find_by_username(" ana ") == user
        assert services.users.find_by_username("nobody") is None

    def test_duplicate_username(self, services):
        services.users.create("Ana", "ana")

        with pytest.raises(ValidationError):
            services.users.create("Other Ana", "ANA")

    @pytest.mark.parametrize("name,username", [("", "ana"), ("Ana", " ")])
    def test_name_and_username_required(self, services, name, username):
        with pytest.raises(ValidationError):
            services.users.create(name, username)

    def test_find_all_empty(self, services):
        assert services.users.find_all() == []

    def test_save_user(self, services):
        user = services.users.create("Ana", "ana")
        user.accounts.append(Account("acc9", "Savings", "bank"))

        services.users.save(user)

        assert services.users.find(user.id).find_account("acc9") is not None

    def test_save_unknown_user(self, services, user):
        user.id = "missing"

        with pytest.raises(ValidationError):
            services.users.save(user)

    def test_session(self, services):
        user = services.users.create("Ana", "ana")
        assert services.users.get_session() is None

        services.users.set_session(user)
        assert services.users.get_session() == user

        services.users.clear_session()
        assert services.users.get_session() is None

    def test_corrupted_users(self, services):
        services.store.set("dindin_users", "{not json")

        with pytest.raises(StorageError):
            services.users.find_all()
