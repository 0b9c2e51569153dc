"""
Tests for the read-only project and user repositories.
"""
import pytest
from unittest.mock import Mock

from task_review.domains import UserRole
from task_review.repositories.directory import MongoProjectRepository, MongoUserRepository


@pytest.fixture
def mock_db_adapter():
    """Create a mock database adapter."""
    adapter = Mock()
    adapter.find_one = Mock(return_value=None)
    adapter.find = Mock(return_value=[])
    return adapter


class TestMongoProjectRepository:
    """Tests for the MongoProjectRepository implementation."""

    def test_init_does_not_write(self, mock_db_adapter):
        """Test that projects are never created by this repository."""
        MongoProjectRepository(mock_db_adapter)
        mock_db_adapter.create_collection.assert_not_called()

    def test_get_by_id(self, mock_db_adapter):
        """Test loading a project."""
        mock_db_adapter.find_one.return_value = {
            "_id": "project-1", "id": "project-1", "name": "Timesheets",
            "manager_id": "manager-1", "employee_ids": ["emp-1"],
        }
        repo = MongoProjectRepository(mock_db_adapter)

        project = repo.get_by_id("project-1")

        assert project.manager_id == "manager-1"
        mock_db_adapter.find_one.assert_called_once_with("projects", {"id": "project-1"})

    def test_get_by_id_not_found(self, mock_db_adapter):
        assert MongoProjectRepository(mock_db_adapter).get_by_id("missing") is None

    def test_find_by_manager(self, mock_db_adapter):
        """Test listing a manager's projects."""
        mock_db_adapter.find.return_value = [
            {"id": "project-1", "name": "Timesheets", "manager_id": "manager-1"},
            {"id": "project-3", "name": "Rota", "manager_id": "manager-1"},
        ]
        repo = MongoProjectRepository(mock_db_adapter)

        projects = repo.find_by_manager("manager-1")

        assert [p.id for p in projects] == ["project-1", "project-3"]
        mock_db_adapter.find.assert_called_once_with("projects", {"manager_id": "manager-1"})


class TestMongoUserRepository:
    """Tests for the MongoUserRepository implementation."""

    def test_get_by_id(self, mock_db_adapter):
        """Test loading a user."""
        mock_db_adapter.find_one.return_value = {
            "id": "admin-1", "name": "Ada", "email": "ada@example.com", "role": "admin"}
        repo = MongoUserRepository(mock_db_adapter)

        assert repo.get_by_id("admin-1").role is UserRole.ADMIN

    def test_get_many(self, mock_db_adapter):
        """Test bulk lookup keyed by ID."""
        mock_db_adapter.find.return_value = [
            {"id": "emp-1", "name": "Eve"},
            {"id": "emp-2", "name": "Eli"},
        ]
        repo = MongoUserRepository(mock_db_adapter)

        users = repo.get_many(["emp-1", "emp-2", "emp-1"])

        assert set(users) == {"emp-1", "emp-2"}
        assert users["emp-2"].role is UserRole.EMPLOYEE
        query = mock_db_adapter.find.call_args[0][1]
        assert sorted(query["id"]["$in"]) == ["emp-1", "emp-2"]

    def test_get_many_empty(self, mock_db_adapter):
        """Test that an empty lookup skips the query."""
        assert MongoUserRepository(mock_db_adapter).get_many([]) == {}
        mock_db_adapter.find.assert_not_called()

    def test_find_by_role(self, mock_db_adapter):
        """Test listing users by role."""
        repo = MongoUserRepository(mock_db_adapter)

        repo.find_by_role("admin")

        mock_db_adapter.find.assert_called_once_with("users", {"role": "admin"})
