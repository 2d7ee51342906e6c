"""
Project membership API tests.

The membership endpoints are switched off by default; most tests enable
them through a dependency override.
"""
import pytest
from uuid import uuid4
from fastapi import status

from project_portal.api.main import app
from project_portal.config import get_membership_enabled
from .test_base import BaseAPITest


@pytest.fixture
def membership_enabled(client):
    app.dependency_overrides[get_membership_enabled] = lambda: True
    yield
    app.dependency_overrides.pop(get_membership_enabled, None)


class TestMembershipDisabled(BaseAPITest):

    def test_endpoints_hidden_by_default(self, client, project_a, admin_a_headers, member_a):
        base = f"/api/projects/{project_a['id']}/users"

        self.assert_not_found(client.get(base, headers=admin_a_headers))
        self.assert_not_found(client.post(
            base, json={"userId": member_a["user"]["id"], "role": "developer"}, headers=admin_a_headers
        ))


@pytest.mark.usefixtures("membership_enabled")
class TestMembership(BaseAPITest):
    """Test cases for assigning users to projects."""

    def _assign(self, client, project_id, user_id, headers, role="developer"):
        return client.post(
            f"/api/projects/{project_id}/users",
            json={"userId": user_id, "role": role},
            headers=headers
        )

    def test_creator_listed_as_owner(self, client, project_a, admin_a, member_a_headers):
        result = client.get(f"/api/projects/{project_a['id']}/users", headers=member_a_headers)

        self.assert_success_response(result)
        members = result.json()
        assert len(members) == 1
        assert members[0]["userId"] == admin_a["user"]["id"]
        assert members[0]["role"] == "owner"
        assert members[0]["user"]["email"] == admin_a["user"]["email"]

    def test_admin_assigns_member(self, client, project_a, member_a, admin_a_headers):
        result = self._assign(client, project_a["id"], member_a["user"]["id"], admin_a_headers)

        self.assert_success_response(result, status.HTTP_201_CREATED)
        assert result.json()["projectId"] == project_a["id"]
        assert result.json()["role"] == "developer"

    def test_duplicate_assignment_conflicts(self, client, project_a, member_a, admin_a_headers):
        self._assign(client, project_a["id"], member_a["user"]["id"], admin_a_headers)

        result = self._assign(client, project_a["id"], member_a["user"]["id"], admin_a_headers)

        self.assert_conflict(result)

    def test_cannot_assign_user_of_other_client(self, client, project_a, admin_b, admin_a_headers):
        result = self._assign(client, project_a["id"], admin_b["user"]["id"], admin_a_headers)

        self.assert_not_found(result, "User not found")

    def test_member_cannot_assign(self, client, project_a, member_a, member_a_headers):
        result = self._assign(client, project_a["id"], member_a["user"]["id"], member_a_headers)

        self.assert_forbidden(result)

    def test_invalid_project_role(self, client, project_a, member_a, admin_a_headers):
        result = self._assign(client, project_a["id"], member_a["user"]["id"], admin_a_headers, role="boss")

        self.assert_validation_error(result, "role")

    def test_other_client_cannot_list(self, client, project_a, admin_b_headers):
        result = client.get(f"/api/projects/{project_a['id']}/users", headers=admin_b_headers)

        self.assert_not_found(result, "Project not found")

    def test_update_role(self, client, project_a, member_a, admin_a_headers):
        user_id = member_a["user"]["id"]
        self._assign(client, project_a["id"], user_id, admin_a_headers, role="viewer")

        result = client.put(
            f"/api/projects/{project_a['id']}/users/{user_id}",
            json={"role": "owner"},
            headers=admin_a_headers
        )

        self.assert_success_response(result)
        assert result.json()["role"] == "owner"

    def test_update_unknown_assignment(self, client, project_a, admin_a_headers):
        result = client.put(
            f"/api/projects/{project_a['id']}/users/{uuid4()}",
            json={"role": "viewer"},
            headers=admin_a_headers
        )

        self.assert_not_found(result, "Project assignment not found")

    def test_remove_member(self, client, project_a, member_a, admin_a_headers):
        user_id = member_a["user"]["id"]
        self._assign(client, project_a["id"], user_id, admin_a_headers)

        result = client.delete(f"/api/projects/{project_a['id']}/users/{user_id}", headers=admin_a_headers)

        self.assert_success_response(result)
        remaining = client.get(f"/api/projects/{project_a['id']}/users", headers=admin_a_headers).json()
        assert user_id not in [member["userId"] for member in remaining]
