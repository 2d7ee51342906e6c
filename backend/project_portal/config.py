"""
Runtime settings for the project portal backend.

Values come from environment variables and are exposed to routes through
dependency functions so tests can override them per app instance.
"""
import enum
import os


class ProjectWritePolicy(str, enum.Enum):
    """Who may update or delete a project inside a client."""
    TENANT_MEMBER = "tenant_member"
    OWNER_OR_ADMIN = "owner_or_admin"


PROJECT_WRITE_POLICY = ProjectWritePolicy(
    os.getenv("PROJECT_WRITE_POLICY", ProjectWritePolicy.TENANT_MEMBER.value).lower()
)
ENABLE_PROJECT_MEMBERSHIP = os.getenv("ENABLE_PROJECT_MEMBERSHIP", "false").lower() == "true"
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# PUBLIC_INTERFACE
def get_project_write_policy() -> ProjectWritePolicy:
    """Return the configured project update/delete policy."""
    return PROJECT_WRITE_POLICY


# PUBLIC_INTERFACE
def get_membership_enabled() -> bool:
    """Return whether the project membership endpoints are switched on."""
    return ENABLE_PROJECT_MEMBERSHIP
