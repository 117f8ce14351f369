import pytest

from venue_crm.core.exceptions import AuthorizationError
from venue_crm.core.permissions import has_role, require_role
from venue_crm.schemas.common import UserRole


class TestRoleHierarchy:
    @pytest.mark.parametrize(
        "actor, minimum, allowed",
        [
            ("ADMIN", UserRole.ADMIN, True),
            ("ADMIN", UserRole.STAFF, True),
            ("SALES", UserRole.PROJECT_MANAGER, True),
            ("SALES", UserRole.ADMIN, False),
            ("STAFF", UserRole.STAFF, True),
            ("STAFF", UserRole.SALES, False),
            ("CLIENT", UserRole.STAFF, False),
            ("sales", UserRole.SALES, True),
            ("JANITOR", UserRole.CLIENT, False),
            (None, UserRole.CLIENT, False),
        ],
    )
    def test_has_role(self, actor, minimum, allowed):
        assert has_role(actor, minimum) is allowed

    def test_require_role_raises(self):
        with pytest.raises(AuthorizationError) as exc_info:
            require_role("STAFF", UserRole.ADMIN)

        assert "ADMIN" in exc_info.value.detail

    def test_require_role_passes(self):
        require_role("ADMIN", UserRole.SALES)
