from types import SimpleNamespace

import pytest

from josm.permissions import ROLE_PERMS, has_permission
from josm.models.user import ROLES


def _user(role, authenticated=True):
    return SimpleNamespace(role=role, is_authenticated=authenticated)


def test_every_role_has_an_entry():
    assert set(ROLE_PERMS) == set(ROLES)


def test_admin_holds_everything():
    assert has_permission(_user("admin"), "manage_finished_boards")
    assert has_permission(_user("admin"), "anything_at_all")


@pytest.mark.parametrize("role, perm, allowed", [
    ("store_keeper", "approve_requests", True),
    ("store_keeper", "manage_finished_boards", False),
    ("supervisor", "manage_job_cards", True),
    ("supervisor", "approve_requests", False),
    ("worker", "update_fabrication", True),
    ("worker", "manage_job_cards", False),
    ("sales_warehouse", "manage_customer_goods", True),
    ("sales_warehouse", "view_materials", False),
])
def test_role_table(role, perm, allowed):
    assert has_permission(_user(role), perm) is allowed


def test_anonymous_has_nothing():
    assert not has_permission(None, "view_materials")
    assert not has_permission(_user("admin", authenticated=False), "view_materials")


@pytest.mark.parametrize("role", ["store_keeper", "supervisor", "worker", "sales_warehouse"])
def test_manage_users_is_admin_only(role):
    assert has_permission(_user("admin"), "manage_users")
    assert not has_permission(_user(role), "manage_users")
