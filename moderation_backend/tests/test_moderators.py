"""
Tests for the moderator registry:
- Adding, updating and removing moderators.
- Permission-set validation.
- Last-moderator invariant.
- /moderators routes.
"""

import pytest
from fastapi.testclient import TestClient
from moderation_backend.main import app
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.core.dependencies import get_engine
from moderation_backend.core.errors import ValidationError, NotFound, PermissionDenied, InvariantViolation
from moderation_backend.authentication.security import get_current_user
from moderation_backend.authentication.schemas import TokenData, UserRole
from moderation_backend.moderators import utils, schemas
from moderation_backend.permissions.schemas import Permission

client = TestClient(app)


@pytest.fixture
def engine():
    engine = ModerationEngine()
    utils.register_admin(engine, schemas.UserProfile(user_id="admin1", username="root"))
    return engine


@pytest.fixture
def auth_user(engine):
    def _set_user(role: str = "admin", user_id: str = "admin1"):
        fake_user = TokenData(user_id=user_id, role=role)
        app.dependency_overrides[get_current_user] = lambda: fake_user
        app.dependency_overrides[get_engine] = lambda: engine
        return fake_user

    yield _set_user

    app.dependency_overrides.clear()


# ────────────────────────────────
# Add
# ────────────────────────────────
def test_add_moderator(engine):
    moderator = utils.add_moderator(
        engine,
        schemas.UserProfile(user_id="mod1", email="mod1@example.com"),
        ["manage_reports", "manage_reports", "manage_tickets"],
    )
    assert moderator.role == UserRole.MODERATOR
    info = moderator.moderator_info
    assert info.permissions == [Permission.MANAGE_REPORTS, Permission.MANAGE_TICKETS]
    assert info.handled_reports == 0
    assert info.average_response_time == 0
    assert info.is_active is True
    assert utils.get_moderator(engine, "mod1").email == "mod1@example.com"


def test_add_moderator_twice(engine):
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports"])
    with pytest.raises(InvariantViolation, match="already"):
        utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_tickets"])


def test_add_moderator_invalid_permissions_are_listed(engine):
    with pytest.raises(ValidationError) as exc:
        utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports", "fly", "nuke"])
    assert "fly, nuke" in str(exc.value)
    assert utils.get_moderator(engine, "mod1") is None


def test_add_moderator_empty_permissions(engine):
    with pytest.raises(ValidationError, match="At least one permission"):
        utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), [])


def test_add_moderator_actor_needs_manage_moderators(engine):
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports"])
    with pytest.raises(PermissionDenied):
        utils.add_moderator(engine, schemas.UserProfile(user_id="mod2"), ["manage_reports"], actor_id="mod1")
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod2"), ["manage_reports"], actor_id="admin1")
    assert len(engine.moderators) == 3


def test_register_admin_is_idempotent(engine):
    utils.register_admin(engine, schemas.UserProfile(user_id="admin1"))
    assert len(engine.moderators) == 1


# ────────────────────────────────
# Update / remove
# ────────────────────────────────
def test_update_permissions_replaces_set(engine):
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports", "manage_users"])
    updated = utils.update_moderator_permissions(engine, "mod1", ["view_analytics"])
    assert updated.moderator_info.permissions == [Permission.VIEW_ANALYTICS]


def test_update_permissions_of_admin_is_not_found(engine):
    """Admins carry no moderator_info to update."""
    with pytest.raises(NotFound):
        utils.update_moderator_permissions(engine, "admin1", ["view_analytics"])


def test_update_permissions_validation_keeps_old_set(engine):
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports"])
    with pytest.raises(ValidationError):
        utils.update_moderator_permissions(engine, "mod1", ["bogus"])
    assert utils.get_moderator(engine, "mod1").moderator_info.permissions == [Permission.MANAGE_REPORTS]


def test_remove_last_moderator_is_blocked(engine):
    with pytest.raises(InvariantViolation, match="last moderator"):
        utils.remove_moderator(engine, "admin1")
    assert len(engine.moderators) == 1


def test_remove_moderator(engine):
    utils.add_moderator(engine, schemas.UserProfile(user_id="mod1"), ["manage_reports"])
    utils.remove_moderator(engine, "mod1")
    assert utils.get_moderator(engine, "mod1") is None
    assert len(engine.moderators) == 1


def test_remove_unknown_moderator(engine):
    with pytest.raises(NotFound):
        utils.remove_moderator(engine, "ghost")


# ────────────────────────────────
# Routes
# ────────────────────────────────
def test_add_moderator_route(auth_user):
    auth_user("admin", "admin1")
    response = client.post("/moderators/", json={"user_id": "mod9", "permissions": ["manage_tickets"]})
    assert response.status_code == 201
    assert response.json()["moderator_info"]["permissions"] == ["manage_tickets"]


def test_add_moderator_route_forbidden_for_users(auth_user):
    auth_user("user", "u1")
    response = client.post("/moderators/", json={"user_id": "mod9", "permissions": ["manage_tickets"]})
    assert response.status_code == 403


def test_remove_last_moderator_route(auth_user):
    auth_user("admin", "admin1")
    response = client.delete("/moderators/admin1")
    assert response.status_code == 409
