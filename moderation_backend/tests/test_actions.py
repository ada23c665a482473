"""
test_actions.py – Tests for moderation actions (warnings, bans, removals).

Covers:
- Creation rules and target-based capabilities
- Deactivation and auto-expiry of temporary actions
- Per-user moderation history
"""

import pytest
from datetime import datetime, timedelta, timezone
from moderation_backend.core.engine import ModerationEngine
from moderation_backend.core.errors import ValidationError, NotFound, PermissionDenied
from moderation_backend.moderators.schemas import UserProfile
from moderation_backend.moderators import utils as moderator_utils
from moderation_backend.actions import utils, schemas


@pytest.fixture
def clock():
    class _Clock:
        now = datetime(2025, 2, 1, tzinfo=timezone.utc)

        def __call__(self):
            return self.now

    return _Clock()


@pytest.fixture
def engine(clock):
    engine = ModerationEngine(clock=clock)
    moderator_utils.register_admin(engine, UserProfile(user_id="admin1"))
    moderator_utils.add_moderator(engine, UserProfile(user_id="mod_users"), ["manage_users"])
    moderator_utils.add_moderator(engine, UserProfile(user_id="mod_listings"), ["manage_listings"])
    return engine


def _action(**overrides):
    data = {
        "moderator_id": "mod_users",
        "target_user_id": "u1",
        "action": "warning",
        "reason": "Abusive language in chat",
    }
    data.update(overrides)
    return schemas.ActionCreate(**data)


# ────────────────────────────────
# Creation
# ────────────────────────────────
def test_create_warning(engine):
    action = utils.create_moderation_action(engine, _action())
    assert action.is_active is True
    assert action.expires_at is None
    assert action.id.startswith("action_")


def test_target_capability_is_enforced(engine):
    with pytest.raises(PermissionDenied) as exc:
        utils.create_moderation_action(engine, _action(
            moderator_id="mod_users", target_user_id=None, target_listing_id="l1", action="listing_removal",
        ))
    assert exc.value.capability == "manage_listings"
    assert len(engine.moderation_actions) == 0


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"target_user_id": None}, ValidationError),
        ({"action": "shame"}, ValidationError),
        ({"reason": "rude"}, ValidationError),
        ({"action": "temporary_ban"}, ValidationError),
        ({"action": "temporary_ban", "duration_hours": 0}, ValidationError),
        ({"moderator_id": "ghost"}, NotFound),
        ({"report_id": "report_missing"}, NotFound),
    ],
)
def test_create_action_rejections(engine, overrides, error):
    with pytest.raises(error):
        utils.create_moderation_action(engine, _action(**overrides))
    assert len(engine.moderation_actions) == 0


# ────────────────────────────────
# Deactivation / expiry
# ────────────────────────────────
def test_deactivate_action(engine):
    action = utils.create_moderation_action(engine, _action())
    assert utils.deactivate_moderation_action(engine, action.id).is_active is False
    with pytest.raises(NotFound):
        utils.deactivate_moderation_action(engine, "action_missing")


def test_temporary_ban_expires(engine, clock):
    ban = utils.create_moderation_action(engine, _action(action="temporary_ban", duration_hours=24))
    permanent = utils.create_moderation_action(engine, _action(action="permanent_ban"))
    assert ban.expires_at == clock.now + timedelta(hours=24)

    clock.now = clock.now + timedelta(hours=23)
    assert utils.expire_moderation_actions(engine) == []

    clock.now = clock.now + timedelta(hours=2)
    expired = utils.expire_moderation_actions(engine)
    assert [a.id for a in expired] == [ban.id]

    history = {a.id: a.is_active for a in utils.get_user_moderation_history(engine, "u1")}
    assert history == {ban.id: False, permanent.id: True}


def test_history_is_per_user_newest_first(engine, clock):
    first = utils.create_moderation_action(engine, _action())
    clock.now = clock.now + timedelta(minutes=10)
    second = utils.create_moderation_action(engine, _action(action="account_restriction"))
    utils.create_moderation_action(engine, _action(target_user_id="u2"))

    history = utils.get_user_moderation_history(engine, "u1")
    assert [a.id for a in history] == [second.id, first.id]
