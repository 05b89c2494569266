import pytest

from src.gym_management.gym_management.core.enums import Mood, Role
from src.gym_management.gym_management.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.gym_management.gym_management.progress.service import compute_bmi


def test_compute_bmi():
    assert compute_bmi(70, 175) == 22.86
    assert compute_bmi(70, None) is None
    assert compute_bmi(70, 0) is None


def test_create_entry(container, repos, fixed_now):
    member = repos.add_user(Role.MEMBER)

    entry = container.progress_service.create(
        member,
        {
            "weight": "80",
            "height": 180,
            "measurements": {"waist": "86", "unknown": 1},
            "strength_metrics": {"squat": 120, "notes": " felt strong "},
            "mood": "good",
            "energy": 7,
        },
        now=fixed_now,
    )

    assert entry.user_id == member.user_id
    assert entry.entry_date == fixed_now
    assert entry.bmi == 24.69
    assert entry.measurements == {"waist": 86.0}
    assert entry.strength_metrics == {"squat": 120.0, "notes": "felt strong"}
    assert entry.mood == Mood.GOOD


def test_visitors_cannot_log_progress(container, repos):
    visitor = repos.add_user(Role.VISITOR)
    with pytest.raises(AuthorizationError):
        container.progress_service.create(visitor, {"weight": 70})


def test_create_validation(container, repos):
    member = repos.add_user(Role.MEMBER)
    with pytest.raises(ValidationError, match="Weight is required"):
        container.progress_service.create(member, {})
    with pytest.raises(ValidationError):
        container.progress_service.create(member, {"weight": 70, "energy": 11})
    with pytest.raises(ValidationError):
        container.progress_service.create(member, {"weight": 70, "mood": "ecstatic"})


def test_list_is_owner_or_admin(container, repos, fixed_now):
    member = repos.add_user(Role.MEMBER)
    other = repos.add_user(Role.MEMBER)
    admin = repos.add_user(Role.ADMIN)
    container.progress_service.create(member, {"weight": 70, "date": "2026-03-01"})
    container.progress_service.create(member, {"weight": 69, "date": "2026-03-08"})

    entries = container.progress_service.list_for(member, member.user_id)

    assert [e.weight for e in entries] == [69.0, 70.0]
    assert len(container.progress_service.list_for(admin, member.user_id)) == 2
    with pytest.raises(AuthorizationError):
        container.progress_service.list_for(other, member.user_id)


def test_update_merges_maps_and_recomputes_bmi(container, repos, fixed_now):
    member = repos.add_user(Role.MEMBER)
    entry = container.progress_service.create(
        member, {"weight": 80, "measurements": {"waist": 90, "chest": 100}}, now=fixed_now
    )

    updated = container.progress_service.update(
        member, entry.entry_id, {"weight": 75, "height": 175, "measurements": {"waist": 85}}
    )

    assert updated.weight == 75.0
    assert updated.measurements == {"waist": 85.0, "chest": 100.0}
    assert updated.bmi == 24.49


def test_only_owner_can_update_or_delete(container, repos, fixed_now):
    member = repos.add_user(Role.MEMBER)
    admin = repos.add_user(Role.ADMIN)
    entry = container.progress_service.create(member, {"weight": 70}, now=fixed_now)

    with pytest.raises(AuthorizationError):
        container.progress_service.update(admin, entry.entry_id, {"weight": 60})
    with pytest.raises(AuthorizationError):
        container.progress_service.delete(admin, entry.entry_id)

    container.progress_service.delete(member, entry.entry_id)
    with pytest.raises(NotFoundError):
        container.progress_service.delete(member, entry.entry_id)
