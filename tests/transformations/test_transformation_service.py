import pytest

from src.gym_management.gym_management.core.constants import MAX_IMAGE_CHARS
from src.gym_management.gym_management.core.enums import Role
from src.gym_management.gym_management.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)


def _submit(container, user, story="Lost 10kg in 4 months"):
    return container.transformation_service.submit(
        user, before_image="data:image/png;base64,AAA", after_image="data:image/png;base64,BBB", story=story
    )


def test_only_members_submit(container, repos):
    visitor = repos.add_user(Role.VISITOR)
    with pytest.raises(AuthorizationError):
        _submit(container, visitor)


def test_submission_validation(container, repos):
    member = repos.add_user(Role.MEMBER)
    with pytest.raises(ValidationError):
        _submit(container, member, story="   ")
    with pytest.raises(ValidationError):
        _submit(container, member, story="x" * 5001)


def test_non_text_fields_are_rejected(container, repos):
    member = repos.add_user(Role.MEMBER)
    with pytest.raises(ValidationError, match="must be text"):
        _submit(container, member, story=5)
    with pytest.raises(ValidationError, match="must be text"):
        container.transformation_service.submit(member, before_image=["a"], after_image="b", story="ok")


def test_oversized_image_message_states_the_limit(container, repos):
    member = repos.add_user(Role.MEMBER)
    with pytest.raises(ValidationError, match="under 10MB"):
        container.transformation_service.submit(
            member, before_image="x" * (MAX_IMAGE_CHARS + 1), after_image="b", story="ok"
        )


def test_one_pending_submission_at_a_time(container, repos):
    member = repos.add_user(Role.MEMBER)
    first = _submit(container, member)

    with pytest.raises(ConflictError):
        _submit(container, member)

    container.transformation_service.approve(first.transformation_id)
    assert _submit(container, member).approved is False


def test_public_listing_shows_only_approved(container, repos):
    member = repos.add_user(Role.MEMBER)
    admin = repos.add_user(Role.ADMIN)
    t = _submit(container, member)
    svc = container.transformation_service

    assert svc.list_for(None) == []
    assert len(svc.list_for(admin, include_pending=True)) == 1
    with pytest.raises(AuthorizationError):
        svc.list_for(member, include_pending=True)
    with pytest.raises(AuthenticationError):
        svc.list_for(None, mine=True)

    approved = svc.approve(t.transformation_id, featured=True)
    assert approved.featured is True

    views = svc.list_for(None)
    assert [v.transformation.transformation_id for v in views] == [t.transformation_id]
    assert views[0].user_name == member.name


def test_delete_is_owner_or_admin(container, repos):
    member = repos.add_user(Role.MEMBER)
    other = repos.add_user(Role.MEMBER)
    t = _submit(container, member)

    with pytest.raises(AuthorizationError):
        container.transformation_service.delete(other, t.transformation_id)
    container.transformation_service.delete(member, t.transformation_id)
    assert repos.transformations.get_by_id(t.transformation_id) is None
