from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_max_length
from ..core.constants import MAX_IMAGE_CHARS, MAX_STORY_CHARS
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..users.model import User
from .model import Transformation, TransformationView
from .repository import TransformationRepository

logger = logging.getLogger(__name__)


class TransformationService:
    def __init__(self, transformations: TransformationRepository):
        self._transformations = transformations

    def _get(self, transformation_id: int) -> Transformation:
        t = self._transformations.get_by_id(transformation_id)
        if not t:
            raise NotFoundError("Transformation not found")
        return t

    def submit(
        self,
        actor: User,
        *,
        before_image: Optional[str],
        after_image: Optional[str],
        story: Optional[str],
    ) -> Transformation:
        if not actor.is_member:
            raise AuthorizationError("Only members can submit transformations")
        if not before_image or not after_image or not story:
            raise ValidationError("Before image, after image and story are required")
        if not all(isinstance(v, str) for v in (before_image, after_image, story)):
            raise ValidationError("Before image, after image and story must be text")
        if not story.strip():
            raise ValidationError("Before image, after image and story are required")
        if len(before_image) > MAX_IMAGE_CHARS or len(after_image) > MAX_IMAGE_CHARS:
            raise ValidationError(
                f"Image size too large. Each image must be under {MAX_IMAGE_CHARS // (1024 * 1024)}MB once encoded."
            )
        story = require_max_length(story.strip(), "Story", MAX_STORY_CHARS)

        if self._transformations.has_pending(actor.user_id):
            raise ConflictError("You already have a pending submission")

        transformation_id = self._transformations.create(
            user_id=actor.user_id,
            before_image=before_image,
            after_image=after_image,
            story=story,
        )
        logger.info("User %s submitted transformation %s", actor.user_id, transformation_id)
        return self._get(transformation_id)

    def list_for(
        self,
        actor: Optional[User],
        *,
        include_pending: bool = False,
        mine: bool = False,
    ) -> list[TransformationView]:
        is_admin = actor is not None and actor.is_admin
        if include_pending and not is_admin and not mine:
            raise AuthorizationError("Admin access required")
        if mine and actor is None:
            raise AuthenticationError("Please login to view your submissions")

        return list(
            self._transformations.list_views(
                approved_only=not include_pending,
                user_id=actor.user_id if mine and actor is not None else None,
            )
        )

    def approve(self, transformation_id: int, *, featured: bool = False) -> Transformation:
        t = self._get(transformation_id)
        self._transformations.approve(t.transformation_id, featured=bool(featured))
        logger.info("Transformation %s approved (featured=%s)", transformation_id, bool(featured))
        return self._get(transformation_id)

    def delete(self, actor: User, transformation_id: int) -> None:
        t = self._get(transformation_id)
        if t.user_id != actor.user_id and not actor.is_admin:
            raise AuthorizationError("Not authorized to delete this transformation")
        self._transformations.delete_by_id(t.transformation_id)
