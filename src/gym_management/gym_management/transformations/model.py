from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Transformation:
    """A before/after story submitted by a member; public once approved."""

    transformation_id: int
    user_id: int
    before_image: str
    after_image: str
    story: str
    approved: bool = False
    featured: bool = False
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TransformationView:
    """Listing row: the submission plus a little about its author."""

    transformation: Transformation
    user_name: Optional[str] = None
    user_role: Optional[str] = None
    member_since: Optional[datetime] = None
