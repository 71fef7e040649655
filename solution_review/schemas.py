from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from solution_review.models import Submission


def display_name(slug: str) -> str:
    return " ".join(word.capitalize() for word in slug.split("-"))


class ExerciseRef(BaseModel):
    """An exercise as supplied by the exercise catalog: a track and a slug."""

    model_config = ConfigDict(frozen=True)

    track_id: str = Field(min_length=1)
    slug: str = Field(min_length=1)

    @property
    def language(self) -> str:
        return self.track_id

    @property
    def name(self) -> str:
        return display_name(self.slug)


class SubmissionSummary(BaseModel):
    key: str
    user_id: int
    track_id: str
    slug: str
    name: str
    state: str
    version: int
    nit_count: int
    is_liked: bool
    done_at: datetime | None = None
    created_at: datetime


class InboxSummary(BaseModel):
    count: int
    has_alerts: bool
    has_notifications: bool

    @property
    def has_stuff(self) -> bool:
        return self.has_alerts or self.has_notifications


def to_submission_summary(submission: "Submission") -> SubmissionSummary:
    return SubmissionSummary(
        key=submission.key,
        user_id=submission.user_id,
        track_id=submission.track_id,
        slug=submission.slug,
        name=submission.name,
        state=submission.state,
        version=submission.version,
        nit_count=submission.nit_count,
        is_liked=submission.is_liked,
        done_at=submission.done_at,
        created_at=submission.created_at,
    )
