from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, NamedTuple

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from solution_review.db import Base
from solution_review.schemas import ExerciseRef, display_name


class SubmissionState(StrEnum):
    PENDING = "pending"
    NEEDS_INPUT = "needs_input"
    HIBERNATING = "hibernating"
    DONE = "done"
    SUPERSEDED = "superseded"


# Collection-level "pending": awaiting review or awaiting the submitter.
PENDING_OR_NEEDS_INPUT = (SubmissionState.PENDING.value, SubmissionState.NEEDS_INPUT.value)


class NotificationItemType(StrEnum):
    SUBMISSION = "Submission"


class ItemRef(NamedTuple):
    kind: NotificationItemType
    id: int


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submissions: Mapped[list["Submission"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    alerts: Mapped[list["Alert"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    notifications: Mapped[list["Notification"]] = relationship(back_populates="user", cascade="all, delete-orphan")


class Submission(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        CheckConstraint(
            "state IN ('pending','needs_input','hibernating','done','superseded')",
            name="ck_submissions_state",
        ),
        CheckConstraint("nit_count >= 0", name="ck_submissions_nit_count"),
        CheckConstraint("version >= 1", name="ck_submissions_version"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    language: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    solution: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default=SubmissionState.PENDING.value)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    nit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_liked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    done_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user: Mapped["User"] = relationship(back_populates="submissions")
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="submission", cascade="all, delete-orphan", order_by="Comment.created_at.asc()"
    )
    likes: Mapped[list["Like"]] = relationship(back_populates="submission", cascade="all, delete-orphan")
    mutes: Mapped[list["Mute"]] = relationship(back_populates="submission", cascade="all, delete-orphan")
    viewers: Mapped[list["SubmissionViewer"]] = relationship(
        back_populates="submission", cascade="all, delete-orphan"
    )

    @property
    def track_id(self) -> str:
        return self.language

    @property
    def exercise(self) -> ExerciseRef:
        return ExerciseRef(track_id=self.language, slug=self.slug)

    @property
    def name(self) -> str:
        return display_name(self.slug)

    @property
    def liked(self) -> bool:
        return self.is_liked

    @property
    def is_done(self) -> bool:
        return self.state == SubmissionState.DONE.value

    @property
    def is_strictly_pending(self) -> bool:
        """True only for ``pending``; the ``pending`` query also matches ``needs_input``."""
        return self.state == SubmissionState.PENDING.value

    @property
    def is_needs_input(self) -> bool:
        return self.state == SubmissionState.NEEDS_INPUT.value

    @property
    def is_hibernating(self) -> bool:
        return self.state == SubmissionState.HIBERNATING.value

    @property
    def is_superseded(self) -> bool:
        return self.state == SubmissionState.SUPERSEDED.value


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submission: Mapped["Submission"] = relationship(back_populates="comments")


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("submission_id", "user_id", name="uq_likes_submission_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submission: Mapped["Submission"] = relationship(back_populates="likes")


class Mute(Base):
    __tablename__ = "muted_submissions"
    __table_args__ = (UniqueConstraint("submission_id", "user_id", name="uq_muted_submissions_submission_user"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submission: Mapped["Submission"] = relationship(back_populates="mutes")


class SubmissionViewer(Base):
    __tablename__ = "submission_viewers"
    __table_args__ = (UniqueConstraint("submission_id", "viewer_id", name="uq_submission_viewers_submission_viewer"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    viewer_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    submission: Mapped["Submission"] = relationship(back_populates="viewers")


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (CheckConstraint("item_type IN ('Submission')", name="ck_notifications_item_type"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type: Mapped[str] = mapped_column(String(50), nullable=False, default=NotificationItemType.SUBMISSION.value)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user: Mapped["User"] = relationship(back_populates="notifications")

    @property
    def item(self) -> ItemRef:
        return ItemRef(kind=NotificationItemType(self.item_type), id=self.item_id)


class Alert(Base):
    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user: Mapped["User"] = relationship(back_populates="alerts")
