from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

class SubmissionStatus(str, Enum):
    NEW = "new"
    DRAFT = "draft"
    SUBMITTED = "submitted"
    REOPENED = "reopened"


class Assignment(db.Model):
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    blind_marking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    course = relationship("Course")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")

    # модуль курса и его контекст совпадают с id задания
    @property
    def course_module_id(self) -> int:
        return self.id

    @property
    def context_id(self) -> int:
        return self.id

    def __repr__(self):
        return f"<Assignment {self.name}>"


class Submission(db.Model):
    __tablename__ = "submissions"

    id: Mapped[int] = mapped_column(primary_key=True)
    assignment_id: Mapped[int] = mapped_column(ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    group_id: Mapped[int | None] = mapped_column(ForeignKey("course_groups.id", ondelete="CASCADE"), index=True)
    attempt_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(db.String(16), nullable=False, default=SubmissionStatus.NEW.value)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignment = relationship("Assignment", back_populates="submissions")
    user = relationship("User")
    group = relationship("CourseGroup")
    # строку ссылки удаляет БД (ON DELETE CASCADE) или ORM, если она загружена
    link_submission = relationship("LinkSubmission", uselist=False, back_populates="submission",
                                   cascade="all, delete", passive_deletes=True)

    def __repr__(self):
        return f"<Submission {self.id} assignment={self.assignment_id}>"
