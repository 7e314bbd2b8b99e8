from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

# Таблицы старого модуля заданий (только чтение при апгрейде)

class LegacyAssignment(db.Model):
    __tablename__ = "assignment"

    id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    assignmenttype: Mapped[str] = mapped_column(db.String(50), nullable=False)
    type_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    submissions = relationship("LegacySubmission", back_populates="assignment", order_by="LegacySubmission.id")

    @property
    def context_id(self) -> int:
        return self.id


class LegacySubmission(db.Model):
    __tablename__ = "assignment_submissions"

    id: Mapped[int] = mapped_column(primary_key=True)
    assignment_id: Mapped[int] = mapped_column(ForeignKey("assignment.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    data1: Mapped[str | None] = mapped_column(Text)  # текст ответа
    data2: Mapped[str | None] = mapped_column(Text)  # формат текста

    assignment = relationship("LegacyAssignment", back_populates="submissions")
