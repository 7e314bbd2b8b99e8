from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

class LinkSubmission(db.Model):
    """Ссылка, сданная студентом: одна строка на попытку (submission)."""
    __tablename__ = "assignsubmission_link"

    id: Mapped[int] = mapped_column(primary_key=True)
    submission_id: Mapped[int] = mapped_column(
        ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    assignment_id: Mapped[int] = mapped_column(
        ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    link: Mapped[str] = mapped_column(Text, nullable=False, default="")

    submission = relationship("Submission", back_populates="link_submission")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "submission_id": self.submission_id,
            "assignment_id": self.assignment_id,
            "link": self.link,
        }

    def __repr__(self):
        return f"<LinkSubmission submission={self.submission_id}>"
