from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from extensions import db

class AuditLog(db.Model):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int | None] = mapped_column(Integer)
    action: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)  # имя события
    entity: Mapped[str] = mapped_column(db.String(100), nullable=False)
    entity_id: Mapped[int | None] = mapped_column(Integer)
    course_id: Mapped[int | None] = mapped_column(Integer)
    context_id: Mapped[int | None] = mapped_column(Integer)
    related_user_id: Mapped[int | None] = mapped_column(Integer)
    anonymous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payload: Mapped[dict | None] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id, "user_id": self.user_id, "action": self.action,
            "entity": self.entity, "entity_id": self.entity_id,
            "course_id": self.course_id, "context_id": self.context_id,
            "related_user_id": self.related_user_id, "anonymous": self.anonymous,
            "payload": self.payload, "created_at": self.created_at.isoformat(),
        }
