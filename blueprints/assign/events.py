from __future__ import annotations
import logging
from typing import Any, ClassVar

from flask import has_request_context
from flask_login import current_user

from extensions import db
from models import AuditLog

log = logging.getLogger(__name__)

def acting_user_id() -> int | None:
    """id пользователя текущего запроса (None вне запроса или для анонима)."""
    if not has_request_context():
        return None
    if not getattr(current_user, "is_authenticated", False):
        return None
    return getattr(current_user, "id", None)


class AssignEvent:
    """Событие аудита: при trigger() пишется строка в audit_logs."""

    name: ClassVar[str] = ""
    entity: ClassVar[str] = ""
    requires_assign: ClassVar[bool] = False
    required_other: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *, context_id: int, course_id: int, objectid: int | None = None,
                 other: dict[str, Any] | None = None, related_user_id: int | None = None,
                 anonymous: bool = False, user_id: int | None = None):
        self.context_id = context_id
        self.course_id = course_id
        self.objectid = objectid
        self.other = dict(other or {})
        self.related_user_id = related_user_id
        self.anonymous = bool(anonymous)
        self.user_id = user_id if user_id is not None else acting_user_id()
        self.assign = None

    @classmethod
    def create(cls, params: dict[str, Any]) -> "AssignEvent":
        return cls(**params)

    def set_assign(self, assign) -> None:
        self.assign = assign

    def _validate(self) -> None:
        if self.requires_assign and self.assign is None:
            raise RuntimeError(f"{self.name}: set_assign() must be called before trigger()")
        missing = [k for k in self.required_other if k not in self.other]
        if missing:
            raise ValueError(f"{self.name}: missing other[{', '.join(missing)}]")

    def trigger(self) -> AuditLog:
        self._validate()
        row = AuditLog(
            user_id=self.user_id,
            action=self.name,
            entity=self.entity,
            entity_id=self.objectid,
            course_id=self.course_id,
            context_id=self.context_id,
            related_user_id=self.related_user_id,
            anonymous=self.anonymous,
            payload=self.other,
        )
        db.session.add(row)
        db.session.flush()
        log.info("event %s objectid=%s context=%s", self.name, self.objectid, self.context_id)
        return row


class SubmissionEvent(AssignEvent):
    requires_assign = True
    required_other = ("submissionid", "submissionattempt", "submissionstatus")
