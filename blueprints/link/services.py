# blueprints/link/services.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import select

from extensions import db
from models import Assignment, Submission, SubmissionStatus, User
from blueprints.assign import AssignInstance
from blueprints.assign.text import count_words
from .plugin import LinkSubmissionPlugin

@dataclass
class SaveResult:
    ok: bool
    created: bool = False
    error: Optional[str] = None
    link_submission: dict = field(default_factory=dict)

def plugin_for(assignment: Assignment) -> LinkSubmissionPlugin:
    return LinkSubmissionPlugin(AssignInstance(assignment))

def can_access(user: User, submission: Submission) -> bool:
    if getattr(user, "is_staff", False):
        return True
    if submission.user_id is not None:
        return submission.user_id == user.id
    if submission.group_id is not None and submission.group is not None:
        return any(m.id == user.id for m in submission.group.members)
    return False

def get_or_create_user_submission(assignment: Assignment, user: User) -> Submission:
    """Текущая попытка пользователя; создаётся при первом обращении."""
    sub = db.session.execute(
        select(Submission)
        .where(Submission.assignment_id == assignment.id, Submission.user_id == user.id)
        .order_by(Submission.attempt_number.desc())
    ).scalars().first()
    if sub:
        return sub
    sub = Submission(assignment_id=assignment.id, user_id=user.id,
                     attempt_number=0, status=SubmissionStatus.NEW.value)
    db.session.add(sub)
    db.session.commit()
    return sub

def link_state(plugin: LinkSubmissionPlugin, submission: Submission) -> dict:
    link = plugin.get_editor_text("link", submission.id)
    return {
        "submission_id": submission.id,
        "link": link,
        "word_count": count_words(link.strip()),
        "is_empty": plugin.is_empty(submission),
        "log": plugin.format_for_log(submission),
    }

def save_link(plugin: LinkSubmissionPlugin, submission: Submission, link: str) -> SaveResult:
    """Сохранить ссылку и пометить попытку отправленной. Неверный формат - ничего не пишем."""
    existed = plugin.get_link_submission(submission.id) is not None
    if not plugin.save(submission, {"link_editor": link}):
        db.session.rollback()
        return SaveResult(ok=False, error=plugin.get_error())
    submission.status = SubmissionStatus.SUBMITTED.value
    db.session.commit()
    row = plugin.get_link_submission(submission.id)
    return SaveResult(ok=True, created=not existed, link_submission=row.to_dict())
