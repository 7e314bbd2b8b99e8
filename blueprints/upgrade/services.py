# blueprints/upgrade/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Optional

from extensions import db
from models import Assignment, LegacyAssignment, Submission, SubmissionStatus
from blueprints.assign import AssignInstance
from blueprints.assign.strings import get_string
from blueprints.link.plugin import LinkSubmissionPlugin

log = logging.getLogger(__name__)

@dataclass
class UpgradeResult:
    ok: bool
    assignment_id: Optional[int] = None
    upgraded: int = 0
    log: list[str] = field(default_factory=list)

def upgrade_legacy_assignment(legacy: LegacyAssignment) -> UpgradeResult:
    """Перенести старое задание типа "online" вместе с ответами в новую схему.

    Любой отказ плагина (False) откатывает всю транзакцию.
    """
    messages: list[str] = []
    plugin = LinkSubmissionPlugin()
    if not plugin.can_upgrade(legacy.assignmenttype, legacy.type_version):
        messages.append(get_string("upgradenotsupported", "mod_assign",
                                   f"{legacy.assignmenttype} {legacy.type_version}"))
        return UpgradeResult(ok=False, log=messages)

    old_context_id = legacy.context_id
    assignment = Assignment(course_id=legacy.course_id, name=legacy.name)
    db.session.add(assignment)
    db.session.flush()
    plugin.assignment = AssignInstance(assignment)

    if not plugin.upgrade_settings(old_context_id, legacy, messages):
        db.session.rollback()
        return UpgradeResult(ok=False, log=messages)

    upgraded = 0
    for old in legacy.submissions:
        sub = Submission(
            assignment_id=assignment.id,
            user_id=old.user_id,
            attempt_number=0,
            status=SubmissionStatus.SUBMITTED.value,
        )
        db.session.add(sub)
        db.session.flush()
        if not plugin.upgrade(old_context_id, legacy, old, sub, messages):
            db.session.rollback()
            log.warning("legacy upgrade of assignment %s rolled back at submission %s", legacy.id, old.id)
            return UpgradeResult(ok=False, log=messages)
        upgraded += 1

    db.session.commit()
    log.info("legacy assignment %s upgraded to %s (%d submission(s))", legacy.id, assignment.id, upgraded)
    return UpgradeResult(ok=True, assignment_id=assignment.id, upgraded=upgraded, log=messages)
