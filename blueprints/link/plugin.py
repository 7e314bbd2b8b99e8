from __future__ import annotations
import logging
import re
from typing import Any

from flask import current_app, has_app_context
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import CourseGroup, LegacyAssignment, LegacySubmission, LinkSubmission, Submission
from blueprints.assign import SubmissionPlugin, register_submission_plugin
from blueprints.assign import plagiarism
from blueprints.assign.events import acting_user_id
from blueprints.assign.files import get_file_storage
from blueprints.assign.strings import get_string
from blueprints.assign.text import count_words, shorten_text
from .events import AssessableUploaded, SubmissionCreated, SubmissionUpdated

logger = logging.getLogger(__name__)

COMPONENT = "assignsubmission_link"
FILEAREA = "submissions_link"
EDITOR_FIELD = "link"

LEGACY_TYPE = "online"
LEGACY_MIN_VERSION = 2011112900

# Узкий шаблон: схема, необязательный www., хост, точка и ровно три символа домена верхнего уровня.
# Ищется в любом месте строки; после трёх символов не должно идти ещё одного символа TLD.
LINK_RE = re.compile(r"(https?://)(www\.)?[-a-zA-Z0-9@:%._\+~#=]{1,256}\.[a-zA-Z0-9()]{3}(?![a-zA-Z0-9()])")


@register_submission_plugin
class LinkSubmissionPlugin(SubmissionPlugin):
    type = "link"
    component = COMPONENT

    def get_name(self) -> str:
        return get_string("pluginname", COMPONENT)

    def get_link_submission(self, submission_id: int) -> LinkSubmission | None:
        return db.session.execute(
            select(LinkSubmission).where(LinkSubmission.submission_id == submission_id)
        ).scalar_one_or_none()

    def remove(self, submission: Submission) -> bool:
        submission_id = submission.id if submission else 0
        if submission_id:
            db.session.execute(delete(LinkSubmission).where(LinkSubmission.submission_id == submission_id))
        return True

    def get_form_elements(self, submission: Submission | None, form, data: dict) -> bool:
        data.setdefault("link", "")
        if submission:
            row = self.get_link_submission(submission.id)
            if row:
                data["link"] = row.link

        form.link_editor.label.text = self.get_name()
        if not form.is_submitted():
            form.link_editor.data = data["link"]
        return True

    def save(self, submission: Submission, data: dict) -> bool:
        link = (data.get("link_editor") or "").strip()
        if not self.validate_link_format(link):
            self.set_error(get_string("formaterrormessage", COMPONENT))
            return False

        link_submission = self.get_link_submission(submission.id)

        params: dict[str, Any] = {
            "context_id": self.assignment.get_context_id(),
            "course_id": self.assignment.get_course().id,
            "objectid": submission.id,
            "other": {
                "pathnamehashes": [],
                "content": link,
            },
        }
        if submission.user_id and submission.user_id != acting_user_id():
            params["related_user_id"] = submission.user_id
        if self.assignment.is_blind_marking():
            params["anonymous"] = True
        AssessableUploaded.create(params).trigger()

        groupname = None
        groupid = 0
        # имя группы пишем в событие: в логах остальные поля не расшифровываются
        if not submission.user_id and submission.group_id:
            groupname = db.session.execute(
                select(CourseGroup.name).where(CourseGroup.id == submission.group_id)
            ).scalar_one()
            groupid = submission.group_id
        else:
            params["related_user_id"] = submission.user_id

        count = count_words(link)

        del params["objectid"]
        params["other"] = {
            "submissionid": submission.id,
            "submissionattempt": submission.attempt_number,
            "submissionstatus": submission.status,
            "linkwordcount": count,
            "groupid": groupid,
            "groupname": groupname,
        }

        if link_submission:
            link_submission.link = link
            db.session.flush()
            params["objectid"] = link_submission.id
            event = SubmissionUpdated.create(params)
        else:
            link_submission = LinkSubmission(
                submission_id=submission.id,
                assignment_id=self.assignment.get_instance().id,
                link=link,
            )
            db.session.add(link_submission)
            db.session.flush()
            params["objectid"] = link_submission.id
            event = SubmissionCreated.create(params)
        event.set_assign(self.assignment)
        event.trigger()
        return link_submission.id > 0

    def get_editor_fields(self) -> dict[str, str]:
        return {EDITOR_FIELD: self.get_name()}

    def get_editor_text(self, name: str, submission_id: int) -> str:
        if name == EDITOR_FIELD:
            row = self.get_link_submission(submission_id)
            if row:
                return row.link
        return ""

    def set_editor_text(self, name: str, value: str, submission_id: int) -> bool:
        if name != EDITOR_FIELD:
            return False
        submission = db.session.get(Submission, submission_id)
        if submission is None:
            return False
        row = self.get_link_submission(submission_id)
        if row:
            row.link = value
        else:
            db.session.add(LinkSubmission(
                submission_id=submission_id,
                assignment_id=submission.assignment_id,
                link=value,
            ))
        db.session.flush()
        return True

    def _plagiarism_links(self, submission: Submission, content: str) -> str:
        return plagiarism.get_links({
            "userid": submission.user_id,
            "content": content,
            "cmid": self.assignment.get_course_module_id(),
            "course": self.assignment.get_course().id,
            "assignment": submission.assignment_id,
        })

    def view_summary(self, submission: Submission) -> tuple[str, bool]:
        row = self.get_link_submission(submission.id)
        # ссылку "просмотр" показываем всегда
        show_view_link = True
        if not row:
            return "", show_view_link

        text = self.assignment.render_editor_content(FILEAREA, row.submission_id, self.get_type(),
                                                     EDITOR_FIELD, COMPONENT, shorten=True)
        link = row.link.strip()
        shortlink = shorten_text(link, current_app.config.get("LINK_SUMMARY_LENGTH", 140))
        plagiarism_links = self._plagiarism_links(submission, link)

        # если ссылка укорочена - показываем число слов
        if link != shortlink:
            wordcount = get_string("numwords", COMPONENT, count_words(link))
            return plagiarism_links + wordcount + text, show_view_link
        return plagiarism_links + text, show_view_link

    def view(self, submission: Submission) -> str:
        row = self.get_link_submission(submission.id)
        if not row:
            return ""
        result = self.assignment.render_editor_content(FILEAREA, row.submission_id, self.get_type(),
                                                       EDITOR_FIELD, COMPONENT)
        return self._plagiarism_links(submission, row.link.strip()) + result

    def can_upgrade(self, type: str, version: int) -> bool:
        min_version = LEGACY_MIN_VERSION
        if has_app_context():
            min_version = current_app.config.get("LEGACY_ONLINE_MIN_VERSION", LEGACY_MIN_VERSION)
        return type == LEGACY_TYPE and version >= min_version

    def upgrade_settings(self, old_context_id: int, old_assignment: LegacyAssignment, log: list[str]) -> bool:
        # настроек нет
        return True

    def _insert(self, row: LinkSubmission) -> int | None:
        db.session.add(row)
        try:
            db.session.flush()
        except IntegrityError:
            logger.warning("insert into %s failed for submission %s", COMPONENT, row.submission_id)
            return None
        return row.id

    def upgrade(self, old_context_id: int, old_assignment: LegacyAssignment, old_submission: LegacySubmission,
                submission: Submission, log: list[str]) -> bool:
        row = LinkSubmission(
            link=old_submission.data1 or "",
            submission_id=submission.id,
            assignment_id=self.assignment.get_instance().id,
        )
        if not self._insert(row):
            log.append(get_string("couldnotconvertsubmission", "mod_assign", submission.user_id))
            return False

        self.assignment.copy_area_files_for_upgrade(old_context_id, "mod_assignment", "submission",
                                                    old_submission.id, self.assignment.get_context_id(),
                                                    COMPONENT, FILEAREA, submission.id)
        return True

    def format_for_log(self, submission: Submission) -> str:
        row = self.get_link_submission(submission.id)
        return get_string("numwordsforlog", COMPONENT, count_words(row.link) if row else 0)

    def delete_instance(self) -> bool:
        db.session.execute(
            delete(LinkSubmission).where(LinkSubmission.assignment_id == self.assignment.get_instance().id)
        )
        return True

    def is_empty(self, submission: Submission) -> bool:
        row = self.get_link_submission(submission.id)
        wordcount = 0
        if row is not None and row.link is not None:
            wordcount = count_words(row.link.strip())
        return wordcount == 0

    def submission_is_empty(self, data: dict) -> bool:
        if data.get("link_editor") is None:
            return False
        return count_words(str(data["link_editor"]).strip()) == 0

    def copy_submission(self, source: Submission, dest: Submission) -> bool:
        if source.id == dest.id:
            return True
        # файлы области ответа: прежние файлы назначения заменяются
        fs = get_file_storage()
        context_id = self.assignment.get_context_id()
        fs.delete_area_files(context_id, COMPONENT, FILEAREA, dest.id)
        for f in fs.get_area_files(context_id, COMPONENT, FILEAREA, source.id, "id", False):
            fs.create_file_from_storedfile({"itemid": dest.id}, f)

        row = self.get_link_submission(source.id)
        if row:
            existing = self.get_link_submission(dest.id)
            if existing:
                existing.link = row.link
            else:
                db.session.add(LinkSubmission(
                    submission_id=dest.id,
                    assignment_id=row.assignment_id,
                    link=row.link,
                ))
            db.session.flush()
        return True

    @staticmethod
    def validate_link_format(link: str) -> bool:
        return LINK_RE.search(link or "") is not None
