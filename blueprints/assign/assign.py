from __future__ import annotations
import logging

from flask import current_app, render_template, url_for

from extensions import db
from models import Assignment, Course
from .files import get_file_storage
from .plugin import SubmissionPlugin, get_submission_plugin_class
from .strings import get_string
from .text import shorten_text

log = logging.getLogger(__name__)


class AssignInstance:
    """Обёртка над заданием, через которую плагины обращаются к хосту."""

    def __init__(self, assignment: Assignment):
        self._assignment = assignment

    def get_instance(self) -> Assignment:
        return self._assignment

    def get_course(self) -> Course:
        return db.session.get(Course, self._assignment.course_id)

    def get_course_module_id(self) -> int:
        return self._assignment.course_module_id

    def get_context_id(self) -> int:
        return self._assignment.context_id

    def is_blind_marking(self) -> bool:
        return bool(self._assignment.blind_marking)

    def get_submission_plugin_by_type(self, plugin_type: str) -> SubmissionPlugin:
        return get_submission_plugin_class(plugin_type)(self)

    def render_editor_content(self, filearea: str, submission_id: int, plugin_type: str,
                              editor_field: str, component: str, shorten: bool = False) -> str:
        plugin = self.get_submission_plugin_by_type(plugin_type)
        full_text = plugin.get_editor_text(editor_field, submission_id)
        text = full_text
        if shorten:
            text = shorten_text(full_text, current_app.config.get("LINK_SUMMARY_LENGTH", 140))
        files = get_file_storage().get_area_files(self.get_context_id(), component, filearea,
                                                  submission_id, include_dirs=False)
        portfolio_url = None
        if current_app.config.get("PORTFOLIO_ENABLED") and full_text:
            # у каждого плагина свой api-blueprint "<type>_api" с маршрутом portfolio_export
            portfolio_url = url_for(f"{plugin_type}_api.portfolio_export",
                                    submission_id=submission_id, field=editor_field)
        return render_template(
            "assign/editor_content.html",
            text=text,
            shortened=(text != full_text),
            files=files,
            portfolio_url=portfolio_url,
            portfolio_label=get_string("portfolioexport", component),
        )

    def copy_area_files_for_upgrade(self, old_context_id: int, old_component: str, old_filearea: str,
                                    old_itemid: int, new_context_id: int, new_component: str,
                                    new_filearea: str, new_itemid: int) -> int:
        fs = get_file_storage()
        copied = 0
        for f in fs.get_area_files(old_context_id, old_component, old_filearea, old_itemid,
                                   include_dirs=False):
            fs.create_file_from_storedfile({
                "context_id": new_context_id,
                "component": new_component,
                "filearea": new_filearea,
                "itemid": new_itemid,
            }, f)
            copied += 1
        if copied:
            log.info("upgrade: copied %d file(s) %s/%s/%s -> %s/%s/%s", copied,
                     old_component, old_filearea, old_itemid, new_component, new_filearea, new_itemid)
        return copied
