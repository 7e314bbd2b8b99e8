from __future__ import annotations
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from models import Submission
    from .assign import AssignInstance

_registry: dict[str, type["SubmissionPlugin"]] = {}

def register_submission_plugin(cls: type["SubmissionPlugin"]) -> type["SubmissionPlugin"]:
    _registry[cls.type] = cls
    return cls

def get_submission_plugin_class(plugin_type: str) -> type["SubmissionPlugin"]:
    try:
        return _registry[plugin_type]
    except KeyError:
        raise LookupError(f"unknown submission plugin: {plugin_type}") from None


class SubmissionPlugin:
    """Базовый класс плагина ответа на задание.

    Хуки по умолчанию ничего не делают; плагин переопределяет нужные.
    Параметр ``log`` у методов апгрейда - список строк, в который дописываются сообщения.
    """

    type: str = ""
    component: str = ""

    def __init__(self, assignment: "AssignInstance | None" = None):
        self.assignment = assignment
        self._error = ""

    def get_type(self) -> str:
        return self.type

    def get_name(self) -> str:
        raise NotImplementedError

    def set_error(self, msg: str) -> None:
        self._error = msg

    def get_error(self) -> str:
        return self._error

    # ---------- форма и сохранение ----------
    def get_form_elements(self, submission: "Submission | None", form: Any, data: dict) -> bool:
        return False

    def save(self, submission: "Submission", data: dict) -> bool:
        return True

    def remove(self, submission: "Submission") -> bool:
        return True

    def submission_is_empty(self, data: dict) -> bool:
        return False

    def is_empty(self, submission: "Submission") -> bool:
        return True

    def copy_submission(self, source: "Submission", dest: "Submission") -> bool:
        return True

    # ---------- отображение ----------
    def view(self, submission: "Submission") -> str:
        return ""

    def view_summary(self, submission: "Submission") -> tuple[str, bool]:
        return "", False

    def format_for_log(self, submission: "Submission") -> str:
        return ""

    # ---------- импорт/экспорт текста ----------
    def get_editor_fields(self) -> dict[str, str]:
        return {}

    def get_editor_text(self, name: str, submission_id: int) -> str:
        return ""

    def set_editor_text(self, name: str, value: str, submission_id: int) -> bool:
        return False

    # ---------- апгрейд со старого модуля ----------
    def can_upgrade(self, type: str, version: int) -> bool:
        return False

    def upgrade_settings(self, old_context_id: int, old_assignment: Any, log: list[str]) -> bool:
        return True

    def upgrade(self, old_context_id: int, old_assignment: Any, old_submission: Any,
                submission: "Submission", log: list[str]) -> bool:
        return False

    def delete_instance(self) -> bool:
        return True
