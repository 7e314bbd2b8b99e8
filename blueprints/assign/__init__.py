# Хост-слой для плагинов ответа на задание: контракт плагина, события, файлы, антиплагиат.
from .plugin import SubmissionPlugin, register_submission_plugin, get_submission_plugin_class
from .assign import AssignInstance

__all__ = [
    "SubmissionPlugin",
    "register_submission_plugin",
    "get_submission_plugin_class",
    "AssignInstance",
]
