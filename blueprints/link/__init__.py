# Плагин "ответ ссылкой": регистрация в реестре плагинов при импорте пакета.
from .plugin import LinkSubmissionPlugin, COMPONENT, FILEAREA  # noqa: F401
