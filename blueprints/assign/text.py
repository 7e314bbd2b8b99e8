from __future__ import annotations
import re

from markupsafe import Markup

# конец слова: символ слова, за которым граница
_WORD_END_RE = re.compile(r"\w\b")

def count_words(text: str | None) -> int:
    """Число слов в тексте (HTML-теги не считаются)."""
    if not text:
        return 0
    # пробел перед тегом, чтобы "<p>a</p><p>b</p>" дало два слова
    plain = Markup(text.replace("<", " <")).striptags()
    return len(_WORD_END_RE.findall(plain))

def shorten_text(text: str | None, ideal: int = 140, ending: str = "...") -> str:
    if not text:
        return ""
    if len(text) <= ideal:
        return text
    limit = max(ideal - len(ending), 0)
    head = text[:limit]
    space = head.rfind(" ")
    if space > 0:
        head = head[:space]
    return head.rstrip() + ending
