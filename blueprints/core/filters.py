from __future__ import annotations
from datetime import date, datetime

from blueprints.assign.text import count_words

def fmt_date(value: date | None) -> str:
    if not value:
        return ""
    return value.strftime("%d.%m.%Y")

def fmt_datetime(value: datetime | None) -> str:
    if not value:
        return ""
    return value.strftime("%d.%m.%Y %H:%M")

def register_filters(app):
    app.add_template_filter(fmt_date, "fmt_date")
    app.add_template_filter(fmt_datetime, "fmt_datetime")
    app.add_template_filter(count_words, "count_words")
