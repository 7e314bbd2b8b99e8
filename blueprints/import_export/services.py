# blueprints/import_export/services.py
from __future__ import annotations
from dataclasses import asdict, dataclass
from io import StringIO
import csv
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select

from extensions import db
from models import Assignment, Submission
from blueprints.link.plugin import LinkSubmissionPlugin

# ---------- util: CSV чтение
def read_csv_text(text: str) -> List[Dict[str, str]]:
    if not text.strip():
        return []
    first = text.splitlines()[0]
    # поддержка и запятой, и точки с запятой
    delim = ";" if first.count(";") > first.count(",") else ","
    reader = csv.DictReader(StringIO(text), delimiter=delim)
    # лишние ячейки (ключ None) отбрасываем
    return [{k.strip(): (v or "").strip() for k, v in r.items() if k is not None} for r in reader]

# ---------- детектирование маппинга по заголовкам
HEADER_SYNONYMS: dict[str, list[str]] = {
    "submission_id": ["submission_id", "submission", "id"],
    "link": ["link", "url", "href"],
}

def detect_mapping(header: list[str]) -> dict[str, str]:
    h_lower = [h.strip().lower() for h in header]
    mapping: dict[str, str] = {}
    for field, cands in HEADER_SYNONYMS.items():
        for c in cands:
            if c in h_lower:
                mapping[field] = header[h_lower.index(c)]
                break
    return mapping

def apply_mapping(row: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    # mapping: {target_field: source_header}; без маппинга колонки берём как есть
    if not mapping:
        return dict(row)
    return {target: row.get(source) for target, source in mapping.items()}

def _int_or_none(s: Any) -> Optional[int]:
    try:
        return int(str(s))
    except (TypeError, ValueError):
        return None

# ---------- контракты для ошибок
@dataclass
class RowError:
    row: int   # номер строки файла (header = 1)
    code: str
    field: Optional[str] = None
    value: Any = None

# ---------- экспорт
def export_rows(assignment: Assignment, plugin: LinkSubmissionPlugin) -> Tuple[List[str], List[List[Any]]]:
    fields = list(plugin.get_editor_fields())
    header = ["submission_id", "user_id", "group_id", *fields]
    subs = db.session.execute(
        select(Submission).where(Submission.assignment_id == assignment.id).order_by(Submission.id)
    ).scalars()
    rows = []
    for s in subs:
        rows.append([s.id, s.user_id or "", s.group_id or "",
                     *(plugin.get_editor_text(f, s.id) for f in fields)])
    return header, rows

def export_csv(assignment: Assignment, plugin: LinkSubmissionPlugin) -> str:
    header, rows = export_rows(assignment, plugin)
    buf = StringIO()
    w = csv.writer(buf)
    w.writerow(header)
    w.writerows(rows)
    return buf.getvalue()

# ---------- валидация импорта
def validate_rows(assignment: Assignment, rows: List[Dict[str, Any]]) -> Tuple[bool, Dict[str, Any]]:
    errors: list[RowError] = []
    dups: list[dict] = []
    seen: set[int] = set()
    known = set(db.session.execute(
        select(Submission.id).where(Submission.assignment_id == assignment.id)
    ).scalars())

    for idx, r in enumerate(rows, start=2):  # строки с 2 (после header)
        raw_id = (r.get("submission_id") or "").strip()
        link = (r.get("link") or "").strip()
        if not raw_id:
            errors.append(RowError(idx, "REQUIRED", "submission_id"))
            continue
        sid = _int_or_none(raw_id)
        if sid is None:
            errors.append(RowError(idx, "INVALID_INT", "submission_id", raw_id))
            continue
        if sid in seen:
            dups.append({"row": idx, "unique_key": sid})
            continue
        seen.add(sid)
        if sid not in known:
            errors.append(RowError(idx, "UNKNOWN_SUBMISSION", "submission_id", sid))
            continue
        if not link:
            errors.append(RowError(idx, "REQUIRED", "link"))
            continue
        if not LinkSubmissionPlugin.validate_link_format(link):
            errors.append(RowError(idx, "INVALID_LINK", "link", link))

    ok = not errors and not dups
    return ok, {"row_errors": [asdict(e) for e in errors], "duplicates": dups}

# ---------- commit (атомарно)
def commit_rows(assignment: Assignment, plugin: LinkSubmissionPlugin,
                rows: List[Dict[str, Any]]) -> Tuple[bool, Dict[str, Any]]:
    ok, payload = validate_rows(assignment, rows)
    if not ok:
        return False, payload

    committed = 0
    for r in rows:
        if plugin.set_editor_text("link", r["link"].strip(), int(r["submission_id"])):
            committed += 1
    db.session.commit()
    return True, {"committed": committed}
