# blueprints/import_export/routes.py
from __future__ import annotations
import json
import logging
from typing import Dict, Tuple

from flask import Blueprint, Response, jsonify, request

from extensions import db
from models import Assignment
from blueprints.auth.routes import teacher_required
from blueprints.link.services import plugin_for
from . import services as svc

api_bp = Blueprint("import_export_api", __name__)
log = logging.getLogger(__name__)

# ---------- helpers ----------

def _read_text_and_mapping() -> Tuple[str, Dict[str, str]]:
    f = request.files.get("file")
    # читаем CSV в UTF-8-sig, чтобы с BOM всё было ок
    text = f.read().decode("utf-8-sig", errors="ignore") if f else ""
    raw = request.form.get("mapping") or "{}"
    try:
        mapping = json.loads(raw)
    except ValueError:
        mapping = {}
    if not isinstance(mapping, dict):
        mapping = {}
    return text, mapping

def _rows() -> list[dict]:
    text, mapping = _read_text_and_mapping()
    return [svc.apply_mapping(r, mapping) for r in svc.read_csv_text(text)]

# ---------- endpoints ----------

@api_bp.get("/assignments/<int:assignment_id>/link/export")
@teacher_required
def export_links(assignment_id: int):
    assignment = db.get_or_404(Assignment, assignment_id)
    body = svc.export_csv(assignment, plugin_for(assignment))
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=assignment-{assignment.id}-links.csv"},
    )

@api_bp.post("/assignments/<int:assignment_id>/link/import/preview")
@teacher_required
def preview(assignment_id: int):
    db.get_or_404(Assignment, assignment_id)
    text, _ = _read_text_and_mapping()
    rows = svc.read_csv_text(text)
    if not rows:
        return jsonify({"ok": True, "detected_mapping": {}}), 200
    return jsonify({"ok": True, "detected_mapping": svc.detect_mapping(list(rows[0].keys()))}), 200

@api_bp.post("/assignments/<int:assignment_id>/link/import/validate")
@teacher_required
def validate(assignment_id: int):
    assignment = db.get_or_404(Assignment, assignment_id)
    ok, payload = svc.validate_rows(assignment, _rows())
    return jsonify({"ok": ok, **payload}), 200

@api_bp.post("/assignments/<int:assignment_id>/link/import/commit")
@teacher_required
def commit(assignment_id: int):
    assignment = db.get_or_404(Assignment, assignment_id)
    ok, payload = svc.commit_rows(assignment, plugin_for(assignment), _rows())
    if ok:
        log.info("link import: %s row(s) into assignment %s", payload["committed"], assignment.id)
    return jsonify({"ok": ok, **payload}), (200 if ok else 422)
