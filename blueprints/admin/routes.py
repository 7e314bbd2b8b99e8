from __future__ import annotations
from flask import Blueprint, jsonify, request

from extensions import db
from models import AuditLog
from blueprints.auth.routes import admin_required

api_bp = Blueprint("admin_api", __name__)

# быстрый просмотр лога событий
@api_bp.get("/admin/audit-logs")
@admin_required
def audit_logs():
    q = db.session.query(AuditLog)
    action = (request.args.get("action") or "").strip()
    if action:
        q = q.filter(AuditLog.action == action)
    items = q.order_by(AuditLog.id.desc()).limit(50).all()
    return jsonify({"ok": True, "items": [a.to_dict() for a in items]})
