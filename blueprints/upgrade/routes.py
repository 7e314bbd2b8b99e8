# blueprints/upgrade/routes.py
from __future__ import annotations
from dataclasses import asdict

from flask import Blueprint, jsonify

from extensions import db
from models import LegacyAssignment
from blueprints.auth.routes import admin_required
from . import services as svc

api_bp = Blueprint("upgrade_api", __name__)

@api_bp.post("/admin/upgrade/legacy/<int:legacy_id>")
@admin_required
def upgrade_legacy(legacy_id: int):
    legacy = db.get_or_404(LegacyAssignment, legacy_id)
    result = svc.upgrade_legacy_assignment(legacy)
    return jsonify(asdict(result)), (200 if result.ok else 422)
