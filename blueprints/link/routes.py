# blueprints/link/routes.py
from __future__ import annotations

from flask import (
    Blueprint, Response, abort, flash, jsonify, redirect, render_template, request, url_for
)
from flask_login import current_user, login_required
from pydantic import ValidationError

from extensions import db
from models import Assignment, Submission
from blueprints.assign.strings import get_string
from blueprints.auth.routes import teacher_required
from .forms import LinkSubmissionForm
from .schemas import CopyIn, LinkIn
from . import services as svc

bp = Blueprint("link", __name__, template_folder="../../templates", static_folder="../../static")
api_bp = Blueprint("link_api", __name__)

def _json_err(code: str, http: int = 400, detail: str | None = None):
    body = {"error": code}
    if detail:
        body["detail"] = detail
    return jsonify(body), http

def _get_submission_or_abort(submission_id: int) -> Submission:
    sub = db.get_or_404(Submission, submission_id)
    if not svc.can_access(current_user, sub):
        abort(403)
    return sub

# ---------- SSR ----------
@bp.route("/<int:assignment_id>/link", methods=["GET", "POST"])
@login_required
def edit_link(assignment_id: int):
    assignment = db.get_or_404(Assignment, assignment_id)
    submission = svc.get_or_create_user_submission(assignment, current_user)
    plugin = svc.plugin_for(assignment)

    form = LinkSubmissionForm()
    plugin.get_form_elements(submission, form, {})

    error = None
    if form.validate_on_submit():
        result = svc.save_link(plugin, submission, form.link_editor.data or "")
        if result.ok:
            flash(get_string("submissionsaved", "mod_assign"), "success")
            return redirect(url_for("link.view_submission", submission_id=submission.id))
        error = result.error
    return render_template("link/form.html", form=form, assignment=assignment, error=error)

@bp.get("/submission/<int:submission_id>")
@login_required
def view_submission(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    plugin = svc.plugin_for(sub.assignment)
    summary, show_view_link = plugin.view_summary(sub)
    return render_template(
        "link/view.html",
        submission=sub,
        plugin_name=plugin.get_name(),
        summary=summary,
        show_view_link=show_view_link,
        content=plugin.view(sub),
        log_line=plugin.format_for_log(sub),
    )

# ---------- API ----------
@api_bp.get("/submissions/<int:submission_id>/link")
@login_required
def api_link_get(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    plugin = svc.plugin_for(sub.assignment)
    return jsonify({"ok": True, **svc.link_state(plugin, sub)})

@api_bp.put("/submissions/<int:submission_id>/link")
@login_required
def api_link_put(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    payload = request.get_json(silent=True) or {}
    try:
        data = LinkIn.model_validate(payload)
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": ve.errors(include_url=False)}), 422

    result = svc.save_link(svc.plugin_for(sub.assignment), sub, data.link)
    if not result.ok:
        return _json_err("invalid_link_format", 422, result.error)
    return jsonify({"ok": True, "created": result.created, "link_submission": result.link_submission})

@api_bp.delete("/submissions/<int:submission_id>/link")
@login_required
def api_link_delete(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    svc.plugin_for(sub.assignment).remove(sub)
    db.session.commit()
    return jsonify({"ok": True})

@api_bp.get("/submissions/<int:submission_id>/link/summary")
@login_required
def api_link_summary(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    html, show_view_link = svc.plugin_for(sub.assignment).view_summary(sub)
    return jsonify({"ok": True, "html": html, "show_view_link": show_view_link})

@api_bp.get("/submissions/<int:submission_id>/link/view")
@login_required
def api_link_view(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    return jsonify({"ok": True, "html": svc.plugin_for(sub.assignment).view(sub)})

@api_bp.post("/submissions/<int:submission_id>/link/copy")
@login_required
def api_link_copy(submission_id: int):
    src = _get_submission_or_abort(submission_id)
    try:
        data = CopyIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": ve.errors(include_url=False)}), 422
    if data.dest_submission_id == src.id:
        return _json_err("same_submission", 400)
    dest = _get_submission_or_abort(data.dest_submission_id)
    if dest.assignment_id != src.assignment_id:
        return _json_err("assignment_mismatch", 400)

    svc.plugin_for(src.assignment).copy_submission(src, dest)
    db.session.commit()
    return jsonify({"ok": True, "submission_id": dest.id})

@api_bp.get("/submissions/<int:submission_id>/link/export")
@login_required
def portfolio_export(submission_id: int):
    sub = _get_submission_or_abort(submission_id)
    field = request.args.get("field", "link")
    plugin = svc.plugin_for(sub.assignment)
    if field not in plugin.get_editor_fields():
        abort(404)
    text = plugin.get_editor_text(field, sub.id)
    return Response(
        text,
        mimetype="text/plain",
        headers={"Content-Disposition": f"attachment; filename=submission-{sub.id}-{field}.txt"},
    )

@api_bp.delete("/assignments/<int:assignment_id>/link")
@teacher_required
def api_link_delete_instance(assignment_id: int):
    assignment = db.get_or_404(Assignment, assignment_id)
    svc.plugin_for(assignment).delete_instance()
    db.session.commit()
    return jsonify({"ok": True})
