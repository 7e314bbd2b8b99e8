# tests/test_link_plugin.py
from __future__ import annotations
from types import SimpleNamespace

import pytest
from sqlalchemy import delete
from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import (
    AuditLog, Assignment, Course, CourseGroup, LinkSubmission, Submission, User
)
from blueprints.assign.files import get_file_storage
from blueprints.assign.plagiarism import register_provider
from blueprints.link.forms import LinkSubmissionForm
from blueprints.link.plugin import COMPONENT, FILEAREA
from blueprints.link.services import plugin_for

UPLOADED = "assignsubmission_link.assessable_uploaded"
CREATED = "assignsubmission_link.submission_created"
UPDATED = "assignsubmission_link.submission_updated"

@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def data(app):
    course = Course(shortname="WEB101", fullname="Web basics")
    s1 = User(email="s1@example.com", password_hash=generate_password_hash("pass"), role="STUDENT")
    s2 = User(email="s2@example.com", password_hash=generate_password_hash("pass"), role="STUDENT")
    db.session.add_all([course, s1, s2])
    db.session.flush()
    group = CourseGroup(course_id=course.id, name="Team A")
    group.members.extend([s1, s2])
    a = Assignment(course_id=course.id, name="Portfolio link")
    other = Assignment(course_id=course.id, name="Other")
    db.session.add_all([group, a, other])
    db.session.flush()
    sub = Submission(assignment_id=a.id, user_id=s1.id)
    sub2 = Submission(assignment_id=a.id, user_id=s2.id)
    gsub = Submission(assignment_id=a.id, group_id=group.id)
    osub = Submission(assignment_id=other.id, user_id=s1.id)
    db.session.add_all([sub, sub2, gsub, osub])
    db.session.commit()
    return SimpleNamespace(course=course, s1=s1, s2=s2, group=group, assignment=a, other=other,
                           sub=sub, sub2=sub2, gsub=gsub, osub=osub)

def _actions():
    return [r.action for r in db.session.query(AuditLog).order_by(AuditLog.id)]

# ---------- save ----------

def test_save_creates_then_updates(data):
    plugin = plugin_for(data.assignment)
    assert plugin.save(data.sub, {"link_editor": "  https://example.com  "})
    row = plugin.get_link_submission(data.sub.id)
    assert row.link == "https://example.com"
    assert row.assignment_id == data.assignment.id

    assert plugin.save(data.sub, {"link_editor": "https://www.moodle.org"})
    rows = LinkSubmission.query.filter_by(submission_id=data.sub.id).all()
    assert len(rows) == 1
    assert rows[0].id == row.id
    assert rows[0].link == "https://www.moodle.org"

    assert _actions() == [UPLOADED, CREATED, UPLOADED, UPDATED]

def test_save_event_payloads(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})

    uploaded = AuditLog.query.filter_by(action=UPLOADED).one()
    assert uploaded.entity_id == data.sub.id
    assert uploaded.payload == {"pathnamehashes": [], "content": "https://example.com"}
    assert uploaded.related_user_id == data.s1.id
    assert uploaded.course_id == data.course.id
    assert uploaded.context_id == data.assignment.context_id

    created = AuditLog.query.filter_by(action=CREATED).one()
    row = plugin.get_link_submission(data.sub.id)
    assert created.entity_id == row.id
    assert created.related_user_id == data.s1.id
    assert created.payload["submissionid"] == data.sub.id
    assert created.payload["submissionattempt"] == 0
    assert created.payload["linkwordcount"] == 3
    assert created.payload["groupid"] == 0
    assert created.payload["groupname"] is None

def test_group_submission_event_has_groupname(data):
    plugin = plugin_for(data.assignment)
    assert plugin.save(data.gsub, {"link_editor": "https://example.com"})
    created = AuditLog.query.filter_by(action=CREATED).one()
    assert created.payload["groupid"] == data.group.id
    assert created.payload["groupname"] == "Team A"
    assert created.related_user_id is None

def test_blind_marking_marks_events_anonymous(data):
    data.assignment.blind_marking = True
    db.session.commit()
    plugin_for(data.assignment).save(data.sub, {"link_editor": "https://example.com"})
    assert AuditLog.query.filter_by(action=UPLOADED).one().anonymous is True

def test_invalid_save_writes_nothing(data):
    plugin = plugin_for(data.assignment)
    assert plugin.save(data.sub, {"link_editor": "example.com"}) is False
    assert "valid format" in plugin.get_error()
    assert LinkSubmission.query.count() == 0
    assert AuditLog.query.count() == 0

def test_invalid_save_keeps_previous_link(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    events = AuditLog.query.count()
    assert not plugin.save(data.sub, {"link_editor": "https://example.info"})
    assert plugin.get_link_submission(data.sub.id).link == "https://example.com"
    assert AuditLog.query.count() == events

# ---------- emptiness / log ----------

def test_is_empty(data):
    plugin = plugin_for(data.assignment)
    assert plugin.is_empty(data.sub)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    assert not plugin.is_empty(data.sub)

def test_submission_is_empty():
    plugin = plugin_for(Assignment(course_id=1, name="x"))
    assert plugin.submission_is_empty({"link_editor": "   "})
    assert not plugin.submission_is_empty({"link_editor": "https://example.com"})
    # поля формы нет - считаем непустым
    assert not plugin.submission_is_empty({})

def test_format_for_log(data):
    plugin = plugin_for(data.assignment)
    assert plugin.format_for_log(data.sub) == "Submission has 0 words"
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    assert plugin.format_for_log(data.sub) == "Submission has 3 words"

# ---------- editor text ----------

def test_editor_fields_and_text(data):
    plugin = plugin_for(data.assignment)
    assert plugin.get_editor_fields() == {"link": "Link submission"}
    assert plugin.get_editor_text("link", data.sub.id) == ""
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    assert plugin.get_editor_text("link", data.sub.id) == "https://example.com"
    assert plugin.get_editor_text("onlinetext", data.sub.id) == ""

def test_set_editor_text(data):
    plugin = plugin_for(data.assignment)
    assert plugin.set_editor_text("link", "https://x.org", data.sub.id)
    assert plugin.get_editor_text("link", data.sub.id) == "https://x.org"
    assert plugin.set_editor_text("link", "https://y.org", data.sub.id)
    assert LinkSubmission.query.filter_by(submission_id=data.sub.id).count() == 1
    assert not plugin.set_editor_text("onlinetext", "x", data.sub.id)
    assert not plugin.set_editor_text("link", "x", 9999)
    # без событий
    assert AuditLog.query.count() == 0

# ---------- remove / delete_instance ----------

def test_remove(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    assert plugin.remove(data.sub)
    assert plugin.get_link_submission(data.sub.id) is None
    # повторно - тоже успех
    assert plugin.remove(data.sub)

def test_delete_instance_only_touches_own_assignment(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    plugin.save(data.sub2, {"link_editor": "https://moodle.org"})
    plugin_for(data.other).save(data.osub, {"link_editor": "https://other.com"})
    assert plugin.delete_instance()
    assert LinkSubmission.query.filter_by(assignment_id=data.assignment.id).count() == 0
    assert LinkSubmission.query.filter_by(assignment_id=data.other.id).count() == 1

# ---------- copy ----------

def test_copy_submission_with_files(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    fs = get_file_storage()
    fs.create_file_from_string({
        "context_id": data.assignment.context_id, "component": COMPONENT,
        "filearea": FILEAREA, "itemid": data.sub.id, "filename": "notes.txt",
    }, "hello")

    assert plugin.copy_submission(data.sub, data.sub2)
    assert plugin.get_editor_text("link", data.sub2.id) == "https://example.com"
    copied = fs.get_area_files(data.assignment.context_id, COMPONENT, FILEAREA, data.sub2.id)
    assert [f.filename for f in copied] == ["notes.txt"]
    assert copied[0].content == b"hello"

    # источник не изменился
    assert plugin.get_editor_text("link", data.sub.id) == "https://example.com"
    assert len(fs.get_area_files(data.assignment.context_id, COMPONENT, FILEAREA, data.sub.id)) == 1

def test_copy_overwrites_existing_dest(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    plugin.save(data.sub2, {"link_editor": "https://moodle.org"})
    assert plugin.copy_submission(data.sub, data.sub2)
    assert LinkSubmission.query.filter_by(submission_id=data.sub2.id).count() == 1
    assert plugin.get_editor_text("link", data.sub2.id) == "https://example.com"

def test_copy_twice_replaces_dest_files(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    fs = get_file_storage()
    fs.create_file_from_string({
        "context_id": data.assignment.context_id, "component": COMPONENT,
        "filearea": FILEAREA, "itemid": data.sub.id, "filename": "n.txt",
    }, "v1")
    assert plugin.copy_submission(data.sub, data.sub2)

    plugin.save(data.sub, {"link_editor": "https://moodle.org"})
    assert plugin.copy_submission(data.sub, data.sub2)
    copied = fs.get_area_files(data.assignment.context_id, COMPONENT, FILEAREA, data.sub2.id)
    assert [f.filename for f in copied] == ["n.txt"]
    assert plugin.get_editor_text("link", data.sub2.id) == "https://moodle.org"

def test_copy_onto_itself_changes_nothing(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    fs = get_file_storage()
    fs.create_file_from_string({
        "context_id": data.assignment.context_id, "component": COMPONENT,
        "filearea": FILEAREA, "itemid": data.sub.id, "filename": "n.txt",
    }, "v1")
    assert plugin.copy_submission(data.sub, data.sub)
    files = fs.get_area_files(data.assignment.context_id, COMPONENT, FILEAREA, data.sub.id)
    assert [f.filename for f in files] == ["n.txt"]
    assert LinkSubmission.query.filter_by(submission_id=data.sub.id).count() == 1

def test_copy_without_link_is_noop(data):
    plugin = plugin_for(data.assignment)
    assert plugin.copy_submission(data.sub, data.sub2)
    assert plugin.get_link_submission(data.sub2.id) is None

# ---------- form / view ----------

def test_get_form_elements_prefills(app, data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    with app.test_request_context("/assign/1/link"):
        form = LinkSubmissionForm()
        values: dict = {}
        assert plugin.get_form_elements(data.sub, form, values)
        assert values["link"] == "https://example.com"
        assert form.link_editor.data == "https://example.com"
        assert form.link_editor.label.text == "Link submission"

def test_get_form_elements_new_submission(app, data):
    plugin = plugin_for(data.assignment)
    with app.test_request_context("/assign/1/link"):
        form = LinkSubmissionForm()
        values: dict = {}
        plugin.get_form_elements(None, form, values)
        assert values["link"] == ""

def test_view_and_summary_without_link(app, data):
    plugin = plugin_for(data.assignment)
    with app.test_request_context("/"):
        assert plugin.view(data.sub) == ""
        assert plugin.view_summary(data.sub) == ("", True)

def test_view_renders_clickable_link(app, data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    with app.test_request_context("/"):
        html = plugin.view(data.sub)
        assert 'href="https://example.com"' in html
        assert "Export to portfolio" in html

def test_summary_short_link_has_no_word_count(app, data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    with app.test_request_context("/"):
        html, show_view_link = plugin.view_summary(data.sub)
        assert show_view_link is True
        assert "https://example.com" in html
        assert "words)" not in html

def test_summary_long_link_is_shortened(app, data):
    link = "https://example.com/" + "a" * 150
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": link})
    with app.test_request_context("/"):
        html, show_view_link = plugin.view_summary(data.sub)
        assert html.startswith("(4 words)")
        assert "..." in html
        assert link not in html
        assert show_view_link is True

def test_plagiarism_links_prepended_when_enabled(app, data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    register_provider(app, lambda p: f'<span class="plag">{p["content"]}</span>')
    with app.test_request_context("/"):
        assert '<span class="plag">' not in plugin.view(data.sub)
        app.config["ENABLE_PLAGIARISM"] = True
        html = plugin.view(data.sub)
        assert html.startswith('<span class="plag">https://example.com</span>')

# ---------- cascades ----------

def test_deleting_submission_removes_link(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    db.session.commit()

    db.session.delete(data.sub)
    db.session.commit()
    assert LinkSubmission.query.count() == 0

    # новая попытка с тем же id не наследует чужую ссылку
    fresh = Submission(assignment_id=data.assignment.id, user_id=data.s2.id)
    db.session.add(fresh)
    db.session.commit()
    assert plugin.get_link_submission(fresh.id) is None

def test_bulk_submission_delete_cascades_in_db(data):
    plugin = plugin_for(data.assignment)
    plugin.save(data.sub, {"link_editor": "https://example.com"})
    plugin.save(data.sub2, {"link_editor": "https://moodle.org"})
    db.session.commit()
    sid = data.sub.id

    db.session.execute(delete(Submission).where(Submission.id == sid))
    db.session.commit()
    assert LinkSubmission.query.filter_by(submission_id=sid).count() == 0
    assert LinkSubmission.query.count() == 1

def test_deleting_assignment_removes_links(data):
    plugin_for(data.assignment).save(data.sub, {"link_editor": "https://example.com"})
    plugin_for(data.assignment).save(data.gsub, {"link_editor": "https://moodle.org"})
    plugin_for(data.other).save(data.osub, {"link_editor": "https://other.com"})
    db.session.commit()
    aid, other_id = data.assignment.id, data.other.id

    db.session.delete(data.assignment)
    db.session.commit()
    assert LinkSubmission.query.filter_by(assignment_id=aid).count() == 0
    assert Submission.query.filter_by(assignment_id=aid).count() == 0
    assert LinkSubmission.query.filter_by(assignment_id=other_id).count() == 1
