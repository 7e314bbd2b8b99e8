# scripts/dev_db_init.py
from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import (
    Assignment, Course, CourseGroup, LegacyAssignment, LegacySubmission,
    Submission, User
)
from blueprints.assign.files import get_file_storage

def _user(email: str, role: str, full_name: str) -> User:
    u = User.query.filter_by(email=email).first()
    if not u:
        u = User(email=email, role=role, full_name=full_name,
                 password_hash=generate_password_hash("pass"))
        db.session.add(u)
    return u

def seed_minimal():
    course = Course.query.filter_by(shortname="WEB101").first()
    if not course:
        course = Course(shortname="WEB101", fullname="Основы веб-разработки")
        db.session.add(course)

    _user("admin@example.com", "ADMIN", "Admin")
    _user("t1@example.com", "TEACHER", "Teacher One")
    s1 = _user("s1@example.com", "STUDENT", "Student One")
    s2 = _user("s2@example.com", "STUDENT", "Student Two")
    db.session.flush()

    if not CourseGroup.query.filter_by(course_id=course.id, name="Команда А").first():
        g = CourseGroup(course_id=course.id, name="Команда А")
        g.members.extend([s1, s2])
        db.session.add(g)

    if not Assignment.query.filter_by(course_id=course.id, name="Ссылка на портфолио").first():
        a = Assignment(course_id=course.id, name="Ссылка на портфолио")
        db.session.add(a)
        db.session.flush()
        db.session.add(Submission(assignment_id=a.id, user_id=s1.id))

    # старое задание "online" для проверки апгрейда
    if not LegacyAssignment.query.filter_by(course_id=course.id).first():
        old = LegacyAssignment(course_id=course.id, name="Online text (old)",
                               assignmenttype="online", type_version=2011112900)
        db.session.add(old)
        db.session.flush()
        old_sub = LegacySubmission(assignment_id=old.id, user_id=s2.id,
                                   data1="https://www.example.com", data2="1")
        db.session.add(old_sub)
        db.session.flush()
        get_file_storage().create_file_from_string({
            "context_id": old.context_id, "component": "mod_assignment",
            "filearea": "submission", "itemid": old_sub.id, "filename": "notes.txt",
        }, "draft notes")

    db.session.commit()

if __name__ == "__main__":
    app = create_app("dev")
    with app.app_context():
        db.create_all()
        seed_minimal()
        print("DB initialized and seeded ✅")
