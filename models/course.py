from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from extensions import db

# ---------- Association Tables ----------
group_members = db.Table(
    "group_members",
    db.Column("group_id", db.Integer, db.ForeignKey("course_groups.id", ondelete="CASCADE"), primary_key=True),
    db.Column("user_id", db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    db.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
)


class Course(db.Model):
    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(primary_key=True)
    shortname: Mapped[str] = mapped_column(db.String(100), nullable=False, unique=True)
    fullname: Mapped[str] = mapped_column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<Course {self.shortname}>"


class CourseGroup(db.Model):
    __tablename__ = "course_groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)

    course = relationship("Course")
    members = relationship("User", secondary=group_members, backref="course_groups")

    def __repr__(self):
        return f"<CourseGroup {self.name}>"
