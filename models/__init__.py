from .user import Role, User, STAFF_ROLES
from .course import Course, CourseGroup, group_members
from .assignment import Assignment, Submission, SubmissionStatus
from .link_submission import LinkSubmission
from .audit import AuditLog
from .stored_file import StoredFile
from .legacy import LegacyAssignment, LegacySubmission

__all__ = [
    "Role", "User", "STAFF_ROLES",
    "Course", "CourseGroup", "group_members",
    "Assignment", "Submission", "SubmissionStatus",
    "LinkSubmission",
    "AuditLog",
    "StoredFile",
    "LegacyAssignment", "LegacySubmission",
]
