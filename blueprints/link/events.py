from __future__ import annotations

from blueprints.assign.events import AssignEvent, SubmissionEvent

class AssessableUploaded(AssignEvent):
    """Контент ответа загружен (для антиплагиата)."""
    name = "assignsubmission_link.assessable_uploaded"
    entity = "submission"
    required_other = ("content", "pathnamehashes")

class SubmissionCreated(SubmissionEvent):
    name = "assignsubmission_link.submission_created"
    entity = "assignsubmission_link"

class SubmissionUpdated(SubmissionEvent):
    name = "assignsubmission_link.submission_updated"
    entity = "assignsubmission_link"
