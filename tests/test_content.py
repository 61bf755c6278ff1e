from datetime import datetime, timezone

import pytest

from app.extensions import db
from app.models import Assignment, AssignmentSubmission, CourseMaterial, MaterialView, Quiz
from app.services import content, enrollment, materials, submissions
from app.services.results import ErrorKind

from conftest import as_principal, upload


@pytest.fixture()
def lecturer(ctx, campus):
    return as_principal(campus.lecturer)


def test_lecturer_uploads_material_file(campus, lecturer, s3):
    result = content.upload_material(lecturer, campus.algorithms, "Week 2 slides", "Presentation",
                                     file=upload("w2.pptx", content_type="application/vnd.ms-powerpoint"))
    assert result.ok
    material = result.value
    assert material.type == "presentation"
    assert material.uploaded_by.user_id == campus.lecturer
    assert material.file_url.startswith("https://files.test/course-materials/")
    assert len(s3.objects) == 1


def test_material_from_url_and_validation(campus, lecturer):
    linked = content.upload_material(lecturer, campus.algorithms, "Lecture video", "video",
                                     file_url="https://video.test/lecture-3")
    assert linked.value.file_url == "https://video.test/lecture-3"
    assert content.upload_material(lecturer, campus.algorithms, "", "notes",
                                   file_url="x").kind is ErrorKind.VALIDATION
    assert content.upload_material(lecturer, campus.algorithms, "Audio", "podcast",
                                   file_url="x").kind is ErrorKind.VALIDATION
    assert content.upload_material(lecturer, campus.algorithms, "Notes", "notes").kind is ErrorKind.VALIDATION


def test_authoring_follows_course_teaching(ctx, campus):
    other = content.upload_material(as_principal(campus.other_lecturer), campus.algorithms,
                                    "Hijack", "notes", file_url="x")
    assert other.kind is ErrorKind.FORBIDDEN
    timetabled = content.upload_material(as_principal(campus.timetabled), campus.databases,
                                         "Normal forms", "notes", file_url="https://files.test/nf.pdf")
    assert timetabled.ok
    assert content.upload_material(as_principal(campus.alice_user), campus.algorithms,
                                   "Mine", "notes", file_url="x").kind is ErrorKind.FORBIDDEN
    assert content.upload_material(as_principal(campus.admin), 4242,
                                   "Lost", "notes", file_url="x").kind is ErrorKind.NOT_FOUND


def test_deleting_material_removes_its_views(ctx, campus):
    alice = as_principal(campus.alice_user)
    enrollment.create_enrollment(alice, campus.alice, campus.algorithms)
    materials.record_material_view(alice, campus.notes)
    assert content.delete_material(as_principal(campus.other_lecturer), campus.notes).kind is ErrorKind.FORBIDDEN
    assert content.delete_material(as_principal(campus.lecturer), campus.notes).ok
    assert db.session.get(CourseMaterial, campus.notes) is None
    assert MaterialView.query.count() == 0


def test_create_assignment_parses_due_date(campus, lecturer):
    result = content.create_assignment(lecturer, campus.algorithms, "Graph essay",
                                       "2025-11-30T17:00:00", description="BFS vs DFS")
    assert result.ok
    assignment = db.session.get(Assignment, result.value.id)
    assert assignment.due_date.replace(tzinfo=timezone.utc) == datetime(2025, 11, 30, 17, tzinfo=timezone.utc)
    assert assignment.assigned_by.user_id == campus.lecturer
    bad = content.create_assignment(lecturer, campus.algorithms, "Graph essay", "next friday")
    assert bad.kind is ErrorKind.VALIDATION


def test_update_assignment_keeps_omitted_fields(campus, lecturer):
    result = content.update_assignment(lecturer, campus.essay, title="Sorting essay (revised)")
    assert result.ok
    assignment = db.session.get(Assignment, campus.essay)
    assert assignment.title == "Sorting essay (revised)"
    assert assignment.due_date is not None
    assert content.update_assignment(lecturer, campus.essay).kind is ErrorKind.VALIDATION
    assert content.update_assignment(lecturer, 4242, title="x").kind is ErrorKind.NOT_FOUND


def test_delete_assignment_removes_submissions(ctx, campus):
    alice = as_principal(campus.alice_user)
    enrollment.create_enrollment(alice, campus.alice, campus.algorithms)
    submissions.submit_assignment(alice, campus.essay, upload())
    assert content.delete_assignment(alice, campus.essay).kind is ErrorKind.FORBIDDEN
    assert content.delete_assignment(as_principal(campus.admin), campus.essay).ok
    assert AssignmentSubmission.query.count() == 0


def test_create_and_update_quiz(campus, lecturer):
    created = content.create_quiz(lecturer, campus.algorithms, "Quiz 2", "30", "2025-10-01T10:00:00+00:00")
    assert created.ok
    assert created.value.total_marks == 30
    assert content.create_quiz(lecturer, campus.algorithms, "Quiz 3", "0",
                               "2025-10-01T10:00:00").kind is ErrorKind.VALIDATION
    assert content.update_quiz(lecturer, created.value.id, total_marks="25").ok
    assert db.session.get(Quiz, created.value.id).total_marks == 25


def test_quiz_marks_cannot_drop_below_a_score(ctx, campus):
    alice = as_principal(campus.alice_user)
    enrollment.create_enrollment(alice, campus.alice, campus.algorithms)
    sub_id = submissions.submit_quiz(alice, campus.quiz, upload()).value.id
    lecturer = as_principal(campus.lecturer)
    submissions.score_quiz_submission(lecturer, sub_id, "18")
    assert content.update_quiz(lecturer, campus.quiz, total_marks="15").kind is ErrorKind.VALIDATION
    assert content.update_quiz(lecturer, campus.quiz, total_marks="18").ok
    assert content.delete_quiz(lecturer, campus.quiz).ok
    assert db.session.get(Quiz, campus.quiz) is None
