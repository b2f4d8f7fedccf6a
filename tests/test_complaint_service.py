"""ComplaintService against a real database."""

from datetime import timedelta
from pathlib import Path

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from campus_complaints.models import Complaint, ComplaintStatus, UserRole
from campus_complaints.services.base import ErrorCode
from campus_complaints.services.complaint.complaint_service import ComplaintService
from campus_complaints.services.file.file_storage import UploadedFile
from tests.conftest import T0, actor_for


@pytest.fixture
def campus(make_department, make_user):
    cs = make_department("Computer Science")
    ee = make_department("Electrical")
    return {
        "cs": cs,
        "ee": ee,
        "student": make_user(UserRole.STUDENT, cs, first_name="Sam"),
        "teacher": make_user(UserRole.TEACHER, cs, first_name="Tara"),
        "other_teacher": make_user(UserRole.TEACHER, cs, first_name="Theo"),
        "ee_teacher": make_user(UserRole.TEACHER, ee, first_name="Eli"),
        "hod": make_user(UserRole.HOD, cs, first_name="Hana"),
        "ee_hod": make_user(UserRole.HOD, ee, first_name="Ezra"),
        "admin": make_user(UserRole.ADMIN, first_name="Ada"),
    }


@pytest.fixture
def service(db, clock, settings):
    return ComplaintService(db, clock=clock, settings=settings)


def payload(recipient_id=None, **overrides):
    data = {
        "title": "Lab PCs are slow",
        "description": "Every PC in lab 3 takes ten minutes to boot.",
        "category": "IT",
        "recipient_id": recipient_id,
    }
    data.update(overrides)
    return data


# --------------------------------------------------------------------------- #
# Creation
# --------------------------------------------------------------------------- #


class TestCreateComplaint:
    def test_student_routes_to_department_teacher(self, db, service, campus, clock):
        student, teacher = campus["student"], campus["teacher"]

        result = service.create_complaint(actor_for(student), payload(teacher.id))

        assert result.is_success
        summary = result.data
        assert summary.status == ComplaintStatus.NEW
        assert summary.submitter_id == student.id
        assert summary.assignee_id == teacher.id
        assert summary.created_at == clock.now()
        assert summary.updated_at is None
        assert summary.escalated is False
        assert db.get(Complaint, summary.id) is not None

    def test_fields_are_trimmed(self, service, campus):
        result = service.create_complaint(
            actor_for(campus["student"]),
            payload(campus["teacher"].id, title="  Lab PCs  ", category=" IT "),
        )

        assert result.data.title == "Lab PCs"
        assert result.data.category == "IT"

    @pytest.mark.parametrize("recipient", [None, "", "   "])
    def test_missing_recipient(self, service, campus, recipient):
        result = service.create_complaint(actor_for(campus["student"]), payload(recipient))

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "recipient_id"

    def test_admin_has_no_recipient_to_route_to(self, db, service, campus):
        result = service.create_complaint(actor_for(campus["admin"]), payload(campus["hod"].id))

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "recipient_id"
        assert db.query(Complaint).count() == 0

    @pytest.mark.parametrize("recipient_key", ["ee_teacher", "ee_hod", "admin", "student"])
    def test_student_cannot_route_outside_rules(self, db, service, campus, recipient_key):
        result = service.create_complaint(actor_for(campus["student"]), payload(campus[recipient_key].id))

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "recipient_id"
        assert db.query(Complaint).count() == 0

    def test_teacher_routes_to_hod_and_hod_to_admin(self, service, campus):
        from_teacher = service.create_complaint(actor_for(campus["teacher"]), payload(campus["hod"].id))
        from_hod = service.create_complaint(actor_for(campus["hod"]), payload(campus["admin"].id))
        teacher_to_teacher = service.create_complaint(
            actor_for(campus["teacher"]), payload(campus["other_teacher"].id)
        )

        assert from_teacher.is_success
        assert from_hod.is_success
        assert teacher_to_teacher.error_code == ErrorCode.VALIDATION_ERROR

    @pytest.mark.parametrize("field", ["title", "description", "category"])
    def test_blank_required_field(self, service, campus, field):
        result = service.create_complaint(
            actor_for(campus["student"]),
            payload(campus["teacher"].id, **{field: "   "}),
        )

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert field in result.error.details["field_errors"]

    def test_attachment_is_stored_and_linked(self, db, service, campus, settings):
        result = service.create_complaint(
            actor_for(campus["student"]),
            payload(campus["teacher"].id),
            attachment=UploadedFile("C:\\Users\\sam\\screenshot.png", b"\x89PNG data"),
        )

        assert result.is_success
        complaint = db.get(Complaint, result.data.id)
        assert len(complaint.attachments) == 1
        path = complaint.attachments[0].file_path
        assert path.startswith("/uploads/") and path.endswith("_screenshot.png")
        stored = list(Path(settings.UPLOAD_DIR).iterdir())
        assert [p.read_bytes() for p in stored] == [b"\x89PNG data"]

    def test_rejected_attachment_creates_nothing(self, db, service, campus):
        result = service.create_complaint(
            actor_for(campus["student"]),
            payload(campus["teacher"].id),
            attachment=UploadedFile("virus.exe", b"MZ"),
        )

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "attachment"
        assert db.query(Complaint).count() == 0

    def test_failed_commit_removes_stored_attachment(self, db, service, campus, settings, monkeypatch):
        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "commit", failing_commit)

        result = service.create_complaint(
            actor_for(campus["student"]),
            payload(campus["teacher"].id),
            attachment=UploadedFile("photo.png", b"\x89PNG data"),
        )

        assert result.error_code == ErrorCode.INTERNAL_ERROR
        monkeypatch.undo()
        assert db.query(Complaint).count() == 0
        assert list(Path(settings.UPLOAD_DIR).iterdir()) == []


def test_recipient_options_for_student(service, campus):
    options = service.recipient_options(actor_for(campus["student"])).unwrap()

    assert [o.id for o in options] == [
        campus["teacher"].id,
        campus["other_teacher"].id,
        campus["hod"].id,
    ]
    assert [o.group_label for o in options] == ["Teachers", "Teachers", "Heads of Department"]


def test_category_options_come_from_settings(service, settings):
    assert service.category_options() == list(settings.COMPLAINT_CATEGORIES)


# --------------------------------------------------------------------------- #
# Status updates
# --------------------------------------------------------------------------- #


class TestUpdateStatus:
    def test_assignee_updates_status(self, db, service, campus, make_complaint, clock):
        complaint = make_complaint(campus["student"], campus["teacher"])
        clock.advance(hours=3)

        result = service.update_status(actor_for(campus["teacher"]), complaint.id, "Resolved")

        assert result.is_success
        assert result.data.status == ComplaintStatus.RESOLVED
        assert result.data.updated_at == T0 + timedelta(hours=3)

    def test_missing_complaint_is_not_found_even_for_students(self, service, campus):
        result = service.update_status(actor_for(campus["student"]), 999, "bogus")

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_access_is_checked_before_the_status_value(self, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])

        result = service.update_status(actor_for(campus["student"]), complaint.id, "bogus")

        assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_unknown_status_is_a_validation_error(self, db, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])

        result = service.update_status(actor_for(campus["teacher"]), complaint.id, "Pending")

        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.error.field == "status"
        db.expire_all()
        assert db.get(Complaint, complaint.id).status == ComplaintStatus.NEW

    @pytest.mark.parametrize("actor_key, allowed", [
        ("hod", True),
        ("ee_hod", False),
        ("admin", True),
        ("other_teacher", False),
        ("student", False),
    ])
    def test_mutation_rights(self, service, campus, make_complaint, actor_key, allowed):
        complaint = make_complaint(campus["student"], campus["teacher"])

        result = service.update_status(actor_for(campus[actor_key]), complaint.id, ComplaintStatus.CLOSED)

        assert result.is_success is allowed
        if not allowed:
            assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_concurrent_change_is_a_conflict(self, db, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])
        assert complaint.version == 1

        with db.bind.begin() as conn:
            conn.execute(
                text("UPDATE complaints SET version = version + 1 WHERE id = :id"),
                {"id": complaint.id},
            )

        result = service.update_status(actor_for(campus["teacher"]), complaint.id, "Resolved")

        assert result.error_code == ErrorCode.CONFLICT
        assert "modified concurrently" in result.message
        assert result.error.details["resource_type"] == "Complaint"
        assert result.error.details["resource_id"] == str(complaint.id)


# --------------------------------------------------------------------------- #
# Detail and comments
# --------------------------------------------------------------------------- #


class TestDetailAndComments:
    def test_detail_lists_comments_newest_first(self, service, campus, make_complaint, clock):
        complaint = make_complaint(campus["student"], campus["teacher"])
        clock.advance(minutes=5)
        first = service.add_comment(actor_for(campus["teacher"]), complaint.id, "Checking").unwrap()
        second = service.add_comment(actor_for(campus["student"]), complaint.id, "Thanks").unwrap()

        detail = service.get_detail(actor_for(campus["student"]), complaint.id).unwrap()

        assert [c.id for c in detail.comments] == [second.id, first.id]
        assert detail.comments[0].author_name == campus["student"].display_name
        assert detail.can_update_status is False
        assert [o.label for o in detail.status_options] == [
            "New", "InProgress", "Resolved", "Closed", "Reopened",
        ]

    def test_assignee_detail_allows_status_update(self, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])

        detail = service.get_detail(actor_for(campus["teacher"]), complaint.id).unwrap()

        assert detail.can_update_status is True
        assert detail.description == complaint.description

    def test_detail_not_found_then_forbidden(self, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])

        assert service.get_detail(actor_for(campus["admin"]), 12345).error_code == ErrorCode.NOT_FOUND
        assert (
            service.get_detail(actor_for(campus["ee_teacher"]), complaint.id).error_code
            == ErrorCode.INSUFFICIENT_PERMISSIONS
        )

    def test_comment_touches_updated_at_only(self, db, service, campus, make_complaint, clock):
        complaint = make_complaint(campus["student"], campus["teacher"])
        clock.advance(hours=1)

        comment = service.add_comment(actor_for(campus["hod"]), complaint.id, "  Please fix  ").unwrap()

        assert comment.content == "Please fix"
        assert comment.created_at == T0 + timedelta(hours=1)
        db.expire_all()
        stored = db.get(Complaint, complaint.id)
        assert stored.updated_at == T0 + timedelta(hours=1)
        assert stored.status == ComplaintStatus.NEW

    def test_comment_check_order(self, service, campus, make_complaint):
        complaint = make_complaint(campus["student"], campus["teacher"])

        assert service.add_comment(actor_for(campus["student"]), 404, "").error_code == ErrorCode.NOT_FOUND
        assert (
            service.add_comment(actor_for(campus["ee_hod"]), complaint.id, "").error_code
            == ErrorCode.INSUFFICIENT_PERMISSIONS
        )
        empty = service.add_comment(actor_for(campus["student"]), complaint.id, "   ")
        assert empty.error_code == ErrorCode.VALIDATION_ERROR
        assert empty.error.field == "content"


# --------------------------------------------------------------------------- #
# Listings
# --------------------------------------------------------------------------- #


class TestListings:
    @pytest.fixture
    def complaints(self, campus, make_complaint):
        s, t, o, e = campus["student"], campus["teacher"], campus["other_teacher"], campus["ee_teacher"]
        return {
            "to_tara": make_complaint(s, t, created_at=T0),
            "to_theo": make_complaint(s, o, created_at=T0 + timedelta(hours=1), status=ComplaintStatus.RESOLVED),
            "tara_to_hod": make_complaint(t, campus["hod"], created_at=T0 + timedelta(hours=2)),
            "ee_only": make_complaint(e, campus["ee_hod"], created_at=T0 + timedelta(hours=3)),
        }

    def test_list_complaints_for_teacher_with_origin(self, service, campus, complaints):
        teacher = actor_for(campus["teacher"])

        everything = service.list_complaints(teacher).unwrap()
        assigned = service.list_complaints(teacher, origin="assigned").unwrap()
        submitted = service.list_complaints(teacher, origin="submitted").unwrap()

        assert [c.id for c in everything] == [complaints["tara_to_hod"].id, complaints["to_tara"].id]
        assert [c.id for c in assigned] == [complaints["to_tara"].id]
        assert [c.id for c in submitted] == [complaints["tara_to_hod"].id]

    def test_list_complaints_reports_count(self, service, campus, complaints):
        result = service.list_complaints(actor_for(campus["admin"]), status="Resolved")

        assert [c.id for c in result.data] == [complaints["to_theo"].id]
        assert result.metadata["count"] == 1

    def test_department_list_is_forbidden_for_students_and_teachers(self, service, campus):
        for key in ("student", "teacher"):
            result = service.department_complaints(actor_for(campus[key]))
            assert result.error_code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_hod_department_list_and_filters(self, service, campus, complaints):
        hod = actor_for(campus["hod"])

        listing = service.department_complaints(hod).unwrap()
        assert [c.id for c in listing.complaints] == [
            complaints["tara_to_hod"].id,
            complaints["to_theo"].id,
            complaints["to_tara"].id,
        ]
        assert {t.id for t in listing.teachers} == {campus["teacher"].id, campus["other_teacher"].id}
        assert [s.id for s in listing.students] == [campus["student"].id]

        by_teacher = service.department_complaints(hod, teacher_id=campus["other_teacher"].id).unwrap()
        assert [c.id for c in by_teacher.complaints] == [complaints["to_theo"].id]
        assert by_teacher.teacher_id == campus["other_teacher"].id

        by_student_and_status = service.department_complaints(
            hod, status="New", student_id=campus["student"].id
        ).unwrap()
        assert [c.id for c in by_student_and_status.complaints] == [complaints["to_tara"].id]
        assert by_student_and_status.status == ComplaintStatus.NEW

    def test_admin_department_list_covers_everyone(self, service, campus, complaints):
        listing = service.department_complaints(actor_for(campus["admin"])).unwrap()

        assert len(listing.complaints) == 4
        assert {t.id for t in listing.teachers} == {
            campus["teacher"].id,
            campus["other_teacher"].id,
            campus["ee_teacher"].id,
        }

