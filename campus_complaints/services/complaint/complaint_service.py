"""
Core complaint service: creation, listings, detail, status changes and
comments.

Every operation on an existing complaint checks in a fixed order: the
complaint must exist, the actor must be allowed, the input must be valid.
Only then is state changed and committed.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from campus_complaints.config.settings import Settings, get_settings
from campus_complaints.core.clock import Clock
from campus_complaints.core.exceptions import ErrorCode, ValidationError
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.complaint_attachment import ComplaintAttachment
from campus_complaints.models.enums import ComplaintStatus, UserRole
from campus_complaints.repositories.complaint_repository import ComplaintRepository
from campus_complaints.repositories.specifications import AssignedTo, SubmittedBy
from campus_complaints.repositories.user_repository import UserRepository
from campus_complaints.schemas.complaint import (
    CommentView,
    ComplaintCreate,
    ComplaintDetail,
    ComplaintSummary,
    DepartmentComplaintList,
    RecipientOption,
    StatusOption,
    UserOption,
)
from campus_complaints.services.base import BaseService, ServiceResult
from campus_complaints.services.common.permissions import Actor, require_role
from campus_complaints.services.complaint import access_policy, lifecycle
from campus_complaints.services.complaint.recipient_resolver import find_option, resolve_recipients
from campus_complaints.services.complaint.routing import candidate_roles
from campus_complaints.services.complaint.visibility import (
    Origin,
    StatusFilter,
    parse_status_filter,
    visibility_spec,
)
from campus_complaints.services.file.file_storage import FileStorage, LocalFileStorage, UploadedFile

OVERSIGHT_ROLES = (UserRole.HOD, UserRole.ADMIN)


class ComplaintService(BaseService):
    """
    High-level complaint operations for one request.

    Holds one session; callers create a service per unit of work.
    """

    def __init__(
        self,
        db_session: Session,
        clock: Optional[Clock] = None,
        file_storage: Optional[FileStorage] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize complaint service.

        Args:
            db_session: Active database session
            clock: Time source for timestamps
            file_storage: Attachment storage (local disk from settings by default)
            settings: Application settings (cached settings by default)
        """
        super().__init__(db_session, clock)
        self.settings = settings or get_settings()
        self.file_storage: FileStorage = file_storage or LocalFileStorage.from_settings(self.settings)
        self.complaints = ComplaintRepository(db_session)
        self.users = UserRepository(db_session)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    def list_complaints(
        self,
        actor: Actor,
        status: StatusFilter = None,
        origin: Optional[Union[Origin, str]] = None,
    ) -> ServiceResult[List[ComplaintSummary]]:
        """
        Complaints visible to ``actor``, newest first.

        Args:
            actor: Requesting actor
            status: Optional exact status; unrecognized values are ignored
            origin: Teacher-only ``assigned``/``submitted`` refinement

        Returns:
            ServiceResult containing complaint summaries
        """
        try:
            spec = visibility_spec(actor, status, origin)
            complaints = self.complaints.find_visible(spec)
            return ServiceResult.success(
                [ComplaintSummary.from_complaint(c) for c in complaints],
                metadata={"count": len(complaints)},
            )
        except Exception as e:
            return self._handle_exception(e, "list complaints", actor.user_id)

    def department_complaints(
        self,
        actor: Actor,
        status: StatusFilter = None,
        teacher_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> ServiceResult[DepartmentComplaintList]:
        """
        Oversight list for HODs (their department) and admins (everything).

        Args:
            actor: HOD or admin
            status: Optional exact status
            teacher_id: Keep complaints assigned to this teacher
            student_id: Keep complaints raised by this student

        Returns:
            ServiceResult containing complaints plus teacher and student
            filter options
        """
        try:
            require_role(actor, OVERSIGHT_ROLES)

            status_value = parse_status_filter(status)
            spec = visibility_spec(actor, status_value)
            if teacher_id:
                spec = spec & AssignedTo(teacher_id)
            if student_id:
                spec = spec & SubmittedBy(student_id)

            complaints = self.complaints.find_visible(spec)

            return ServiceResult.success(
                DepartmentComplaintList(
                    complaints=[ComplaintSummary.from_complaint(c) for c in complaints],
                    teachers=self._member_options(actor, UserRole.TEACHER),
                    students=self._member_options(actor, UserRole.STUDENT),
                    status=status_value,
                    teacher_id=teacher_id or None,
                    student_id=student_id or None,
                ),
                metadata={"count": len(complaints)},
            )
        except Exception as e:
            return self._handle_exception(e, "list department complaints", actor.user_id)

    def _member_options(self, actor: Actor, role: UserRole) -> List[UserOption]:
        if actor.effective_role == UserRole.ADMIN:
            members = self.users.find_by_roles([role])
        else:
            members = self.users.find_department_members(actor.department_id, role)
        return [UserOption(id=user.id, display_name=user.display_name) for user in members]

    # -------------------------------------------------------------------------
    # Detail
    # -------------------------------------------------------------------------

    def get_detail(self, actor: Actor, complaint_id: int) -> ServiceResult[ComplaintDetail]:
        """
        Complaint with comments (newest first), attachments and the actor's
        status-update right.

        Returns:
            ServiceResult containing ComplaintDetail, NOT_FOUND or
            INSUFFICIENT_PERMISSIONS
        """
        try:
            complaint = self.complaints.get_or_raise(complaint_id)
            access_policy.require_read(actor, complaint)

            comments = self.complaints.comments_newest_first(complaint.id)
            detail = ComplaintDetail(
                complaint=ComplaintSummary.from_complaint(complaint),
                description=complaint.description,
                comments=[CommentView.from_comment(c) for c in comments],
                attachments=[a.file_path for a in complaint.attachments],
                can_update_status=access_policy.can_mutate_status(actor, complaint),
                status_options=StatusOption.all(),
            )
            return ServiceResult.success(detail)
        except Exception as e:
            return self._handle_exception(e, "get complaint detail", complaint_id)

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def recipient_options(self, actor: Actor) -> ServiceResult[List[RecipientOption]]:
        """Eligible recipients for a complaint raised by ``actor``."""
        try:
            return ServiceResult.success(self._resolve_recipients(actor))
        except Exception as e:
            return self._handle_exception(e, "resolve recipients", actor.user_id)

    def category_options(self) -> List[str]:
        """Suggested categories; any non-empty category is accepted."""
        return list(self.settings.COMPLAINT_CATEGORIES)

    def _resolve_recipients(self, actor: Actor) -> List[RecipientOption]:
        roles = candidate_roles(actor.effective_role)
        return resolve_recipients(actor, self.users.find_by_roles(roles))

    def create_complaint(
        self,
        actor: Actor,
        request: Union[ComplaintCreate, Dict[str, Any]],
        attachment: Optional[UploadedFile] = None,
    ) -> ServiceResult[ComplaintSummary]:
        """
        Raise a new complaint routed to an eligible recipient.

        Args:
            actor: Creating actor (becomes the submitter)
            request: Complaint fields and chosen recipient
            attachment: Optional file stored through the file storage

        Returns:
            ServiceResult containing the created complaint, or
            VALIDATION_ERROR for invalid fields, a missing recipient or a
            recipient the actor may not route to
        """
        try:
            if not isinstance(request, ComplaintCreate):
                try:
                    request = ComplaintCreate.model_validate(request)
                except PydanticValidationError as exc:
                    raise ValidationError.from_pydantic(exc, "Invalid complaint") from exc

            options = self._resolve_recipients(actor)
            if not options or request.recipient_id is None:
                raise ValidationError(
                    "A recipient is required" if options else "No eligible recipient is available",
                    field="recipient_id",
                    error_code=ErrorCode.RECIPIENT_MISSING,
                )
            if find_option(options, request.recipient_id) is None:
                raise ValidationError(
                    f"User {request.recipient_id} is not an eligible recipient",
                    field="recipient_id",
                )

            now = self.clock.now()
            complaint = Complaint(
                title=request.title,
                description=request.description,
                category=request.category,
                status=ComplaintStatus.NEW,
                submitter_id=actor.user_id,
                assignee_id=request.recipient_id,
                created_at=now,
                escalated=False,
            )

            stored_path = None
            if attachment is not None:
                stored_path = self.file_storage.save(attachment.filename, attachment.content)
                complaint.attachments.append(ComplaintAttachment(file_path=stored_path))

            try:
                with self.transaction():
                    self.complaints.add(complaint)
            except Exception:
                if stored_path is not None:
                    self.file_storage.delete(stored_path)
                raise

            self._logger.info(
                f"Complaint {complaint.id} created by {actor.user_id} for {request.recipient_id}"
            )
            return ServiceResult.success(
                ComplaintSummary.from_complaint(complaint),
                message="Complaint created successfully",
                metadata={"complaint_id": complaint.id},
            )
        except Exception as e:
            return self._handle_exception(e, "create complaint", actor.user_id)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def update_status(
        self,
        actor: Actor,
        complaint_id: int,
        status: Union[ComplaintStatus, str, int],
    ) -> ServiceResult[ComplaintSummary]:
        """
        Change the status of a complaint.

        Returns:
            ServiceResult containing the updated complaint, or NOT_FOUND,
            INSUFFICIENT_PERMISSIONS, VALIDATION_ERROR (unknown status) or
            CONFLICT (changed concurrently)
        """
        try:
            complaint = self.complaints.get_or_raise(complaint_id)
            access_policy.require_status_mutation(actor, complaint)
            target = lifecycle.parse_status(status)

            previous = complaint.status
            with self.transaction(resource_type="Complaint", resource_id=complaint_id):
                lifecycle.apply_status_transition(complaint, target, self.clock.now())

            self._logger.info(
                f"Complaint {complaint_id} status {previous.label} -> {target.label} by {actor.user_id}"
            )
            return ServiceResult.success(
                ComplaintSummary.from_complaint(complaint),
                message=f"Status updated to {target.label}",
            )
        except Exception as e:
            return self._handle_exception(e, "update complaint status", complaint_id)

    def add_comment(
        self,
        actor: Actor,
        complaint_id: int,
        content: Optional[str],
    ) -> ServiceResult[CommentView]:
        """
        Comment on a complaint the actor can read.

        Returns:
            ServiceResult containing the new comment, or NOT_FOUND,
            INSUFFICIENT_PERMISSIONS or VALIDATION_ERROR
        """
        try:
            complaint = self.complaints.get_or_raise(complaint_id)
            access_policy.require_read(actor, complaint)
            lifecycle.validate_comment_content(content)

            with self.transaction(resource_type="Complaint", resource_id=complaint_id):
                comment = lifecycle.add_comment(complaint, actor, content, self.clock.now())

            self._logger.info(f"Comment {comment.id} added to complaint {complaint_id} by {actor.user_id}")
            return ServiceResult.success(CommentView.from_comment(comment))
        except Exception as e:
            return self._handle_exception(e, "add comment", complaint_id)


__all__ = ["ComplaintService", "OVERSIGHT_ROLES"]
