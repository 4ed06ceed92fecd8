import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from apps.audit.services.activity_logger import log_activity
from apps.notifications.models import Notification
from apps.notifications.services.create_notifications import notify_user
from apps.users.models import Profile
from apps.verification.models import VerificationRequest

logger = logging.getLogger(__name__)


def submit_verification(user, college_email, college_name, student_id, govt_id=None, course="", department=""):
    profile = Profile.objects.filter(user=user).first()
    if profile is None or not profile.is_freelancer:
        raise PermissionDenied("Only freelancers can submit verification requests")

    with transaction.atomic():
        in_progress = VerificationRequest.objects.select_for_update().filter(
            user=user, status__in=VerificationRequest.ACTIVE_STATUSES
        )
        if in_progress.exists():
            raise ValidationError("You already have a verification request in progress")

        request = VerificationRequest.objects.create(
            user=user,
            college_email=college_email,
            college_name=college_name,
            course=course or "",
            department=department or "",
            student_id=student_id,
            govt_id=govt_id,
            status=VerificationRequest.PENDING,
        )

        profile.college_email = college_email
        profile.college_name = college_name
        profile.student_id = student_id
        profile.save(update_fields=["college_email", "college_name", "student_id", "updated_at"])

        log_activity(user, "verification_submitted", f"College: {college_name}", request.id)

    return request


def review_verification(admin, request_id, status, admin_notes=""):
    with transaction.atomic():
        request = (
            VerificationRequest.objects.select_for_update()
            .select_related("user")
            .filter(id=request_id)
            .first()
        )
        if request is None:
            raise ValidationError("Verification request not found")
        if request.status != VerificationRequest.PENDING:
            raise ValidationError("This request has already been reviewed")

        request.status = status
        request.admin_notes = admin_notes or ""
        request.reviewed_by = admin
        request.reviewed_at = timezone.now()
        request.save()

        if status == VerificationRequest.APPROVED:
            Profile.objects.filter(user=request.user).update(is_verified=True)
            notify_user(
                recipient=request.user,
                notif_type=Notification.VERIFICATION_APPROVED,
                message="Your student verification was approved. You can now publish gigs.",
                link="/profile",
                data={"verification_id": request.id},
            )
        else:
            message = "Your student verification was rejected."
            if request.admin_notes:
                message = f"{message} Notes: {request.admin_notes}"
            notify_user(
                recipient=request.user,
                notif_type=Notification.VERIFICATION_REJECTED,
                message=message,
                link="/verification",
                data={"verification_id": request.id},
            )

        log_activity(admin, f"verification_{status}", f"Request {request.id}", request.id)

    logger.info("Verification %s %s by admin %s", request.id, status, admin.id)
    return request
