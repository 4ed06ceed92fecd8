from apps.audit.models import ActivityLog


def log_activity(user, action, details="", related_id=None):
    return ActivityLog.objects.create(
        user=user,
        action=action,
        details=details,
        related_id="" if related_id is None else str(related_id),
    )
