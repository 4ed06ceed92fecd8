from rest_framework.permissions import BasePermission


class IsClient(BasePermission):
    message = "Only clients can perform this action."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == "client"
        )


class IsFreelancer(BasePermission):
    message = "Only freelancers can perform this action."

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.role == "freelancer"
        )


class IsPlatformAdmin(BasePermission):
    """
    Admin authority comes from the persisted role, not an email allow-list.
    """
    message = "Access denied: Admin privileges required"

    def has_permission(self, request, view):
        return (
            request.user.is_authenticated
            and request.user.is_platform_admin
        )
