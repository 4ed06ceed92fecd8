from rest_framework.permissions import BasePermission


class IsOrderParty(BasePermission):
    message = "Only the client or freelancer on this order can access it."

    def has_object_permission(self, request, view, obj):
        return obj.is_party(request.user)
