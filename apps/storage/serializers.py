from rest_framework import serializers
from .models import StoredFile


class StoredFileSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = StoredFile
        fields = ["id", "original_name", "content_type", "size", "url", "created_at"]
        read_only_fields = fields

    def get_url(self, obj):
        if not obj.file:
            return None
        request = self.context.get("request")
        if request:
            return request.build_absolute_uri(obj.file.url)
        return obj.file.url


class OwnedFileField(serializers.PrimaryKeyRelatedField):
    """
    Accepts a storage id only if the requesting user uploaded it.
    """

    def get_queryset(self):
        request = self.context.get("request")
        if request is None or not request.user.is_authenticated:
            return StoredFile.objects.none()
        return StoredFile.objects.filter(uploaded_by=request.user)
