from django.urls import path
from .views import GenerateUploadUrlView, StoredFileDetailView, UploadFileView

urlpatterns = [
    path("storage/upload-url/", GenerateUploadUrlView.as_view(), name="storage-upload-url"),
    path("storage/upload/<uuid:token>/", UploadFileView.as_view(), name="storage-upload"),
    path("storage/<uuid:id>/", StoredFileDetailView.as_view(), name="storage-file-detail"),
]
