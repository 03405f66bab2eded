from django.urls import path

from .views_uploads import ProfilePictureUploadView

urlpatterns = [
    path('profile/', ProfilePictureUploadView.as_view(), name='upload-profile'),
]
