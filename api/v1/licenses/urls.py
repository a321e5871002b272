"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

app_name = "licenses"

urlpatterns = [
    path(
        "licenses",
        views.CreateLicenseView.as_view(),
        name="create-license",
    ),
    path(
        "licenses/<str:license_id>/revoke",
        views.RevokeLicenseView.as_view(),
        name="revoke-license",
    ),
    path(
        "licenses/<str:license_id>/revocation",
        views.RevocationStatusView.as_view(),
        name="revocation-status",
    ),
    path(
        "revocations",
        views.RevocationListView.as_view(),
        name="list-revocations",
    ),
]
