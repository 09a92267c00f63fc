"""
Kirana Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("actions", views.actions_view),
    path("state", views.state_view),
    path("insights", views.insights_view),
    path("bill/preview", views.bill_preview_view),
]
