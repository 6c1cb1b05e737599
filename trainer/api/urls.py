from django.urls import path
from .views import (
    DueTermsView,
    GroupDetailView,
    GroupListView,
    ReviewBatchView,
    SessionAnswerView,
    SessionDetailView,
    SessionListView,
    TermDetailView,
    TermListView,
    initialize_data,
)

urlpatterns = [
    path("init", initialize_data, name="init-data"),
    path("groups", GroupListView.as_view(), name="groups"),
    path("groups/<str:group_id>", GroupDetailView.as_view(), name="group-detail"),
    path("terms", TermListView.as_view(), name="terms"),
    path("terms/<str:term_id>", TermDetailView.as_view(), name="term-detail"),
    path("due", DueTermsView.as_view(), name="due-terms"),
    path("reviews", ReviewBatchView.as_view(), name="review"),
    path("sessions", SessionListView.as_view(), name="sessions"),
    path("sessions/<uuid:session_id>", SessionDetailView.as_view(), name="session-detail"),
    path(
        "sessions/<uuid:session_id>/answers",
        SessionAnswerView.as_view(),
        name="session-answer",
    ),
]
