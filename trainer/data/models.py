import uuid

from django.core.validators import MaxValueValidator
from django.db import models
from django.utils import timezone

from ..config import MAX_STAGE
from ..domain.enums import SessionState, TermStatus


def new_id():
    return str(uuid.uuid4())


class Group(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=new_id)
    name = models.CharField(max_length=200)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at"]

    def __str__(self):
        return self.name


class Term(models.Model):
    id = models.CharField(primary_key=True, max_length=64, default=new_id)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="terms")

    term = models.CharField(max_length=255)
    phonetic = models.CharField(max_length=255, blank=True, default="")
    term_translation = models.CharField(max_length=255, null=True, blank=True)
    definition_en = models.TextField(blank=True, default="")
    definition_cn = models.TextField()
    example = models.TextField(blank=True, default="")
    wrong_definitions = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    status = models.CharField(
        max_length=16,
        choices=[(s.value, s.value) for s in TermStatus],
        default=TermStatus.NEW.value,
    )
    next_review_at = models.DateTimeField(default=timezone.now)  # UTC
    review_stage = models.PositiveSmallIntegerField(
        default=0, validators=[MaxValueValidator(MAX_STAGE)]
    )
    consecutive_failures = models.PositiveIntegerField(default=0)

    class Meta:
        indexes = [
            models.Index(fields=["next_review_at"], name="term_next_review_idx"),
            models.Index(
                fields=["group", "next_review_at"], name="term_group_next_review_idx"
            ),
        ]

    def __str__(self):
        return self.term


class ReviewSessionRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4)
    group = models.ForeignKey(
        Group, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    state = models.CharField(
        max_length=16,
        choices=[(s.value, s.value) for s in SessionState],
        default=SessionState.LOADING.value,
    )
    snapshot = models.JSONField(default=dict)
    applied = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    finished_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["state", "created_at"], name="session_state_created_idx"),
        ]
