import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import trainer.data.models
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Group",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=trainer.data.models.new_id,
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=200)),
                ("is_default", models.BooleanField(default=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
            ],
            options={
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="Term",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=trainer.data.models.new_id,
                        max_length=64,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("term", models.CharField(max_length=255)),
                ("phonetic", models.CharField(blank=True, default="", max_length=255)),
                (
                    "term_translation",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("definition_en", models.TextField(blank=True, default="")),
                ("definition_cn", models.TextField()),
                ("example", models.TextField(blank=True, default="")),
                ("wrong_definitions", models.JSONField(blank=True, default=list)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("new", "new"),
                            ("learning", "learning"),
                            ("learned", "learned"),
                        ],
                        default="new",
                        max_length=16,
                    ),
                ),
                (
                    "next_review_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "review_stage",
                    models.PositiveSmallIntegerField(
                        default=0,
                        validators=[django.core.validators.MaxValueValidator(5)],
                    ),
                ),
                ("consecutive_failures", models.PositiveIntegerField(default=0)),
                (
                    "group",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="terms",
                        to="trainer.group",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["next_review_at"], name="term_next_review_idx"
                    ),
                    models.Index(
                        fields=["group", "next_review_at"],
                        name="term_group_next_review_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReviewSessionRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, primary_key=True, serialize=False
                    ),
                ),
                (
                    "state",
                    models.CharField(
                        choices=[
                            ("loading", "loading"),
                            ("presenting", "presenting"),
                            ("answered", "answered"),
                            ("finished", "finished"),
                            ("empty", "empty"),
                            ("abandoned", "abandoned"),
                        ],
                        default="loading",
                        max_length=16,
                    ),
                ),
                ("snapshot", models.JSONField(default=dict)),
                ("applied", models.BooleanField(default=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
                (
                    "group",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="trainer.group",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["state", "created_at"],
                        name="session_state_created_idx",
                    ),
                ],
            },
        ),
    ]
