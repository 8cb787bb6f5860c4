from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("vocab", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StudyProgress",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("ease", models.PositiveSmallIntegerField(default=250)),
                ("interval", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=12)),
                ("reviews", models.PositiveIntegerField(default=0)),
                ("lapses", models.PositiveIntegerField(default=0)),
                ("last_reviewed", models.DateTimeField(blank=True, null=True)),
                ("next_review", models.DateTimeField(blank=True, null=True)),
                ("card", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to="vocab.card")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="progress", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "study_progress",
                "indexes": [models.Index(fields=["user", "next_review"], name="progress_user_next_idx")],
                "constraints": [models.UniqueConstraint(fields=("user", "card"), name="unique_user_card_progress")],
            },
        ),
        migrations.CreateModel(
            name="ReviewLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rating", models.CharField(max_length=8)),
                ("idempotency_key", models.CharField(blank=True, max_length=64, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("ease", models.PositiveSmallIntegerField()),
                ("interval", models.DecimalField(decimal_places=4, max_digits=12)),
                ("reviews", models.PositiveIntegerField()),
                ("lapses", models.PositiveIntegerField()),
                ("next_review_at", models.DateTimeField()),
                ("card", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="review_logs", to="vocab.card")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="review_logs", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "review_log",
                "indexes": [models.Index(fields=["user", "card", "created_at"], name="review_log_user_card_idx")],
                "constraints": [models.UniqueConstraint(fields=("user", "card", "idempotency_key"), name="unique_review_idempotency_key")],
            },
        ),
    ]
