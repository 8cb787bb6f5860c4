from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
import structlog

from scheduler.data.models import StudyProgress
from scheduler.domain.logic import clamp_ease

logger = structlog.get_logger()


class Command(BaseCommand):
    help = (
        "Repair study progress rows: clamp ease into bounds, reset negative "
        "intervals and fill in missing next review timestamps"
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run", action="store_true", help="Report the rows to fix without saving"
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        now = timezone.now()
        fixed = 0

        with transaction.atomic():
            rows = StudyProgress.objects.select_for_update().order_by("id")
            for row in rows:
                changes = {}
                ease = clamp_ease(row.ease)
                if ease != row.ease:
                    changes["ease"] = ease
                interval = row.interval
                if interval < 0:
                    interval = Decimal("0")
                    changes["interval"] = interval
                if row.next_review is None:
                    base = row.last_reviewed or now
                    changes["next_review"] = base + timedelta(days=float(interval))
                if not changes:
                    continue

                fixed += 1
                logger.info("progress_repaired",
                    progress_id=row.pk,
                    user_id=str(row.user_id),
                    card_id=str(row.card_id),
                    changes={k: str(v) for k, v in changes.items()},
                    dry_run=dry_run,
                )
                if not dry_run:
                    StudyProgress.objects.filter(pk=row.pk).update(**changes)

        verb = "Would fix" if dry_run else "Fixed"
        self.stdout.write(self.style.SUCCESS(f"{verb} {fixed} study progress records"))
