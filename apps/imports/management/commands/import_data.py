from __future__ import annotations

from pathlib import Path

from django.conf import settings  # type: ignore
from django.core.management.base import BaseCommand, CommandError  # type: ignore

from apps.bookings.bootstrap import get_repository
from apps.imports.importer import ImportKind, ReconciliationImporter
from apps.imports.parsers import ImportParseError


class Command(BaseCommand):
    help = "Imports users or bookings from a CSV file, row by row"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument("kind", choices=[kind.value for kind in ImportKind])
        parser.add_argument("path", help="CSV file to import")
        parser.add_argument(
            "--check-conflicts",
            action="store_true",
            default=None,
            help="Reject booking rows that overlap an existing pending or approved booking",
        )

    def handle(self, *args, **options):  # type: ignore
        path = Path(options["path"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")

        check_conflicts = options["check_conflicts"]
        if check_conflicts is None:
            check_conflicts = settings.IMPORT_CHECK_CONFLICTS

        importer = ReconciliationImporter(get_repository(), check_conflicts=check_conflicts)
        try:
            result = importer.import_csv(options["kind"], path.read_bytes())
        except ImportParseError as exc:
            raise CommandError(str(exc)) from exc

        for error in result.errors:
            self.stdout.write(self.style.WARNING(error))

        summary = f"Imported {result.success_count} row(s), {result.failed_count} failed"
        if result.failed_count:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
