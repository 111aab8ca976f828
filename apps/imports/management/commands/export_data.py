from __future__ import annotations

from django.core.management.base import BaseCommand  # type: ignore

from apps.imports.exporters import export_csv
from apps.imports.importer import ImportKind


class Command(BaseCommand):
    help = "Exports users or bookings as CSV"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument("kind", choices=[kind.value for kind in ImportKind])
        parser.add_argument("--output", "-o", help="Write to this file instead of stdout")

    def handle(self, *args, **options):  # type: ignore
        output = options.get("output")
        if output:
            with open(output, "w", newline="", encoding="utf-8") as stream:
                count = export_csv(options["kind"], stream)
            self.stderr.write(self.style.SUCCESS(f"Exported {count} {options['kind']} to {output}"))
        else:
            export_csv(options["kind"], self.stdout)
