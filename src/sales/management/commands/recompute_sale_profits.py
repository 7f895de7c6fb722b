"""Re-run the profit split on stored sales."""
from django.core.management.base import BaseCommand

from sales.services import recompute_sale_profits


class Command(BaseCommand):
    help = (
        "Recompute profit fields of every sale from its stored commission "
        "percentage. The ranking is not re-evaluated."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Only count the sales that would change.",
        )

    def handle(self, *args, **options):
        dry_run = options["dry_run"]
        changed = recompute_sale_profits(dry_run=dry_run)
        if dry_run:
            self.stdout.write(f"{changed} venta(s) cambiarian.")
        else:
            self.stdout.write(self.style.SUCCESS(f"{changed} venta(s) actualizadas."))
