"""Report sales whose stored profit split is inconsistent."""
from django.core.management.base import BaseCommand

from sales.services import verify_profit_distribution


class Command(BaseCommand):
    help = "Verify distributor/admin profit fields of every sale (read-only)."

    def handle(self, *args, **options):
        issues = verify_profit_distribution()
        if not issues:
            self.stdout.write(self.style.SUCCESS("Sin inconsistencias en la distribucion de ganancias."))
            return

        for issue in issues:
            self.stdout.write(f"{issue.sale_id} [{issue.code}] {issue.message}")
        self.stdout.write(self.style.WARNING(f"{len(issues)} inconsistencia(s) encontradas."))
