from datetime import date

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from apps.payroll.exceptions import PayrollError
from apps.payroll.services import prepare_period


class Command(BaseCommand):
    help = "Create (if missing) and regenerate the DRAFT payroll for a month. Intended for cron."

    def add_arguments(self, parser):
        today = date.today()
        parser.add_argument("--month", type=int, default=today.month)
        parser.add_argument("--year", type=int, default=today.year)
        parser.add_argument("--actor", default="scheduler", help="Recorded as the payroll creator")

    def handle(self, *args, **options):
        try:
            period = prepare_period(options["month"], options["year"], actor=options["actor"])
        except (PayrollError, ValidationError) as e:
            raise CommandError(str(e.detail))

        self.stdout.write(self.style.SUCCESS(
            f"Payroll {period.month:02d}/{period.year} is {period.status}: "
            f"{period.total_employees} entries, {len(period.skipped_employees)} skipped"
        ))
