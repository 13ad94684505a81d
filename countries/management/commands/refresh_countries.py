from django.core.management.base import BaseCommand, CommandError

from countries.exceptions import CountryAPIError
from countries.refresh import refresh_countries


class Command(BaseCommand):
    help = "Fetch countries and exchange rates and replace the cached table."

    def handle(self, *args, **options):
        try:
            result = refresh_countries()
        except CountryAPIError as exc:
            raise CommandError(str(exc.as_payload())) from exc

        self.stdout.write(self.style.SUCCESS(
            f"Refreshed {result.total_countries} countries "
            f"at {result.last_refreshed_at.isoformat()} "
            f"in {result.duration_seconds}s"
        ))
        if not result.image_generated:
            self.stderr.write(self.style.WARNING("Summary image was not generated"))
