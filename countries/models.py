from django.db import models, transaction
from django.db.models import F, Max

from .exceptions import CountryNotFound

# ?sort= values -> ordering. Null GDPs go last in both directions.
SORT_ORDERINGS = {
    "name_asc": (F("name").asc(),),
    "name_desc": (F("name").desc(),),
    "gdp_desc": (F("estimated_gdp").desc(nulls_last=True), F("name").asc()),
    "gdp_asc": (F("estimated_gdp").asc(nulls_last=True), F("name").asc()),
}
DEFAULT_SORT = "name_asc"


class CountryQuerySet(models.QuerySet):

    def filtered(self, region=None, currency=None):
        """Case-insensitive equality filters; empty values are ignored."""
        qs = self
        if region:
            qs = qs.filter(region__iexact=region)
        if currency:
            qs = qs.filter(currency_code__iexact=currency)
        return qs

    def sorted_by(self, sort=None):
        return self.order_by(*SORT_ORDERINGS[sort or DEFAULT_SORT])

    def top_by_gdp(self, n=5):
        return self.filter(estimated_gdp__isnull=False).order_by("-estimated_gdp", "name")[:n]

    def latest_refresh(self):
        return self.aggregate(latest=Max("last_refreshed_at"))["latest"]


class CountryManager(models.Manager.from_queryset(CountryQuerySet)):

    def replace_all(self, rows, refreshed_at):
        """
        Swap the whole table for `rows` (dicts of Country fields).
        Delete and insert share one transaction: readers see either the old
        table or the new one, and a failed insert leaves the old one intact.
        """
        countries = [self.model(last_refreshed_at=refreshed_at, **row) for row in rows]
        with transaction.atomic():
            self.all().delete()
            self.bulk_create(countries, batch_size=100)
        return len(countries)

    def get_by_name(self, name):
        country = self.filter(name__iexact=name).first()
        if country is None:
            raise CountryNotFound(name)
        return country

    def delete_by_name(self, name):
        country = self.get_by_name(name)
        country.delete()
        return country


class Country(models.Model):
    # id: auto-generated
    name = models.CharField(max_length=200, unique=True)
    capital = models.CharField(max_length=200, null=True, blank=True)
    region = models.CharField(max_length=100, null=True, blank=True)
    population = models.BigIntegerField(default=0)
    # currency_code: first currency listed upstream, null when none
    currency_code = models.CharField(max_length=10, null=True, blank=True)
    # exchange_rate: USD rate for currency_code; null when not available
    exchange_rate = models.FloatField(null=True, blank=True)
    # estimated_gdp: computed; 0 without currency, null without a rate
    estimated_gdp = models.FloatField(null=True, blank=True)
    flag_url = models.URLField(max_length=500, null=True, blank=True)
    # last_refreshed_at: start time of the refresh cycle that wrote the row
    last_refreshed_at = models.DateTimeField()

    objects = CountryManager()

    class Meta:
        verbose_name_plural = "countries"
        indexes = [
            models.Index(fields=["region"], name="country_region_idx"),
            models.Index(fields=["currency_code"], name="country_currency_code_idx"),
            models.Index(fields=["estimated_gdp"], name="country_estimated_gdp_idx"),
            models.Index(fields=["last_refreshed_at"], name="country_refreshed_at_idx"),
        ]

    def __str__(self):
        return self.name


class SummaryImageQuerySet(models.QuerySet):

    def latest_image(self):
        return self.order_by("-id").first()


class SummaryImageManager(models.Manager.from_queryset(SummaryImageQuerySet)):

    def publish(self, png, total_countries, as_of):
        """Store a new version and drop the older ones."""
        with transaction.atomic():
            image = self.create(png=png, total_countries=total_countries, as_of=as_of)
            self.exclude(pk=image.pk).delete()
        return image


class SummaryImage(models.Model):
    """Latest rendered summary PNG, versioned by insertion order."""
    png = models.BinaryField()
    total_countries = models.IntegerField(default=0)
    as_of = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = SummaryImageManager()

    def __str__(self):
        return f"Summary image as of {self.as_of.isoformat()}"
