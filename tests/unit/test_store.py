"""
Unit tests for the Country store (manager and queryset)
"""

from datetime import timedelta

import pytest
from django.db import IntegrityError

from countries.exceptions import CountryNotFound
from countries.models import Country, SummaryImage

pytestmark = pytest.mark.django_db


def _row(name, **fields):
    row = {
        "name": name,
        "capital": None,
        "region": None,
        "population": 1000,
        "currency_code": None,
        "exchange_rate": None,
        "estimated_gdp": 0,
        "flag_url": None,
    }
    row.update(fields)
    return row


class TestReplaceAll:

    def test_replaces_every_row_and_stamps_timestamp(self, make_country, refreshed_at):
        make_country("Oldland")
        now = refreshed_at + timedelta(hours=1)

        written = Country.objects.replace_all([_row("Nigeria"), _row("Ghana")], now)

        assert written == 2
        assert Country.objects.count() == 2
        assert not Country.objects.filter(name="Oldland").exists()
        assert set(Country.objects.values_list("last_refreshed_at", flat=True)) == {now}

    def test_duplicate_names_roll_back(self, make_country, refreshed_at):
        make_country("Oldland")

        with pytest.raises(IntegrityError):
            Country.objects.replace_all([_row("Nigeria"), _row("Nigeria")], refreshed_at)

        assert list(Country.objects.values_list("name", flat=True)) == ["Oldland"]

    def test_names_differing_in_case_are_distinct(self, refreshed_at):
        Country.objects.replace_all([_row("Niger"), _row("NIGER")], refreshed_at)
        assert Country.objects.count() == 2


class TestLookup:

    def test_get_by_name_is_case_insensitive(self, make_country):
        make_country("Nigeria")
        assert Country.objects.get_by_name("nigeria").name == "Nigeria"
        assert Country.objects.get_by_name("NIGERIA").name == "Nigeria"

    def test_get_by_name_missing_raises(self):
        with pytest.raises(CountryNotFound):
            Country.objects.get_by_name("Nowhere")

    def test_delete_by_name(self, make_country):
        make_country("Nigeria")
        Country.objects.delete_by_name("NIGERIA")
        assert Country.objects.count() == 0
        with pytest.raises(CountryNotFound):
            Country.objects.delete_by_name("Nigeria")


class TestQueries:

    @pytest.fixture
    def countries(self, make_country):
        make_country("Nigeria", region="Africa", currency_code="NGN", estimated_gdp=300.0)
        make_country("Ghana", region="Africa", currency_code="GHS", estimated_gdp=100.0)
        make_country("Eritrea", region="Africa", currency_code="ERN", estimated_gdp=None)
        make_country("Germany", region="Europe", currency_code="EUR", estimated_gdp=500.0)

    def test_filter_by_region_ignores_case(self, countries):
        names = set(Country.objects.filtered(region="africa").values_list("name", flat=True))
        assert names == {"Nigeria", "Ghana", "Eritrea"}

    def test_filter_by_currency(self, countries):
        names = list(Country.objects.filtered(currency="eur").values_list("name", flat=True))
        assert names == ["Germany"]

    def test_empty_filters_impose_no_constraint(self, countries):
        assert Country.objects.filtered(region="", currency=None).count() == 4

    def test_default_sort_is_name_ascending(self, countries):
        names = list(Country.objects.sorted_by(None).values_list("name", flat=True))
        assert names == ["Eritrea", "Germany", "Ghana", "Nigeria"]

    def test_gdp_desc_puts_nulls_last(self, countries):
        qs = Country.objects.filtered(region="Africa").sorted_by("gdp_desc")
        assert list(qs.values_list("name", flat=True)) == ["Nigeria", "Ghana", "Eritrea"]

    def test_gdp_asc_puts_nulls_last(self, countries):
        qs = Country.objects.filtered(region="Africa").sorted_by("gdp_asc")
        assert list(qs.values_list("name", flat=True)) == ["Ghana", "Nigeria", "Eritrea"]

    def test_top_by_gdp_excludes_nulls(self, countries):
        top = list(Country.objects.top_by_gdp(5).values_list("name", flat=True))
        assert top == ["Germany", "Nigeria", "Ghana"]

    def test_top_by_gdp_limits_length(self, countries):
        assert len(Country.objects.top_by_gdp(2)) == 2

    def test_latest_refresh(self, countries, refreshed_at):
        assert Country.objects.latest_refresh() == refreshed_at


def test_latest_refresh_empty_table():
    assert Country.objects.latest_refresh() is None


def test_summary_image_publish_keeps_only_latest(refreshed_at):
    SummaryImage.objects.publish(b"first", 1, refreshed_at)
    second = SummaryImage.objects.publish(b"second", 2, refreshed_at)

    assert SummaryImage.objects.count() == 1
    assert SummaryImage.objects.latest_image().pk == second.pk
    assert bytes(SummaryImage.objects.latest_image().png) == b"second"
