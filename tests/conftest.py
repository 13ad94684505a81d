"""
Pytest configuration and fixtures
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from rest_framework.test import APIClient

from countries.models import Country


@pytest.fixture(autouse=True)
def image_cache(settings, tmp_path):
    """Keep summary images out of the project cache directory"""
    settings.SUMMARY_IMAGE_CACHE_DIR = str(tmp_path / "cache")
    settings.SUMMARY_IMAGE_PATH = ""
    return tmp_path / "cache"


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def refreshed_at():
    return datetime(2025, 10, 24, 19, 14, 35, tzinfo=timezone.utc)


@pytest.fixture
def mock_countries_data():
    """Countries API payload"""
    return [
        {
            "name": "Nigeria",
            "capital": "Abuja",
            "region": "Africa",
            "population": 206139589,
            "flag": "https://flagcdn.com/ng.svg",
            "currencies": [{"code": "NGN", "name": "Nigerian naira", "symbol": "₦"}],
        },
        {
            "name": "Ghana",
            "capital": "Accra",
            "region": "Africa",
            "population": 31072945,
            "flag": "https://flagcdn.com/gh.svg",
            "currencies": [{"code": "GHS", "name": "Ghanaian cedi", "symbol": "₵"}],
        },
        {
            "name": "Germany",
            "capital": "Berlin",
            "region": "Europe",
            "population": 83240525,
            "flag": "https://flagcdn.com/de.svg",
            "currencies": [{"code": "EUR", "name": "Euro", "symbol": "€"}],
        },
        {
            "name": "Antarctica",
            "region": "Polar",
            "population": 1000,
            "flag": "https://flagcdn.com/aq.svg",
        },
        {
            "name": "Atlantis",
            "capital": "",
            "region": "Europe",
            "population": 5000,
            "flag": "",
            "currencies": [{"code": "ATL"}],
        },
    ]


@pytest.fixture
def mock_rates():
    """Exchange rates API 'rates' mapping"""
    return {"USD": 1, "NGN": 1600.23, "GHS": 15.34, "EUR": 0.92}


@pytest.fixture
def mock_upstream(mock_countries_data, mock_rates):
    """Patch both upstream clients with the sample payloads"""
    with patch("countries.utils.fetch_countries", return_value=mock_countries_data) as countries, \
            patch("countries.utils.fetch_exchange_rates", return_value=mock_rates) as rates:
        yield countries, rates


@pytest.fixture
def make_country(refreshed_at):
    def _make(name, **fields):
        fields.setdefault("population", 1000)
        fields.setdefault("last_refreshed_at", refreshed_at)
        return Country.objects.create(name=name, **fields)
    return _make
