import logging
import os
from datetime import datetime, timezone

import requests
from django.conf import settings
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)


def _get_json(url):
    resp = requests.get(url, timeout=settings.UPSTREAM_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def fetch_countries():
    """
    Raw country records from the countries API, or None when it cannot be
    reached or answers with something that is not a list.
    """
    url = settings.COUNTRIES_API_URL
    try:
        data = _get_json(url)
    except (RequestException, ValueError) as exc:
        logger.warning("Countries API unavailable (%s): %s", url, exc)
        return None
    if not isinstance(data, list):
        logger.warning("Countries API returned %s, expected a list", type(data).__name__)
        return None
    return data


def fetch_exchange_rates():
    """Currency code -> USD rate mapping, or None when unavailable."""
    url = settings.EXCHANGE_RATES_API_URL
    try:
        data = _get_json(url)
    except (RequestException, ValueError) as exc:
        logger.warning("Exchange rates API unavailable (%s): %s", url, exc)
        return None
    # API returns 'rates' mapping
    rates = data.get("rates") if isinstance(data, dict) else None
    if not isinstance(rates, dict):
        logger.warning("Exchange rates API response has no 'rates' mapping")
        return None
    return rates


def get_cache_dir():
    """Return the writable cache directory, creating it if needed."""
    path = settings.SUMMARY_IMAGE_CACHE_DIR
    os.makedirs(path, exist_ok=True)
    return path


def get_summary_image_path():
    """Return full path to the summary image on disk."""
    return settings.SUMMARY_IMAGE_PATH or os.path.join(get_cache_dir(), "summary.png")


def get_now():
    """Return current UTC datetime (aware)."""
    return datetime.now(timezone.utc)
