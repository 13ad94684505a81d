"""
Refresh cycle: fetch -> merge -> validate -> replace the table -> render summary.

A single upstream miss or invalid record aborts the cycle before anything is
written. The summary image is best effort and never undoes a committed refresh.
"""
import logging
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from django.db import IntegrityError

from . import utils
from .exceptions import UpstreamUnavailable, ValidationFailed
from .gdp import estimate_gdp
from .models import Country
from .serializers import CountryRefreshSerializer
from .summary import render_summary_image, save_summary_image

logger = logging.getLogger(__name__)

COUNTRIES_SOURCE = "Countries API"
RATES_SOURCE = "Exchange rates API"


@dataclass
class RefreshResult:
    total_countries: int
    last_refreshed_at: datetime
    image_generated: bool
    duration_seconds: float


def _lookup_rate(rates, currency_code):
    """USD rate for currency_code; unparseable or zero rates count as missing."""
    if not currency_code or currency_code not in rates:
        return None
    try:
        rate = float(rates[currency_code])
    except (TypeError, ValueError):
        return None
    return rate or None


def build_candidate(raw, rates):
    """Merge one raw country record with the rates table into a row dict."""
    currencies = raw.get("currencies")
    # v2 shape only: a list of {"code": ...}; anything else means no currency
    first_currency = currencies[0] if isinstance(currencies, list) and currencies else None
    currency_code = first_currency.get("code") if isinstance(first_currency, dict) else None
    currency_code = currency_code or None

    exchange_rate = _lookup_rate(rates, currency_code)
    population = raw.get("population")
    if isinstance(population, int) and not isinstance(population, bool):
        estimated_gdp = estimate_gdp(population, currency_code, exchange_rate)
    else:
        # invalid population, rejected by validation
        estimated_gdp = None

    return {
        "name": raw.get("name"),
        "capital": raw.get("capital") or None,
        "region": raw.get("region") or None,
        "population": population,
        "currency_code": currency_code,
        "exchange_rate": exchange_rate,
        "estimated_gdp": estimated_gdp,
        "flag_url": raw.get("flag") or None,
    }


def validate_candidate(candidate):
    serializer = CountryRefreshSerializer(data=candidate)
    if not serializer.is_valid():
        details = {field: str(messages[0]) for field, messages in serializer.errors.items()}
        raise ValidationFailed(details=details, country=candidate.get("name"))
    return serializer.validated_data


def _first_duplicate(rows):
    counts = Counter(row["name"] for row in rows)
    return next((name for name, n in counts.items() if n > 1), None)


def refresh_countries():
    start_time = time.time()
    logger.info("Country refresh started")

    countries_data = utils.fetch_countries()
    if countries_data is None:
        raise UpstreamUnavailable(COUNTRIES_SOURCE)

    rates = utils.fetch_exchange_rates()
    if rates is None:
        raise UpstreamUnavailable(RATES_SOURCE)

    now = utils.get_now()

    rows = []
    for raw in countries_data:
        candidate = build_candidate(raw if isinstance(raw, dict) else {}, rates)
        try:
            rows.append(validate_candidate(candidate))
        except ValidationFailed as exc:
            logger.warning("Refresh aborted, invalid country %r: %s", exc.country, exc.details)
            raise

    try:
        Country.objects.replace_all(rows, now)
    except IntegrityError as exc:
        duplicate = _first_duplicate(rows)
        logger.warning("Refresh aborted, replace rolled back: %s", exc)
        if duplicate is None:
            raise
        raise ValidationFailed(details={"name": "must be unique"}, country=duplicate) from exc

    # aggregates come from the table this cycle just committed
    total = Country.objects.count()
    top5 = [
        {"name": c.name, "estimated_gdp": c.estimated_gdp}
        for c in Country.objects.top_by_gdp(5)
    ]

    image_generated = True
    try:
        png = render_summary_image(total, top5, now)
        save_summary_image(png, total, now)
    except Exception:
        image_generated = False
        logger.exception("Summary image generation failed; refreshed data kept")

    duration = round(time.time() - start_time, 2)
    logger.info("Country refresh finished: %d countries in %.2fs", total, duration)
    return RefreshResult(
        total_countries=total,
        last_refreshed_at=now,
        image_generated=image_generated,
        duration_seconds=duration,
    )
