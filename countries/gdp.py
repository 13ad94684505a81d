"""
Estimated GDP derivation.

The multiplier is a synthetic stand-in for a real economic model: every
country gets a fresh draw from [1000, 2000) on each refresh, so the figure
is only meaningful as a rough ranking signal.
"""
import math
import random

MULTIPLIER_MIN = 1000
MULTIPLIER_MAX = 2000

# largest float below MULTIPLIER_MAX
_MULTIPLIER_CEILING = math.nextafter(MULTIPLIER_MAX, MULTIPLIER_MIN)


def make_multiplier():
    value = MULTIPLIER_MIN + random.random() * (MULTIPLIER_MAX - MULTIPLIER_MIN)
    # the sum rounds up to MULTIPLIER_MAX for random() close enough to 1.0
    return min(value, _MULTIPLIER_CEILING)


def estimate_gdp(population, currency_code, exchange_rate, multiplier=None):
    """
    - usable rate            -> population * multiplier / rate
    - currency but no rate   -> None (unknown)
    - no currency at all     -> 0
    """
    if exchange_rate is not None and exchange_rate > 0:
        if multiplier is None:
            multiplier = make_multiplier()
        return (population * multiplier) / exchange_rate
    if currency_code:
        return None
    return 0
