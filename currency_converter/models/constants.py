"""Currency constants shared by the rate tiers and the display endpoints.

Rates are units of currency per 1 USD; USD is the base so its own rate is 1.0.
"""

from typing import Dict, List

BASE_CURRENCY = "USD"

STATIC_RATES_TO_BASE: Dict[str, float] = {
    "USD": 1.0,
    "EUR": 0.92,
    "GBP": 0.79,
    "JPY": 150.0,
    "CAD": 1.35,
    "AUD": 1.52,
    "INR": 83.0,
    "PHP": 58.0,
    "THB": 34.5,
    "VND": 25400.0,
}

CURRENCY_NAMES: Dict[str, str] = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "INR": "Indian Rupee",
    "PHP": "Philippine Peso",
    "THB": "Thai Baht",
    "VND": "Vietnamese Dong",
}

# Display order for GET /currencies
SUPPORTED_CURRENCIES: List[str] = list(CURRENCY_NAMES)
