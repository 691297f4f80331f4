from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, NamedTuple, Optional


class CurrencyInfo(NamedTuple):
    code: str
    symbol: str
    name: str


SUPPORTED_CURRENCIES: Dict[str, CurrencyInfo] = {
    c.code: c
    for c in (
        CurrencyInfo("USD", "$", "US Dollar"),
        CurrencyInfo("EUR", "€", "Euro"),
        CurrencyInfo("GBP", "£", "British Pound"),
        CurrencyInfo("CAD", "C$", "Canadian Dollar"),
        CurrencyInfo("AUD", "A$", "Australian Dollar"),
        CurrencyInfo("JPY", "¥", "Japanese Yen"),
        CurrencyInfo("CHF", "CHF", "Swiss Franc"),
        CurrencyInfo("CNY", "¥", "Chinese Yuan"),
        CurrencyInfo("INR", "₹", "Indian Rupee"),
        CurrencyInfo("KRW", "₩", "South Korean Won"),
        CurrencyInfo("SGD", "S$", "Singapore Dollar"),
        CurrencyInfo("HKD", "HK$", "Hong Kong Dollar"),
        CurrencyInfo("NOK", "kr", "Norwegian Krone"),
        CurrencyInfo("SEK", "kr", "Swedish Krona"),
        CurrencyInfo("DKK", "kr", "Danish Krone"),
        CurrencyInfo("PLN", "zł", "Polish Zloty"),
        CurrencyInfo("CZK", "Kč", "Czech Koruna"),
        CurrencyInfo("HUF", "Ft", "Hungarian Forint"),
        CurrencyInfo("BRL", "R$", "Brazilian Real"),
        CurrencyInfo("MXN", "$", "Mexican Peso"),
        CurrencyInfo("ZAR", "R", "South African Rand"),
        CurrencyInfo("TRY", "₺", "Turkish Lira"),
        CurrencyInfo("AED", "د.إ", "UAE Dirham"),
        CurrencyInfo("SAR", "﷼", "Saudi Riyal"),
    )
}

_EURO_AREA = (
    "DE", "FR", "IT", "ES", "NL", "BE", "AT", "PT", "IE", "FI",
    "GR", "LU", "MT", "CY", "SK", "SI", "EE", "LV", "LT",
)

COUNTRY_CURRENCY_MAP: Dict[str, str] = {
    "US": "USD", "CA": "CAD", "GB": "GBP", "AU": "AUD", "JP": "JPY",
    "CH": "CHF", "CN": "CNY", "IN": "INR", "KR": "KRW", "SG": "SGD",
    "HK": "HKD", "NO": "NOK", "SE": "SEK", "DK": "DKK", "PL": "PLN",
    "CZ": "CZK", "HU": "HUF", "BR": "BRL", "MX": "MXN", "ZA": "ZAR",
    "TR": "TRY", "AE": "AED", "SA": "SAR",
    **{code: "EUR" for code in _EURO_AREA},
}

# No minor unit shown for these
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

CENT = Decimal("0.01")


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def currency_for_country(country_code: Optional[str], default: str = "USD") -> str:
    if not country_code:
        return default
    return COUNTRY_CURRENCY_MAP.get(country_code.upper(), default)


def format_price(amount, currency_code: str) -> str:
    """Render an amount with its currency symbol, e.g. ``$12.50`` or ``¥1,300``."""
    info = SUPPORTED_CURRENCIES.get(currency_code)
    symbol = info.symbol if info else currency_code
    value = Decimal(amount)

    if currency_code in ZERO_DECIMAL_CURRENCIES:
        return f"{symbol}{value.quantize(Decimal('1'), rounding=ROUND_HALF_UP):,}"
    return f"{symbol}{quantize(value):.2f}"
