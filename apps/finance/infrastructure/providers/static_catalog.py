from apps.finance.domain.interfaces import BaseCurrencyCatalogProvider
from apps.finance.domain.models import CurrencyInfo

# Currencies supported by FreeCurrencyAPI; used to seed a fresh database
# without network access.
DEFAULT_CURRENCIES = [
    ("AUD", "Australian Dollar", "A$"),
    ("BGN", "Bulgarian Lev", "лв"),
    ("BRL", "Brazilian Real", "R$"),
    ("CAD", "Canadian Dollar", "CA$"),
    ("CHF", "Swiss Franc", "CHF"),
    ("CNY", "Chinese Yuan", "¥"),
    ("CZK", "Czech Koruna", "Kč"),
    ("DKK", "Danish Krone", "kr"),
    ("EUR", "Euro", "€"),
    ("GBP", "British Pound Sterling", "£"),
    ("HKD", "Hong Kong Dollar", "HK$"),
    ("HUF", "Hungarian Forint", "Ft"),
    ("IDR", "Indonesian Rupiah", "Rp"),
    ("ILS", "Israeli New Sheqel", "₪"),
    ("INR", "Indian Rupee", "₹"),
    ("ISK", "Icelandic Króna", "kr"),
    ("JPY", "Japanese Yen", "¥"),
    ("KRW", "South Korean Won", "₩"),
    ("MXN", "Mexican Peso", "MX$"),
    ("MYR", "Malaysian Ringgit", "RM"),
    ("NOK", "Norwegian Krone", "kr"),
    ("NZD", "New Zealand Dollar", "NZ$"),
    ("PHP", "Philippine Peso", "₱"),
    ("PLN", "Polish Zloty", "zł"),
    ("RON", "Romanian Leu", "lei"),
    ("SEK", "Swedish Krona", "kr"),
    ("SGD", "Singapore Dollar", "S$"),
    ("THB", "Thai Baht", "฿"),
    ("TRY", "Turkish Lira", "₺"),
    ("USD", "US Dollar", "$"),
    ("ZAR", "South African Rand", "R"),
]


class StaticCurrencyCatalogProvider(BaseCurrencyCatalogProvider):

    def get_currencies(self) -> list[CurrencyInfo]:
        return [CurrencyInfo(code=code, name=name, symbol=symbol) for code, name, symbol in DEFAULT_CURRENCIES]
