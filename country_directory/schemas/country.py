from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

NOT_AVAILABLE = "N/A"


class CurrencyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    symbol: str = ""


class Country(BaseModel):
    """A single directory record.

    Mapping and sequence fields default to empty containers so filtering and
    display code never has to tell "missing" apart from "empty".
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, description="Three-letter country code (cca3)")
    common_name: str = ""
    official_name: str = ""
    capitals: tuple[str, ...] = ()
    population: int = Field(0, ge=0)
    region: str = ""
    subregion: str | None = None
    languages: dict[str, str] = Field(default_factory=dict)
    currencies: dict[str, CurrencyInfo] = Field(default_factory=dict)
    flag_image_url: str = ""
    area: float | None = Field(None, ge=0)
    # Weak references: codes may point outside the loaded dataset.
    borders: tuple[str, ...] = ()


class CountryDetail(BaseModel):
    """Country read model enriched with the display fallbacks of the detail page."""

    country: Country
    capital_display: str
    location_display: str
    primary_currency_code: str | None = None
    primary_currency: CurrencyInfo | None = None
    exchange_rate: float | None = Field(
        None, description="Units of the primary currency per one US dollar."
    )
    is_favorite: bool = False

    @classmethod
    def from_country(
        cls,
        country: Country,
        *,
        exchange_rate: float | None = None,
        is_favorite: bool = False,
    ) -> CountryDetail:
        capital_display = ", ".join(country.capitals) or NOT_AVAILABLE
        location_display = country.region
        if country.subregion:
            location_display = f"{country.region} ({country.subregion})".strip()

        currency_code: str | None = None
        currency: CurrencyInfo | None = None
        if country.currencies:
            currency_code, info = next(iter(country.currencies.items()))
            currency = CurrencyInfo(name=info.name, symbol=info.symbol or NOT_AVAILABLE)

        return cls(
            country=country,
            capital_display=capital_display,
            location_display=location_display,
            primary_currency_code=currency_code,
            primary_currency=currency,
            exchange_rate=exchange_rate if currency_code else None,
            is_favorite=is_favorite,
        )
