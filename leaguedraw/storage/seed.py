"""The default roster: eight countries with four city teams each."""

from __future__ import annotations

SEED_COUNTRIES: dict[str, tuple[str, ...]] = {
    "Türkiye": ("İstanbul", "Ankara", "İzmir", "Antalya"),
    "Almanya": ("Berlin", "Frankfurt", "Münih", "Dortmund"),
    "Fransa": ("Paris", "Marsilya", "Nice", "Lyon"),
    "Hollanda": ("Amsterdam", "Rotterdam", "Lahey", "Eindhoven"),
    "Portekiz": ("Lisbon", "Porto", "Braga", "Coimbra"),
    "İtalya": ("Roma", "Milano", "Venedik", "Napoli"),
    "İspanya": ("Sevilla", "Madrid", "Barselona", "Granada"),
    "Belçika": ("Brüksel", "Brugge", "Gent", "Anvers"),
}

TEAM_NAME_PREFIX = "Adesso"


def seed_rows() -> list[tuple[str, str, str]]:
    """Return ``(name, country, city)`` for every team of the default roster."""

    return [
        (f"{TEAM_NAME_PREFIX} {city}", country, city)
        for country, cities in SEED_COUNTRIES.items()
        for city in cities
    ]
