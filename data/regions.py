"""Read-only region tables for climate and population inference.

Country codes are ISO 3166-1 alpha-2. State codes follow the local postal
convention of the country (Indian state codes, USPS codes for the US).

The population table is a best-effort mapping from country of residence
to the population group whose BMI cutoffs apply; explicit user input always
wins over it. It is deliberately kept to the curated set below.
"""

from types import MappingProxyType

REGION_TABLE_VERSION = "2024.1"

TROPICAL_COUNTRIES = frozenset({
    "IN", "TH", "MY", "SG", "ID", "PH", "VN", "LK", "BD", "MM", "LA", "KH",
    "NG", "KE", "TZ", "UG", "GH", "CI", "CM",
    "BR", "CO", "VE", "EC", "PE",
})

COLD_COUNTRIES = frozenset({
    "NO", "SE", "FI", "IS", "GL", "CA", "RU", "BY", "UA", "KZ", "MN", "EE", "LV", "LT",
})

ARID_COUNTRIES = frozenset({
    "AE", "SA", "QA", "OM", "KW", "BH", "EG", "LY", "DZ", "MA", "TN", "JO", "SY", "IQ", "YE",
})


def _states(**groups):
    table = {}
    for climate, codes in groups.items():
        for code in codes.split():
            table[code] = climate
    return MappingProxyType(table)


STATE_CLIMATES = MappingProxyType({
    "IN": _states(
        tropical="KL TN AP TS GA KA MH OR WB JH BR AS",
        arid="RJ GJ",
        temperate="UP MP HR PB DL",
        cold="HP UK JK SK",
    ),
    "US": _states(
        tropical="FL HI",
        arid="AZ NV NM UT",
        cold="AK MN WI ND SD MT WY ME VT NH",
        temperate=(
            "CA NY TX PA IL OH GA NC MI NJ VA WA MA IN MO TN MD CO SC AL "
            "LA KY OR OK CT IA MS AR KS NE WV ID RI DE"
        ),
    ),
})

POPULATION_COUNTRIES = MappingProxyType({
    "south_asian": frozenset({"IN", "PK", "BD", "LK", "NP", "BT", "MV"}),
    "east_asian": frozenset({"CN", "JP", "KR", "TW", "MN"}),
    "southeast_asian": frozenset({"TH", "VN", "ID", "MY", "SG", "PH", "MM", "KH", "LA", "BN"}),
    "caucasian": frozenset({
        "GB", "DE", "FR", "IT", "ES", "NL", "BE", "AT", "CH", "SE", "NO", "DK", "FI",
        "PL", "CZ", "SK", "HU", "RO", "BG", "HR", "SI", "RS", "RU", "UA", "BY", "GR",
        "PT", "IE", "AL", "MK", "BA", "ME", "AU", "NZ",
    }),
    "black_african": frozenset({
        "NG", "KE", "TZ", "UG", "GH", "CI", "CM", "ZM", "ZW", "MW", "SN", "ML", "BF",
        "NE", "TD", "CF", "SD", "SS", "ER", "ET", "SO", "CD", "CG", "GA", "AO", "MZ",
        "BW", "NA", "LS", "SZ",
    }),
    "hispanic": frozenset({
        "MX", "CO", "AR", "PE", "VE", "CL", "EC", "GT", "CU", "BO", "DO", "HN", "PY",
        "SV", "NI", "CR", "PA", "UY", "PR",
    }),
    "middle_eastern": frozenset({
        "SA", "AE", "QA", "KW", "OM", "BH", "YE", "IR", "IQ", "SY", "JO", "LB", "IL",
        "PS", "TR", "EG", "LY", "TN", "DZ", "MA",
    }),
    "pacific_islander": frozenset({"FJ", "TO", "WS", "PG", "SB", "VU", "NC", "PF"}),
})

# Countries too diverse to infer a single group from residence.
HIGH_DIVERSITY_COUNTRIES = frozenset({"US", "CA", "BR", "ZA"})

__all__ = [
    "REGION_TABLE_VERSION",
    "TROPICAL_COUNTRIES",
    "COLD_COUNTRIES",
    "ARID_COUNTRIES",
    "STATE_CLIMATES",
    "POPULATION_COUNTRIES",
    "HIGH_DIVERSITY_COUNTRIES",
]
