# population.py
# Reference populations used by the world-rank engine. Approximate on purpose.

WORLD_POPULATION = 8_232_000_000

DEMOGRAPHICS = {
    "age": {
        "10s": 1_300_000_000,
        "20s": 1_200_000_000,
        "30s": 1_150_000_000,
        "40s": 1_000_000_000,
        "50s": 900_000_000,
        "60s+": 2_680_000_000,
    },
    "gender": {
        "Male": 4_150_000_000,
        "Female": 4_080_000_000,
        "Other": 2_000_000,
    },
    "region": {
        "Japan": 124_000_000,
        "Asia": 4_700_000_000,
        "NorthAmerica": 600_000_000,
        "Europe": 740_000_000,
        "Other": 2_068_000_000,  # Africa, South America, Oceania
    },
}

FILTERS = ("global", "age", "gender", "region")

# smallest first
MILESTONES = [
    {"name": "Vatican City", "population": 800, "emoji": "🇻🇦"},
    {"name": "Tuvalu", "population": 11_000, "emoji": "🇹🇻"},
    {"name": "Monaco", "population": 39_000, "emoji": "🇲🇨"},
    {"name": "Iceland", "population": 370_000, "emoji": "🇮🇸"},
    {"name": "Singapore", "population": 5_900_000, "emoji": "🇸🇬"},
    {"name": "Greece", "population": 10_000_000, "emoji": "🇬🇷"},
    {"name": "Australia", "population": 26_000_000, "emoji": "🇦🇺"},
    {"name": "South Korea", "population": 51_000_000, "emoji": "🇰🇷"},
    {"name": "United Kingdom", "population": 67_000_000, "emoji": "🇬🇧"},
    {"name": "Germany", "population": 84_000_000, "emoji": "🇩🇪"},
    {"name": "Japan", "population": 124_000_000, "emoji": "🇯🇵"},
    {"name": "Russia", "population": 144_000_000, "emoji": "🇷🇺"},
    {"name": "Brazil", "population": 215_000_000, "emoji": "🇧🇷"},
    {"name": "Indonesia", "population": 275_000_000, "emoji": "🇮🇩"},
    {"name": "United States", "population": 333_000_000, "emoji": "🇺🇸"},
    {"name": "China", "population": 1_400_000_000, "emoji": "🇨🇳"},
    {"name": "India", "population": 1_420_000_000, "emoji": "🇮🇳"},
]


def population_for(filter_type: str, profile: dict = None) -> int:
    """
    Resolve the population a rank is measured against.

    `profile` holds the user's demographic answers ("age", "gender",
    "region"). A filter whose answer is missing falls back to the world.
    """
    if filter_type not in FILTERS:
        raise ValueError(f"Unknown population filter: {filter_type}")
    if filter_type == "global":
        return WORLD_POPULATION

    bucket = (profile or {}).get(filter_type)
    if not bucket:
        return WORLD_POPULATION
    return DEMOGRAPHICS[filter_type].get(bucket, WORLD_POPULATION)


def bucket_label(filter_type: str, profile: dict = None) -> str:
    if filter_type == "global":
        return "World"
    bucket = (profile or {}).get(filter_type)
    if not bucket or bucket not in DEMOGRAPHICS.get(filter_type, {}):
        return "World (set /profile to filter)"
    return f"{filter_type.title()}: {bucket}"
