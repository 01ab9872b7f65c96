"""Interest categories and tags.

The taxonomy backs ``GET /api/interests`` and contributes related search
terms to Scout prompts.
"""

from __future__ import annotations

INTEREST_CATEGORIES: list[dict[str, object]] = [
    {
        "name": "Outdoor",
        "tags": [
            "Hiking",
            "Camping",
            "Road Trips",
            "Beach",
            "Mountains",
            "National Parks",
            "Adventure Travel",
            "Backpacking",
        ],
    },
    {
        "name": "Social Activities",
        "tags": [
            "Networking",
            "Meetups",
            "Social Events",
            "Parties",
            "Happy Hour",
            "Clubbing",
            "Bars",
            "Dancing",
        ],
    },
    {
        "name": "Hobbies and Passion",
        "tags": [
            "Photography",
            "Reading",
            "Writing",
            "Crafts",
            "DIY",
            "Vintage Fashion",
            "Sneakers",
            "Collecting",
        ],
    },
    {
        "name": "Sports and Fitness",
        "tags": [
            "Gym",
            "Running",
            "Yoga",
            "Swimming",
            "Cycling",
            "Basketball",
            "Soccer",
            "Tennis",
            "Martial Arts",
        ],
    },
    {
        "name": "Health and Wellbeing",
        "tags": [
            "Meditation",
            "Wellness",
            "Spa",
            "Mental Health",
            "Nutrition",
            "Mindfulness",
            "Self-care",
        ],
    },
    {
        "name": "Technology",
        "tags": [
            "Coding",
            "AI",
            "Startups",
            "Tech Meetups",
            "Hackathons",
            "Gaming Tech",
            "VR",
            "Crypto",
        ],
    },
    {
        "name": "Art and Culture",
        "tags": [
            "Museums",
            "Art Galleries",
            "Theater",
            "Opera",
            "Ballet",
            "Film",
            "Concerts",
            "Live Music",
        ],
    },
    {
        "name": "Games",
        "tags": [
            "Video Games",
            "Board Games",
            "E-Sports",
            "Gaming",
            "Tabletop RPG",
            "Card Games",
            "Arcade",
        ],
    },
    {
        "name": "Career and Business",
        "tags": [
            "Networking",
            "Conferences",
            "Workshops",
            "Professional Development",
            "Entrepreneurship",
            "Leadership",
        ],
    },
    {
        "name": "Science and Education",
        "tags": [
            "Lectures",
            "Workshops",
            "Book Clubs",
            "Learning",
            "Research",
            "STEM",
            "History",
            "Language Exchange",
        ],
    },
]

EVENT_KEYWORDS_BY_CATEGORY: dict[str, list[str]] = {
    "Outdoor": ["outdoor events", "nature activities", "adventure tours"],
    "Social Activities": ["social events", "networking events", "happy hours", "meetups"],
    "Hobbies and Passion": ["hobby workshops", "craft classes", "creative events"],
    "Sports and Fitness": ["fitness classes", "sports events", "workout sessions"],
    "Health and Wellbeing": ["wellness events", "meditation sessions", "health workshops"],
    "Technology": ["tech meetups", "hackathons", "startup events", "tech talks"],
    "Art and Culture": ["art exhibitions", "cultural events", "museum exhibits", "performances"],
    "Games": ["gaming events", "esports", "board game nights", "gaming tournaments"],
    "Career and Business": ["business networking", "professional events", "industry conferences"],
    "Science and Education": ["lectures", "educational workshops", "learning events"],
}


def _tags(category: dict[str, object]) -> list[str]:
    return list(category["tags"])  # type: ignore[arg-type]


def get_all_tags() -> list[str]:
    """All tags across categories, deduplicated and sorted."""
    tags: set[str] = set()
    for category in INTEREST_CATEGORIES:
        tags.update(_tags(category))
    return sorted(tags)


def get_category_names() -> list[str]:
    return [str(category["name"]) for category in INTEREST_CATEGORIES]


def find_categories_for_interests(interests: list[str]) -> list[str]:
    """Names of the categories that contain any of ``interests`` (case-insensitive)."""
    wanted = {i.strip().lower() for i in interests}
    return [
        str(category["name"])
        for category in INTEREST_CATEGORIES
        if any(tag.lower() in wanted for tag in _tags(category))
    ]


def validate_interests(interests: list[str]) -> dict[str, list[str]]:
    """Split ``interests`` into known tags and free-text values."""
    known = {tag.lower() for tag in get_all_tags()}
    result: dict[str, list[str]] = {"valid": [], "invalid": []}
    for interest in interests:
        bucket = "valid" if interest.strip().lower() in known else "invalid"
        result[bucket].append(interest)
    return result


def get_search_terms_for_interests(interests: list[str]) -> list[str]:
    """Interests plus their categories and category-specific event keywords.

    Order is stable: the interests themselves first, then category names,
    then keywords.
    """
    terms: list[str] = []

    def _add(term: str) -> None:
        if term not in terms:
            terms.append(term)

    categories = find_categories_for_interests(interests)
    for interest in interests:
        _add(interest)
    for name in categories:
        _add(name)
    for name in categories:
        for keyword in EVENT_KEYWORDS_BY_CATEGORY.get(name, []):
            _add(keyword)
    return terms
