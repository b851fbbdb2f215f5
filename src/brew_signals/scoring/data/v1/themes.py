"""Theme scoring rules v1.

Patterns run against normalized review text: lowercase, no punctuation,
hyphens already turned into spaces.
"""

THEME_RULES = [
    {
        "category": "beer_quality",
        "pattern": r"\b(great|excellent|amazing|fantastic|awesome|best|quality|fresh|delicious|tasty|good)\s+(beers?|brews?|ipas?|lagers?|stouts?|ales?|pilsners?|porters?|selection)\b",
        "weight": 1.0,
    },
    {
        "category": "beer_quality",
        "pattern": r"\b(beer|brew)s?\s+(is|are|was|were)\s+(great|excellent|amazing|fantastic|awesome|fresh|delicious|tasty|good)\b",
        "weight": 1.0,
    },
    {
        "category": "beer_quality",
        "pattern": r"\b(wide|huge|great|excellent|good|nice|solid)\s+(selection|variety|choice|range)\b",
        "weight": 0.8,
    },
    {
        "category": "beer_quality",
        "pattern": r"\b(rotating|seasonal|special|limited)\s+(taps?|releases?|beers?|brews?)\b",
        "weight": 0.7,
    },
    {
        "category": "beer_quality",
        "pattern": r"\b(ipas?|lagers?|stouts?|porters?|pilsners?|sours?|hazy|pale ales?|wheat|amber|hefeweizen)\b",
        "weight": 0.5,
    },
    {"category": "beer_quality", "pattern": r"\b(flights?|sampler|tasting)\b", "weight": 0.6},
    {"category": "beer_quality", "pattern": r"\b(craft|micro|local)\s?brew", "weight": 0.5},
    {
        "category": "beer_quality",
        "pattern": r"\b(well\s?crafted|perfectly\s+balanced|smooth|crisp|hoppy|malty)\b",
        "weight": 0.8,
    },
    {
        "category": "food_menu",
        "pattern": r"\b(great|excellent|amazing|delicious|tasty|good|best)\s+(food|menu|kitchen|pizza|burgers?|wings|appetizers?|entrees?|meals?)\b",
        "weight": 1.0,
    },
    {
        "category": "food_menu",
        "pattern": r"\b(food|menu)\s+(is|are|was|were)\s+(great|excellent|amazing|delicious|tasty|good)\b",
        "weight": 1.0,
    },
    {"category": "food_menu", "pattern": r"\bfood\s?trucks?\b", "weight": 0.8},
    {"category": "food_menu", "pattern": r"\b(full kitchen|full menu|in house kitchen)\b", "weight": 0.9},
    {
        "category": "food_menu",
        "pattern": r"\b(pizza|burgers?|wings|nachos|pretzels?|tacos|sandwich(es)?|salads?|fries)\b",
        "weight": 0.6,
    },
    {"category": "food_menu", "pattern": r"\b(appetizers?|entrees?|dinner|lunch|brunch)\b", "weight": 0.6},
    {"category": "food_menu", "pattern": r"\bpair(s|ing|ed)?\s+(well|perfectly|great)\s+with\b", "weight": 0.7},
    {
        "category": "service_staff",
        "pattern": r"\b(friendly|helpful|knowledgeable|attentive|great|excellent|amazing|awesome|nice|welcoming)\s+(staff|servers?|bartenders?|employees?|team|service)\b",
        "weight": 1.0,
    },
    {
        "category": "service_staff",
        "pattern": r"\b(staff|servers?|bartenders?|employees?|service)\s+(is|are|was|were)\s+(so\s+|very\s+)?(friendly|helpful|knowledgeable|attentive|great|excellent|amazing|awesome|nice|welcoming)\b",
        "weight": 1.0,
    },
    {"category": "service_staff", "pattern": r"\b(quick|fast|prompt)\s+service\b", "weight": 0.7},
    {
        "category": "service_staff",
        "pattern": r"\b(owners?|managers?)\s+((is|was|were|are)\s+)?(friendly|helpful|nice|great)\b",
        "weight": 0.8,
    },
    {"category": "service_staff", "pattern": r"\b(welcoming|hospitality|customer service)\b", "weight": 0.7},
    {
        "category": "atmosphere",
        "pattern": r"\b(great|excellent|amazing|awesome|cool|nice|relaxed|chill|cozy|fun|lively|vibrant)\s+(atmosphere|vibe|ambiance|environment|setting|space|place)\b",
        "weight": 1.0,
    },
    {
        "category": "atmosphere",
        "pattern": r"\b(atmosphere|vibe|ambiance)\s+(is|are|was|were)\s+(great|excellent|amazing|awesome|cool|nice|relaxed|chill|cozy|fun|lively)\b",
        "weight": 1.0,
    },
    {
        "category": "atmosphere",
        "pattern": r"\b(cozy|comfortable|relaxing|laid\s?back|casual|upscale|trendy|rustic|industrial)\b",
        "weight": 0.7,
    },
    {
        "category": "atmosphere",
        "pattern": r"\b(live music|bands?|musicians?|concerts?|entertainment|trivia|games?|cornhole)\b",
        "weight": 0.8,
    },
    {
        "category": "atmosphere",
        "pattern": r"\b(outdoor patio|patio|beer garden|rooftop|outdoor space|fire pits?)\b",
        "weight": 0.6,
    },
    {
        "category": "atmosphere",
        "pattern": r"\b(decor|decoration|design|interior)\s+((is|was)\s+)?(great|nice|cool|unique)\b",
        "weight": 0.6,
    },
    {"category": "atmosphere", "pattern": r"\b(views?|scenic|beautiful)\b", "weight": 0.6},
    {"category": "atmosphere", "pattern": r"\b(clean|well\s?maintained|spotless)\b", "weight": 0.5},
]
