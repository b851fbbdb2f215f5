"""Amenity inference rules v1.

Each entry flags one amenity key when its pattern matches normalized text.
`food_in_house` and `food_trucks` feed the categorical food field.
"""

AMENITY_RULES = [
    {"amenity": "offers_tours", "pattern": r"\b(brewery|brew|brewhouse)\s+tours?\b"},
    {"amenity": "offers_tours", "pattern": r"\btour of the brewery\b"},
    {"amenity": "offers_tours", "pattern": r"\btours?\b"},
    {"amenity": "beer_to_go", "pattern": r"\b(growlers?|crowlers?)\b"},
    {"amenity": "beer_to_go", "pattern": r"\bcans?\s+to\s?go\b"},
    {"amenity": "beer_to_go", "pattern": r"\b(beer\s+to\s?go|to\s?go\s+beer)\b"},
    {"amenity": "beer_to_go", "pattern": r"\btake\s+(some\s+)?home\b"},
    {"amenity": "beer_to_go", "pattern": r"\b(4\s?pack|four\s?pack|six\s?pack)s?\b"},
    {"amenity": "beer_to_go", "pattern": r"\bcases?\b"},
    {"amenity": "beer_to_go", "pattern": r"\bto\s?go\b"},
    {"amenity": "has_merch", "pattern": r"\b(merch|merchandise|swag|glassware)\b"},
    {"amenity": "has_merch", "pattern": r"\b(t\s?shirts?|hoodies?|hats?|caps?)\b"},
    {"amenity": "has_merch", "pattern": r"\bpint glass(es)?\b"},
    {"amenity": "dog_friendly", "pattern": r"\b(dog|pet)\s?friendly\b"},
    {"amenity": "dog_friendly", "pattern": r"\bdogs?\s+(allowed|on leash)\b"},
    {"amenity": "dog_friendly", "pattern": r"\b(bring|brought)\s+(your\s+|my\s+|our\s+)?dogs?\b"},
    {"amenity": "dog_friendly", "pattern": r"\bpups?\b"},
    {"amenity": "outdoor_seating", "pattern": r"\b(outdoor|outside)\s+seating\b"},
    {"amenity": "outdoor_seating", "pattern": r"\b(patio|beer\s?garden|rooftop|deck)\b"},
    {"amenity": "outdoor_seating", "pattern": r"\bpicnic tables?\b"},
    {"amenity": "other_drinks", "pattern": r"\b(wines?|cocktails?|mixed drinks?|full bar|spirits|liquor)\b"},
    {"amenity": "other_drinks", "pattern": r"\b(whiskey|vodka|gin|ciders?|mead)\b"},
    {"amenity": "other_drinks", "pattern": r"\b(hard\s+)?seltzers?\b"},
    {"amenity": "parking", "pattern": r"\b(street|garage|easy|plenty of)?\s?parking( lot)?\b"},
    {"amenity": "food_trucks", "pattern": r"\bfood\s?trucks?\b"},
    {"amenity": "food_in_house", "pattern": r"\b(full kitchen|kitchen|menu|dinner|lunch)\b"},
    {"amenity": "food_in_house", "pattern": r"\bfood\b(?!\s?trucks?)"},
    {"amenity": "food_in_house", "pattern": r"\b(appetizers?|apps|entrees?)\b"},
    {"amenity": "food_in_house", "pattern": r"\b(pizza|burgers?|wings|tacos|nachos|pretzels?)\b"},
]
