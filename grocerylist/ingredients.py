"""Ingredient categorization and name cleanup."""

import re
from pathlib import Path
from typing import Iterable, Optional

import frontmatter


OTHER = "Other"

# Match order is the tie-break: the first category with a matching keyword wins.
CATEGORY_ORDER = (
    "Proteins",
    "Vegetables",
    "Fruits",
    "Grains & Carbs",
    "Dairy",
    "Pantry Staples",
    "Herbs & Spices",
    "Nuts & Seeds",
)

CATEGORIES = CATEGORY_ORDER + (OTHER,)


CATEGORY_KEYWORDS = {
    "Proteins": [
        "chicken", "beef", "pork", "fish", "salmon", "tuna", "turkey", "eggs",
        "tofu", "tempeh", "beans", "lentils", "chickpeas", "quinoa", "shrimp",
        "cod", "lamb", "bacon", "ham", "sausage",
    ],
    "Vegetables": [
        "tomato", "onion", "carrot", "broccoli", "spinach", "lettuce", "cucumber",
        "bell pepper", "jalapeno", "garlic", "celery", "mushroom", "zucchini",
        "cauliflower", "kale", "cabbage", "potato", "sweet potato", "asparagus",
        "green beans", "corn", "peas", "eggplant", "radish", "beets",
    ],
    "Fruits": [
        "apple", "banana", "orange", "berries", "strawberry", "blueberry",
        "lemon", "lime", "grapes", "mango", "pineapple", "avocado", "peach",
        "pear", "kiwi", "watermelon", "cantaloupe", "cherries", "plums",
    ],
    "Grains & Carbs": [
        "rice", "pasta", "bread", "oats", "flour", "cereal", "quinoa",
        "barley", "bulgur", "couscous", "noodles", "crackers", "tortilla",
        "bagel", "muffin", "granola",
    ],
    "Dairy": [
        "milk", "cheese", "yogurt", "butter", "cream", "feta", "mozzarella",
        "parmesan", "cottage cheese", "sour cream", "greek yogurt", "cheddar",
    ],
    "Pantry Staples": [
        "oil", "olive oil", "vinegar", "salt", "pepper", "honey", "sugar",
        "maple syrup", "vanilla", "baking powder", "flour", "soy sauce",
        "hot sauce", "ketchup", "mustard", "mayo", "coconut oil",
    ],
    "Herbs & Spices": [
        "basil", "oregano", "thyme", "rosemary", "parsley", "cilantro",
        "cinnamon", "paprika", "cumin", "turmeric", "ginger", "bay leaves",
        "chili powder", "garlic powder", "onion powder", "black pepper",
    ],
    "Nuts & Seeds": [
        "almonds", "walnuts", "pecans", "cashews", "peanuts", "seeds",
        "chia seeds", "flax seeds", "sunflower seeds", "pumpkin seeds",
        "pine nuts", "pistachios", "hazelnuts",
    ],
}

UNIT_WORDS = [
    "cup", "cups", "tablespoon", "tablespoons", "tbsp", "teaspoon", "teaspoons",
    "tsp", "oz", "ounce", "ounces", "pound", "pounds", "lb", "lbs",
    "clove", "cloves", "slice", "slices", "piece", "pieces",
    "large", "medium", "small", "whole",
    "can", "jar", "package", "bunch", "head", "stalk", "sprig", "pinch", "dash",
]

DESCRIPTOR_WORDS = [
    "fresh", "dried", "chopped", "diced", "sliced", "minced", "crushed",
    "ground", "whole", "organic", "raw", "cooked",
]

_FRACTION = r"(?:\d+/\d+|[½¼¾⅓⅔⅛])"


def _quantity_pattern(units: Iterable[str]) -> re.Pattern:
    # Longest unit first so "cups" is not consumed as "cup" + "s".
    alternation = "|".join(
        re.escape(u) for u in sorted(set(units), key=len, reverse=True)
    )
    return re.compile(
        rf"^\s*(?:{_FRACTION}|\d+(?:\.\d+)?(?:\s*{_FRACTION})?)\s*"
        rf"(?:(?:{alternation})\b\.?)?\s*",
        re.IGNORECASE,
    )


def _descriptor_pattern(words: Iterable[str]) -> re.Pattern:
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


class IngredientClassifier:
    """Keyword categorizer and name cleaner for raw ingredient lines."""

    def __init__(
        self,
        keywords: Optional[dict[str, list[str]]] = None,
        units: Optional[list[str]] = None,
        descriptors: Optional[list[str]] = None,
    ):
        keywords = keywords or {}
        unknown = set(keywords) - set(CATEGORY_ORDER)
        if unknown:
            raise ValueError(f"Unknown categories: {', '.join(sorted(unknown))}")

        self.keywords: dict[str, list[str]] = {
            category: [kw.lower() for kw in keywords.get(category, CATEGORY_KEYWORDS[category])]
            for category in CATEGORY_ORDER
        }
        self.units = list(units if units is not None else UNIT_WORDS)
        self.descriptors = list(descriptors if descriptors is not None else DESCRIPTOR_WORDS)

        self._quantity_re = _quantity_pattern(self.units)
        self._descriptor_re = _descriptor_pattern(self.descriptors) if self.descriptors else None

    @classmethod
    def from_file(cls, path: Path) -> "IngredientClassifier":
        """Build a classifier whose category keywords come from a vocabulary file."""
        return cls(keywords=load_keyword_file(path))

    def categorize(self, text: str) -> str:
        """Return the first category with a keyword contained in ``text``."""
        text_lower = text.lower()

        for category in CATEGORY_ORDER:
            if any(kw in text_lower for kw in self.keywords[category]):
                return category

        return OTHER

    def clean(self, text: str) -> str:
        """Reduce a recipe line like "2 cups chopped onion, divided" to "onion"."""
        name = self._quantity_re.sub("", text, count=1)

        # Parentheticals go first so "(15 oz, drained)" is not cut at its comma
        name = re.sub(r"\([^)]*\)", "", name)
        name = re.sub(r"\([^)]*$", "", name)
        name = name.split(",", 1)[0]
        name = re.sub(r"\s+", " ", name)

        if self._descriptor_re is not None:
            name = self._descriptor_re.sub("", name)
            name = re.sub(r"\s+", " ", name)

        return name.strip()


def load_keyword_file(path: Path) -> dict[str, list[str]]:
    """Parse a vocabulary file of ``## Category`` headings and ``- keyword`` lines.

    The file may carry YAML front matter, which is ignored. Categories that do
    not appear keep their built-in keywords.
    """
    with open(path, "r", encoding="utf-8") as f:
        post = frontmatter.load(f)

    keywords: dict[str, list[str]] = {}
    current: Optional[str] = None

    for line in post.content.split("\n"):
        line = line.strip()

        if line.startswith("## "):
            heading = line[3:].strip()
            match = next((c for c in CATEGORY_ORDER if c.lower() == heading.lower()), None)
            if match is None:
                raise ValueError(f"{path}: unknown category heading {heading!r}")
            current = match
            keywords.setdefault(current, [])
            continue

        if line.startswith("- "):
            if current is None:
                raise ValueError(f"{path}: keyword {line[2:]!r} appears before any category")
            keyword = line[2:].strip().lower()
            if keyword:
                keywords[current].append(keyword)

    return keywords


_default_classifier = IngredientClassifier()


def categorize_ingredient(text: str) -> str:
    """Categorize with the built-in keyword tables."""
    return _default_classifier.categorize(text)


def clean_ingredient(text: str) -> str:
    """Clean with the built-in unit and descriptor vocabularies."""
    return _default_classifier.clean(text)
