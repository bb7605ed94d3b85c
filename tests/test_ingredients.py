import pytest

from grocerylist.ingredients import (
    CATEGORIES, CATEGORY_ORDER, OTHER, IngredientClassifier,
    categorize_ingredient, clean_ingredient, load_keyword_file,
)


@pytest.mark.parametrize("text, category", [
    ("2 cups rolled oats", "Grains & Carbs"),
    ("1 banana, sliced", "Fruits"),
    ("1 lb chicken breast", "Proteins"),
    ("2 cups spinach", "Vegetables"),
    ("1 cup milk", "Dairy"),
    ("2 tbsp olive oil", "Pantry Staples"),
    ("2 tsp ground cumin", "Herbs & Spices"),
    ("1/4 cup almonds", "Nuts & Seeds"),
    ("2 sheets nori", OTHER),
])
def test_categorize(text, category):
    assert categorize_ingredient(text) == category


def test_categorize_is_case_insensitive():
    assert categorize_ingredient("CHICKEN Thighs") == "Proteins"


def test_salt_and_pepper_is_a_pantry_staple():
    # "pepper" also reads as a spice, but Pantry Staples is declared first
    assert categorize_ingredient("salt and pepper to taste") == "Pantry Staples"


def test_earlier_category_wins_tie():
    # quinoa is listed under both Proteins and Grains & Carbs
    assert categorize_ingredient("1 cup quinoa") == "Proteins"


def test_categories_closed_set():
    assert CATEGORIES == CATEGORY_ORDER + ("Other",)
    assert len(CATEGORIES) == 9


@pytest.mark.parametrize("text, name", [
    ("2 cups rolled oats", "rolled oats"),
    ("1 banana, sliced", "banana"),
    ("1 1/2 cups all-purpose flour", "all-purpose flour"),
    ("½ cup diced onion", "onion"),
    ("3 cloves garlic, minced", "garlic"),
    ("1 can (15 oz) black beans, drained", "black beans"),
    ("2 large eggs", "eggs"),
    ("1 lb ground beef", "beef"),
    ("Fresh basil leaves", "basil leaves"),
    ("2 tbsp chopped fresh parsley", "parsley"),
    ("salt and pepper to taste", "salt and pepper to taste"),
    ("  red   onion  ", "red onion"),
    ("8 oz. cream cheese", "cream cheese"),
    ("2 Tbsp. sugar", "sugar"),
])
def test_clean(text, name):
    assert clean_ingredient(text) == name


def test_clean_does_not_split_words_on_unit_prefix():
    assert clean_ingredient("2 canned tomatoes") == "canned tomatoes"


def test_clean_strips_only_one_quantity():
    assert clean_ingredient("2 cups 3 cheese blend") == "3 cheese blend"


def test_clean_can_leave_noise():
    assert clean_ingredient("1 tbsp") == ""
    assert clean_ingredient("2 oz, chopped") == ""


def test_custom_keywords_replace_only_given_categories():
    classifier = IngredientClassifier(keywords={"Fruits": ["durian"]})

    assert classifier.categorize("1 durian") == "Fruits"
    assert classifier.categorize("1 banana") == OTHER
    assert classifier.categorize("1 lb beef") == "Proteins"


def test_unknown_category_rejected():
    with pytest.raises(ValueError):
        IngredientClassifier(keywords={"Snacks": ["chips"]})


def test_custom_descriptors():
    classifier = IngredientClassifier(descriptors=["smoked"])
    assert classifier.clean("4 oz smoked salmon") == "salmon"
    assert classifier.clean("1 cup chopped kale") == "chopped kale"


def test_load_keyword_file(tmp_path):
    path = tmp_path / "vocabulary.md"
    path.write_text(
        "---\n"
        "tags: [groceries]\n"
        "---\n"
        "\n"
        "# Keywords\n"
        "\n"
        "## Fruits\n"
        "- Durian\n"
        "- jackfruit\n"
        "\n"
        "## nuts & seeds\n"
        "- macadamia\n",
        encoding="utf-8",
    )

    keywords = load_keyword_file(path)

    assert keywords == {
        "Fruits": ["durian", "jackfruit"],
        "Nuts & Seeds": ["macadamia"],
    }

    classifier = IngredientClassifier.from_file(path)
    assert classifier.categorize("1 cup macadamia") == "Nuts & Seeds"
    assert classifier.categorize("2 cups chicken stock") == "Proteins"


def test_load_keyword_file_unknown_heading(tmp_path):
    path = tmp_path / "vocabulary.md"
    path.write_text("## Snacks\n- chips\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Snacks"):
        load_keyword_file(path)


def test_load_keyword_file_keyword_before_heading(tmp_path):
    path = tmp_path / "vocabulary.md"
    path.write_text("- chips\n## Fruits\n- durian\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_keyword_file(path)
