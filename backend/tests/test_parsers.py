from kitchen_ingest.models.enums import Domain, RecordSource
from kitchen_ingest.models.schemas import GroceryItem, PantryItem, Recipe
from kitchen_ingest.services.parsers import (
    DEFAULT_RECIPE_TITLE,
    GroceryParser,
    PantryParser,
    RecipeParser,
    get_parser,
    parse,
)
from kitchen_ingest.services.text_processing import normalize, tokenize

PASTA_CARD = (
    "Pasta Bake\n\nA quick family favorite\n\nIngredients\nPasta\nSauce\nCheese\n\n"
    "Instructions\nBoil pasta\nMix sauce\nBake 20 min"
)


def _pipeline(domain, text, context_id=None):
    return parse(domain, tokenize(domain, normalize(text)), context_id)


def test_grocery_lines_become_items_in_order():
    records = _pipeline(Domain.GROCERY, "Milk\nEggs x2\nBread 16oz\n")
    assert [r.name for r in records] == ["Milk", "Eggs", "Bread"]
    assert all(isinstance(r, GroceryItem) for r in records)
    first = records[0]
    assert first.quantity is None and first.unit is None
    assert first.is_done is False and first.is_favorite is False
    assert first.source is RecordSource.CAMERA


def test_pantry_lines_become_items_for_household():
    records = _pipeline(Domain.PANTRY, "Milk\nEggs x2\nBread 16oz\n", context_id="hh-1")
    assert [r.name for r in records] == ["Milk", "Eggs", "Bread"]
    assert all(isinstance(r, PantryItem) and r.household_id == "hh-1" for r in records)
    assert all(r.quantity is None and r.unit is None for r in records)


def test_recipe_card_with_all_sections():
    [recipe] = _pipeline(Domain.RECIPE, PASTA_CARD, context_id="hh-1")
    assert isinstance(recipe, Recipe)
    assert recipe.title == "Pasta Bake"
    assert recipe.summary == "A quick family favorite"
    assert recipe.ingredients == ["Pasta", "Sauce", "Cheese"]
    assert recipe.instructions == "Boil pasta\nMix sauce\nBake 20 min"
    assert recipe.source is RecordSource.OCR
    assert recipe.household_id == "hh-1"


def test_recipe_without_headings_is_partial_record():
    [recipe] = _pipeline(Domain.RECIPE, "Grandma's Soup\n\nSimmer everything together.")
    assert recipe.title == "Grandma's Soup"
    assert recipe.summary == "Simmer everything together."
    assert recipe.ingredients == []
    assert recipe.instructions == ""


def test_recipe_without_chunks_uses_placeholder_title():
    [recipe] = RecipeParser().parse([])
    assert recipe.title == DEFAULT_RECIPE_TITLE
    assert recipe.summary == ""
    assert recipe.ingredients == []


def test_recipe_sections_split_on_newlines_only():
    [recipe] = RecipeParser().parse(["Soup", "Ingredients\nWater\x0cSalt\nPepper"])
    assert recipe.ingredients == ["Water\x0cSalt", "Pepper"]


def test_recipe_title_and_summary_are_truncated():
    chunks = ["T" * 200 + "\nsecond line", "S" * 500]
    [recipe] = RecipeParser().parse(chunks)
    assert recipe.title == "T" * 120
    assert recipe.summary == "S" * 240


def test_recipe_section_chunk_is_not_a_summary():
    [recipe] = RecipeParser().parse(["Stew", "Method\nBrown the meat\nAdd stock"])
    assert recipe.summary == ""
    assert recipe.instructions == "Brown the meat\nAdd stock"


def test_recipe_directions_heading_is_recognised():
    [recipe] = RecipeParser().parse(["Cake", "Directions\nMix\nBake"])
    assert recipe.instructions == "Mix\nBake"


def test_recipe_first_matching_heading_wins():
    chunks = [
        "Salad",
        "INGREDIENTS\nLettuce\n  \nTomato ",
        "More ingredients\nCroutons",
        "Method\nToss",
        "Instructions\nServe",
    ]
    [recipe] = RecipeParser().parse(chunks)
    assert recipe.ingredients == ["Lettuce", "Tomato"]
    assert recipe.instructions == "Toss"


def test_recipe_row_stores_missing_sections_as_null():
    row = Recipe(title="Toast", summary="", household_id="hh").to_row()
    assert row["summary"] is None
    assert row["ingredients"] is None
    assert row["instructions"] is None
    assert row["source"] == "ocr"
    assert row["cover_url"] is None


def test_registry_has_parser_per_domain():
    assert isinstance(get_parser(Domain.GROCERY), GroceryParser)
    assert isinstance(get_parser(Domain.PANTRY), PantryParser)
    assert isinstance(get_parser("recipe"), RecipeParser)


def test_parsers_return_nothing_for_no_lines():
    assert parse(Domain.GROCERY, []) == []
    assert parse(Domain.PANTRY, [], "hh") == []
