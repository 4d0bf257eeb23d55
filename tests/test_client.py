"""Tests for the client view-model, HTTP client and exports."""

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import RECIPE_URL, html_transport, pie_response
from recipe_clipper.client.export import (
    export_grocery_list_html,
    export_grocery_list_markdown,
    export_recipe_markdown,
)
from recipe_clipper.client.scrape_client import ScrapeClient, ScrapeClientError
from recipe_clipper.client.view_model import GENERIC_ERROR_MESSAGE, RecipeViewModel
from recipe_clipper.models.recipe import Recipe


def make_recipe(**overrides) -> Recipe:
    data = {
        "title": "Apple Pie",
        "ingredients": [],
        "components": [
            {"name": "Crust", "ingredients": ["flour", "butter"], "steps": ["Mix", "Chill"]},
            {"name": "Filling", "ingredients": ["apples"], "steps": ["Slice <b>thin</b>"]},
            {"name": "Assembly", "steps": ["Bake"]},
        ],
        "url": RECIPE_URL,
    }
    data.update(overrides)
    return Recipe.model_validate(data)


SIMPLE_RECIPE = dict(
    ingredients=["flour", "apples"],
    components=[
        {"name": "Crust", "steps": ["Mix"]},
        {"name": "Filling", "steps": ["Slice"]},
    ],
)


class StubClient:
    """ScrapeClient stand-in returning a fixed recipe or raising."""

    def __init__(self, result):
        self.result = result
        self.urls = []

    def scrape(self, url):
        self.urls.append(url)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def loaded_view_model(recipe=None) -> RecipeViewModel:
    vm = RecipeViewModel(StubClient(recipe or make_recipe()), url=RECIPE_URL)
    vm.submit()
    return vm


# ---------------------------------------------------------------------------
# View-model
# ---------------------------------------------------------------------------

def test_submit_success_marks_all_components_visible():
    """Test a successful submit loads the recipe with every component visible."""
    vm = loaded_view_model()

    assert vm.loading is False
    assert vm.error is None
    assert vm.recipe.title == "Apple Pie"
    assert vm.visibility == {0: True, 1: True, 2: True}
    assert vm.client.urls == [RECIPE_URL]


def test_submit_failure_uses_status_message():
    """Test a failed submit surfaces the server's status message."""
    vm = RecipeViewModel(StubClient(ScrapeClientError("Access denied by recipe site (403)", 403)))
    vm.submit()

    assert vm.loading is False
    assert vm.recipe is None
    assert vm.error == "Access denied by recipe site (403)"


def test_submit_failure_without_message_uses_fallback():
    """Test a failed submit without a message uses the generic error."""
    vm = RecipeViewModel(StubClient(ScrapeClientError()))
    vm.submit()

    assert vm.error == GENERIC_ERROR_MESSAGE


def test_submit_resets_previous_state():
    """Test submit clears the previous recipe and visibility."""
    vm = loaded_view_model()
    vm.toggle_component(0)
    vm.client.result = ScrapeClientError("boom")

    vm.submit()

    assert vm.recipe is None
    assert vm.visibility == {}
    assert vm.error == "boom"


def test_active_ingredients_follow_visible_components():
    """Test active ingredients come from visible components only."""
    vm = loaded_view_model()
    assert vm.has_component_ingredients is True
    assert vm.active_ingredients == ["flour", "butter", "apples"]

    vm.toggle_component(0)

    assert vm.active_ingredients == ["apples"]
    assert [c.name for c in vm.active_components] == ["Filling", "Assembly"]


def test_hiding_only_ingredient_component_leaves_no_ingredients():
    """Test hiding the only component with ingredients empties the list."""
    recipe = make_recipe(
        components=[
            {"name": "Sauce", "ingredients": ["tomato"], "steps": ["Simmer"]},
            {"name": "Serve", "steps": ["Plate"]},
        ]
    )
    vm = loaded_view_model(recipe)

    vm.toggle_component(0)

    assert vm.active_ingredients == []


def test_active_ingredients_use_top_level_without_component_ingredients():
    """Test top-level ingredients are used when no component has any."""
    vm = loaded_view_model(make_recipe(**SIMPLE_RECIPE))
    assert vm.has_component_ingredients is False

    for toggles in ([], [0], [0, 1]):
        vm.select_all()
        for index in toggles:
            vm.toggle_component(index)
        assert vm.active_ingredients == ["flour", "apples"]


def test_toggle_twice_restores_and_ignores_unknown_index():
    """Test toggling twice restores visibility and bad indices are ignored."""
    vm = loaded_view_model()
    vm.toggle_component(1)
    vm.toggle_component(1)
    vm.toggle_component(7)
    vm.toggle_component(-1)

    assert vm.visibility == {0: True, 1: True, 2: True}


def test_missing_visibility_entries_count_as_visible():
    """Test components missing from the visibility map count as visible."""
    vm = loaded_view_model()
    vm.visibility = {}
    assert len(vm.active_components) == 3

    vm.toggle_component(2)
    assert vm.visibility == {2: False}


def test_select_and_deselect_all():
    """Test select all and deselect all."""
    vm = loaded_view_model()
    vm.deselect_all()
    assert vm.active_components == []
    assert vm.active_ingredients == []

    vm.select_all()
    assert len(vm.active_components) == 3


def test_views_without_recipe():
    """Test derived views are empty before a recipe loads."""
    vm = RecipeViewModel(StubClient(None))
    vm.toggle_component(0)
    vm.select_all()

    assert vm.has_component_ingredients is False
    assert vm.active_ingredients == []
    assert vm.active_components == []
    assert vm.visibility == {}


# ---------------------------------------------------------------------------
# ScrapeClient against the API
# ---------------------------------------------------------------------------

def test_view_model_against_api(client: TestClient, use_service, make_service):
    """Test the view-model end to end against the API."""
    use_service(make_service(pie_response()))
    vm = RecipeViewModel(ScrapeClient(http_client=client), url=RECIPE_URL)

    vm.submit()

    assert vm.error is None
    assert vm.recipe.title == "Pie"
    assert vm.visibility == {0: True}


def test_view_model_against_api_error(client: TestClient, use_service, make_service):
    """Test the view-model shows API error messages."""
    use_service(make_service(transport=html_transport("nope", 403)))
    vm = RecipeViewModel(ScrapeClient(http_client=client), url=RECIPE_URL)

    vm.submit()

    assert vm.recipe is None
    assert vm.error == "Access denied by recipe site (403)"


def test_scrape_client_transport_failure():
    """Test transport failures become ScrapeClientError."""
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    http = httpx.Client(base_url="http://api.test", transport=httpx.MockTransport(handler))
    with ScrapeClient(http_client=http) as scrape_client:
        with pytest.raises(ScrapeClientError) as exc_info:
            scrape_client.scrape(RECIPE_URL)

    assert exc_info.value.status_message is None


def test_scrape_client_error_without_json_body():
    """Test error responses without a JSON body keep the status code."""
    http = httpx.Client(
        base_url="http://api.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway")),
    )

    with pytest.raises(ScrapeClientError) as exc_info:
        ScrapeClient(http_client=http).scrape(RECIPE_URL)

    assert exc_info.value.status_code == 502
    assert exc_info.value.status_message is None


def test_scrape_client_rejects_non_recipe_payload():
    """Test a 200 payload that is not a recipe is an error."""
    http = httpx.Client(
        base_url="http://api.test",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"hello": "world"})),
    )

    with pytest.raises(ScrapeClientError):
        ScrapeClient(http_client=http).scrape(RECIPE_URL)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

def test_export_recipe_markdown_per_component():
    """Test Markdown export with per-component ingredients."""
    recipe = make_recipe()
    md = export_recipe_markdown(recipe, {1: False})

    assert md.startswith("# Apple Pie\n\n### Crust\n\n#### Ingredients\n- flour\n- butter\n\n")
    assert "#### Instructions\n1. Mix\n2. Chill" in md
    assert "Filling" not in md
    assert "### Assembly\n\n#### Instructions\n1. Bake" in md
    assert md.endswith(f"\n[Source]({RECIPE_URL})")


def test_export_recipe_markdown_top_level_ingredients():
    """Test Markdown export with top-level ingredients."""
    recipe = make_recipe(**SIMPLE_RECIPE)
    md = export_recipe_markdown(recipe, {0: True, 1: True})

    assert "## Ingredients\n- flour\n- apples\n\n## Instructions\n" in md
    assert "### Crust\n\n1. Mix\n\n### Filling\n\n1. Slice\n\n" in md


def test_export_recipe_markdown_cleans_step_markup():
    """Test Markdown export strips markup from steps."""
    md = export_recipe_markdown(make_recipe(), {})
    assert "1. Slice thin" in md


def test_export_grocery_list_markdown_grouped():
    """Test grocery list Markdown grouped by component."""
    md = export_grocery_list_markdown(make_recipe(), {})

    assert md.startswith("# Grocery List: Apple Pie\n\n## Crust\n\n- [ ] flour\n- [ ] butter\n\n## Filling\n\n- [ ] apples\n\n")
    assert "Assembly" not in md
    assert md.endswith(f"[Source]({RECIPE_URL})")


def test_export_grocery_list_markdown_flat():
    """Test grocery list Markdown from top-level ingredients."""
    md = export_grocery_list_markdown(make_recipe(**SIMPLE_RECIPE), {})
    assert "- [ ] flour\n- [ ] apples\n" in md
    assert "##" not in md


def test_export_grocery_list_html():
    """Test printable grocery list HTML."""
    recipe = make_recipe(title="Mac & Cheese")
    html = export_grocery_list_html(recipe, {})

    assert html.startswith("<!DOCTYPE html>")
    assert "<title>Grocery List: Mac &amp; Cheese</title>" in html
    assert "<h2>Crust</h2>" in html
    assert html.count('<input type="checkbox">') == 3
    assert f"Source: {RECIPE_URL}" in html


def test_export_grocery_list_html_single_section_has_no_heading():
    """Test a single grocery section has no heading."""
    html = export_grocery_list_html(make_recipe(**SIMPLE_RECIPE), {})
    assert "<h2>" not in html
    assert "<span>apples</span>" in html
