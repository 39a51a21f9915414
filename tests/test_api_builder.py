"""
API tests for the builder endpoints.

Run with: pytest tests/test_api_builder.py -v
"""

import pytest

import dish_builder.catalog_cache as cache_mod
from dish_builder.catalog_cache import CatalogCache, get_catalog


SCENARIO_SELECTIONS = [
    {"stepId": 2, "items": [{"menuItemId": 20, "quantity": 2}]},
    {"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]},
]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


# =============================================================================
# Catalog Endpoint Tests
# =============================================================================

class TestBuilderCatalog:

    @pytest.mark.parametrize("prefix", ["", "/api/v1"])
    def test_steps_in_order_with_offered_options(self, client, prefix):
        response = client.get(f"{prefix}/builder/catalog")
        assert response.status_code == 200
        data = response.json()
        assert data["currency"] == "VND"
        assert data["basePrice"] == 0
        assert [s["id"] for s in data["steps"]] == [1, 2]
        base = data["steps"][0]
        assert base["name"] == "Base"
        assert [o["id"] for o in base["options"]] == [10, 11]
        assert base["options"][0]["price"] == 20000

    def test_catalog_unavailable(self, client, tmp_path, monkeypatch):
        client.app.dependency_overrides.pop(get_catalog)
        monkeypatch.setattr(cache_mod, "catalog_cache", CatalogCache(path=str(tmp_path / "none.json")))
        response = client.get("/builder/catalog")
        assert response.status_code == 503


# =============================================================================
# Preview Endpoint Tests
# =============================================================================

class TestPreview:

    def test_scenario_totals(self, client):
        response = client.post("/builder/preview", json={"selections": SCENARIO_SELECTIONS})
        assert response.status_code == 200
        data = response.json()
        assert data["totalPrice"] == 30000
        assert data["totalCalories"] == 250
        assert data["itemizedPrice"] == 30000

    def test_step_summaries(self, client):
        data = client.post("/builder/preview", json={"selections": SCENARIO_SELECTIONS}).json()
        assert [s["stepId"] for s in data["steps"]] == [1, 2]
        topping = data["steps"][1]
        assert topping["stepName"] == "Topping"
        assert topping["lines"][0] == {
            "optionId": 20,
            "name": "Egg",
            "quantity": 2,
            "unitPrice": 5000,
            "linePrice": 10000,
            "lineCalories": 100,
            "imageUrl": None,
        }
        assert topping["subtotalPrice"] == 10000

    def test_empty_composition_previews_zero(self, client):
        data = client.post("/builder/preview", json={"selections": []}).json()
        assert data["totalPrice"] == 0
        assert data["steps"] == []

    def test_unknown_options_contribute_zero(self, client):
        selections = [{"stepId": 1, "items": [{"menuItemId": 999, "quantity": 3}]}]
        data = client.post("/builder/preview", json={"selections": selections}).json()
        assert data["totalPrice"] == 0
        assert data["steps"][0]["lines"] == []

    def test_invalid_quantity_rejected(self, client):
        selections = [{"stepId": 1, "items": [{"menuItemId": 10, "quantity": 0}]}]
        response = client.post("/builder/preview", json={"selections": selections})
        assert response.status_code == 422


# =============================================================================
# Submission Endpoint Tests
# =============================================================================

class TestSubmission:

    def test_builds_create_request(self, client):
        response = client.post(
            "/builder/submission",
            json={"storeId": 5, "note": "Less salt", "selections": SCENARIO_SELECTIONS},
        )
        assert response.status_code == 200
        assert response.json() == {
            "storeId": 5,
            "note": "Less salt",
            "isCustom": True,
            "selections": [
                {"stepId": 1, "items": [{"menuItemId": 10, "quantity": 1}]},
                {"stepId": 2, "items": [{"menuItemId": 20, "quantity": 2}]},
            ],
        }

    def test_default_note_and_no_store(self, client):
        response = client.post("/builder/submission", json={"selections": SCENARIO_SELECTIONS})
        data = response.json()
        assert data["note"] == "Custom dish"
        assert "storeId" not in data

    def test_empty_composition_rejected(self, client):
        response = client.post("/builder/submission", json={"note": "x", "selections": []})
        assert response.status_code == 422
        assert response.json()["detail"] == "At least one ingredient is required."

    @pytest.mark.parametrize("selections,expected", [
        # Inactive option of the base category
        ([{"stepId": 1, "items": [{"menuItemId": 12, "quantity": 1}]}], [(1, 12)]),
        # Option from the base category picked under the topping step
        ([{"stepId": 2, "items": [{"menuItemId": 10, "quantity": 1}]}], [(2, 10)]),
        # Step the catalog does not have
        ([{"stepId": 99, "items": [{"menuItemId": 999, "quantity": 1}]}], [(99, 999)]),
    ])
    def test_picks_not_on_offer_rejected(self, client, selections, expected):
        response = client.post("/builder/submission", json={"selections": selections})
        assert response.status_code == 422
        assert response.json()["detail"] == [
            f"Option {option_id} is not offered in step {step_id}" for step_id, option_id in expected
        ]

    def test_one_bad_pick_rejects_whole_submission(self, client):
        selections = SCENARIO_SELECTIONS + [{"stepId": 1, "items": [{"menuItemId": 12, "quantity": 1}]}]
        response = client.post("/builder/submission", json={"selections": selections})
        assert response.status_code == 422
        assert "isCustom" not in response.json()

    def test_preview_still_prices_saved_inactive_option(self, client):
        selections = [{"stepId": 1, "items": [{"menuItemId": 12, "quantity": 1}]}]
        data = client.post("/builder/preview", json={"selections": selections}).json()
        assert data["totalPrice"] == 18000
