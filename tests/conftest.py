import pytest
from fastapi.testclient import TestClient

from dish_builder.app_factory import create_app
from dish_builder.builder.catalog_index import CatalogIndex
from dish_builder.catalog_cache import get_catalog


# Step A (id=1) offers option 10; Step B (id=2) offers option 20.
SCENARIO_CATALOG = {
    "currency": "VND",
    "basePrice": 0,
    "steps": [
        {"id": 2, "name": "Topping", "stepNumber": 2, "categoryId": 200},
        {"id": 1, "name": "Base", "stepNumber": 1, "categoryId": 100},
    ],
    "optionsByCategory": {
        "100": [
            {"id": 10, "name": "Rice", "price": 20000, "cal": 150, "isActive": True},
            {"id": 11, "name": "Noodles", "price": 25000, "cal": 210, "isActive": True},
            {"id": 12, "name": "Old Grain", "price": 18000, "cal": 170, "isActive": False},
        ],
        "200": [
            {"id": 20, "name": "Egg", "price": 5000, "cal": 50, "isActive": True},
            {"id": 21, "name": "Corn", "price": 3000, "cal": None, "isActive": True},
        ],
    },
}


@pytest.fixture
def catalog_payload():
    return SCENARIO_CATALOG


@pytest.fixture
def catalog():
    """Catalog from the two-step scenario, indexed as-is (no step bounds)."""
    return CatalogIndex(
        SCENARIO_CATALOG["steps"],
        {int(k): v for k, v in SCENARIO_CATALOG["optionsByCategory"].items()},
        base_price=SCENARIO_CATALOG["basePrice"],
        currency=SCENARIO_CATALOG["currency"],
    )


@pytest.fixture
def bounded_catalog():
    """Catalog with explicit step bounds: a single-select base, up to two toppings."""
    return CatalogIndex(
        [
            {"id": 1, "name": "Base", "stepNumber": 1, "categoryId": 100, "min": 1, "max": 1},
            {"id": 2, "name": "Topping", "stepNumber": 2, "categoryId": 200, "min": 0, "max": 2},
            {"id": 3, "name": "Sauce", "stepNumber": 3, "categoryId": 300},
        ],
        {
            100: [
                {"id": 10, "name": "Rice", "price": 20000, "cal": 150},
                {"id": 11, "name": "Noodles", "price": 25000, "cal": 210},
            ],
            200: [
                {"id": 20, "name": "Egg", "price": 5000, "cal": 50},
                {"id": 21, "name": "Corn", "price": 3000, "cal": 40},
                {"id": 22, "name": "Tofu", "price": 7000, "cal": 90},
            ],
            300: [
                {"id": 30, "name": "Teriyaki", "price": 0, "cal": 35},
            ],
        },
    )


@pytest.fixture
def nested_dish():
    """A placed dish read back in the nested shape."""
    return {
        "dishId": 7,
        "name": "Custom Bowl",
        "price": 33000,
        "isCustom": True,
        "steps": [
            {
                "stepId": 1,
                "stepName": "Base",
                "items": [
                    {"menuItemId": 10, "menuItemName": "Rice", "quantity": 1, "extraPrice": 20000, "cal": 150},
                ],
            },
            {
                "stepId": 2,
                "stepName": "Topping",
                "items": [
                    {"menuItemId": 20, "menuItemName": "Egg", "quantity": 2, "extraPrice": 5000, "cal": 50},
                    {"menuItemId": 21, "menuItemName": "Corn", "quantity": 1, "extraPrice": 3000},
                ],
            },
        ],
    }


@pytest.fixture
def client(catalog):
    """FastAPI TestClient with the catalog dependency pointed at the scenario catalog."""
    app = create_app()
    app.dependency_overrides[get_catalog] = lambda: catalog

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
