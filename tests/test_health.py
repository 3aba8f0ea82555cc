"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from decksmith.main import app

    assert app.title == "Decksmith"


def test_routes_registered() -> None:
    from decksmith.main import app

    paths = {route.path for route in app.routes}
    assert {"/health", "/formats", "/analysis/validate", "/analysis/deck"} <= paths
    assert "/analysis/synergies" in paths
