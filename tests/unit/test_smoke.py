"""Basic smoke tests for the service scaffolding."""

def test_imports():
    import api_server  # noqa: F401
    from config.settings import settings

    assert settings.DB_PATH.endswith(".db")
    assert set(api_server.app.openapi()["paths"]) >= {
        "/analyze-performance",
        "/analyze-performance/pdf",
        "/behavioral-ai",
        "/check-code",
        "/responses",
        "/progress",
        "/test-db",
    }
