import json

from life_notes.generate_openapi import generate_openapi
from life_notes.settings import DEFAULT_PORT, load_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ["PORT", "HOST", "APP_ENV", "NODE_ENV", "LOG_LEVEL", "CORS_ALLOW_ORIGINS"]:
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.port == DEFAULT_PORT
        assert settings.host == "0.0.0.0"
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.cors_allow_origins == ["*"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8081")
        monkeypatch.setenv("APP_ENV", "Production")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        settings = load_settings()
        assert settings.port == 8081
        assert settings.environment == "production"
        assert settings.log_level == "DEBUG"
        assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]

    def test_node_env_is_a_fallback(self, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        monkeypatch.setenv("NODE_ENV", "staging")
        assert load_settings().environment == "staging"

    def test_invalid_port_falls_back(self, monkeypatch):
        monkeypatch.setenv("PORT", "eighty")
        assert load_settings().port == DEFAULT_PORT
        monkeypatch.setenv("PORT", "70000")
        assert load_settings().port == DEFAULT_PORT


class TestOpenAPI:
    def test_generate_openapi_writes_schema(self, tmp_path):
        out = tmp_path / "interfaces" / "openapi.json"
        written = generate_openapi(str(out))
        assert written == str(out)
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert {"health", "notes", "todos"} <= {t["name"] for t in schema["tags"]}
        assert "/api/todos/{todo_id}/complete" in schema["paths"]
        assert "/api/notes" in schema["paths"]
