# tests/test_config.py
import pytest

from bolucompras.__main__ import list_products
from bolucompras.config import DEFAULT_DATABASE_URL, DEFAULT_ORIGINS, Settings, load_settings
from bolusdk.client import patch_payload


def test_defaults():
    s = load_settings({})
    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.allowed_origins == DEFAULT_ORIGINS
    assert s.page_size == 10
    assert s.enable_reset is False
    assert s.backend_url == "http://localhost:9002"
    assert s.port == 9002


def test_env_overrides():
    s = load_settings({
        "DATABASE_URL": "sqlite://",
        "ALLOWED_ORIGINS": "http://a.test, ,http://b.test",
        "PAGE_SIZE": "6",
        "LOG_LEVEL": "debug",
        "ENABLE_RESET": "yes",
        "BACKEND_URL": "http://api:9003/",
        "PORT": "9003",
    })
    assert s.database_url == "sqlite://"
    assert s.allowed_origins == ("http://a.test", "http://b.test")
    assert s.page_size == 6
    assert s.log_level == "DEBUG"
    assert s.enable_reset is True
    assert s.backend_url == "http://api:9003"
    assert s.port == 9003


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    monkeypatch.delenv("PAGE_SIZE", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("PAGE_SIZE=7\n", encoding="utf-8")
    try:
        assert load_settings(dotenv_path=env_file).page_size == 7
    finally:
        monkeypatch.delenv("PAGE_SIZE", raising=False)


def test_invalid_page_size():
    with pytest.raises(ValueError):
        load_settings({"PAGE_SIZE": "0"})


def test_patch_payload_rejects_unknown_fields():
    assert patch_payload({"quantity": 2, "purchased": None}) == {"quantity": 2}
    with pytest.raises(ValueError):
        patch_payload({"name": "x"})


def test_list_products_command_reports_unreachable_database(tmp_path):
    missing = tmp_path / "missing" / "bolucompras.db"
    assert list_products(Settings(database_url=f"sqlite:///{missing}")) == 1
    assert list_products(Settings(database_url=f"sqlite:///{tmp_path / 'ok.db'}")) == 0
