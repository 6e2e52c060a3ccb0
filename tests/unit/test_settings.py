"""Unit tests for settings and their use by Repository."""
from pathlib import Path

from recordstore.models import ContactModel
from recordstore.repository import Repository
from recordstore.settings import get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("APP_DATA_ROOT", raising=False)
    monkeypatch.delenv("APP_JSON_INDENT", raising=False)
    cfg = get_settings()
    assert cfg.json_indent is None
    assert cfg.api_workers == 1


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("APP_JSON_INDENT", "2")
    cfg = get_settings()
    assert cfg.data_root == tmp_path
    assert cfg.json_indent == 2


def test_repository_uses_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("APP_JSON_INDENT", "2")
    repo = Repository(ContactModel())
    assert repo.store.path == Path(tmp_path) / "Contacts.json"
    assert repo.store.indent == 2
