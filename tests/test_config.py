import pytest

from cafechat.config import WORKSPACE_MISSING_MSG, load_settings
from cafechat.errors import ConfigurationMissing


def test_defaults(monkeypatch):
    for name in ("WORKSPACE_ID", "WAIT_TIME_MINUTES", "ATOMIC_ORDERS", "INVENTORY_URL", "NLU_MODEL"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.workspace_configured is False
    assert settings.wait_time_minutes == 10
    assert settings.atomic_orders is False
    assert settings.inventory_url == ""
    assert settings.nlu_model == "gpt-5-mini"


def test_overrides(monkeypatch):
    monkeypatch.setenv("WORKSPACE_ID", "kaf-1")
    monkeypatch.setenv("WAIT_TIME_MINUTES", "15")
    monkeypatch.setenv("ATOMIC_ORDERS", "true")
    settings = load_settings()
    assert settings.require_workspace() == "kaf-1"
    assert settings.wait_time_minutes == 15
    assert settings.atomic_orders is True


def test_bad_wait_time_falls_back(monkeypatch):
    monkeypatch.setenv("WAIT_TIME_MINUTES", "soon")
    assert load_settings().wait_time_minutes == 10


@pytest.mark.parametrize("value", ["", "<workspace-id>", "   "])
def test_missing_workspace(monkeypatch, value):
    monkeypatch.setenv("WORKSPACE_ID", value)
    settings = load_settings()
    with pytest.raises(ConfigurationMissing) as exc:
        settings.require_workspace()
    assert str(exc.value) == WORKSPACE_MISSING_MSG
    assert "<b>WORKSPACE_ID</b>" in str(exc.value)
