import pytest

from ccops.core.config import ControllerSettings, env_int
from ccops.core.models import Request


def test_from_env_defaults(monkeypatch):
    for name in (
        "CCOPS_NAMESPACE",
        "CCOPS_WORKERS",
        "CCOPS_RESYNC_SECONDS",
        "CCOPS_REQUEST_TIMEOUT",
        "CCOPS_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    assert ControllerSettings.from_env() == ControllerSettings(
        namespace=None, workers=2, resync_seconds=3600, request_timeout=30, log_level="INFO"
    )


def test_from_env_reads_overrides(monkeypatch):
    monkeypatch.setenv("CCOPS_NAMESPACE", " apps ")
    monkeypatch.setenv("CCOPS_WORKERS", "4")
    monkeypatch.setenv("CCOPS_RESYNC_SECONDS", "0")
    monkeypatch.setenv("CCOPS_LOG_LEVEL", "debug")

    settings = ControllerSettings.from_env()

    assert settings.namespace == "apps"
    assert settings.workers == 4
    assert settings.resync_seconds == 0
    assert settings.log_level == "DEBUG"


def test_env_int_rejects_garbage(monkeypatch):
    monkeypatch.setenv("CCOPS_WORKERS", "many")

    with pytest.raises(ValueError, match="CCOPS_WORKERS must be an integer"):
        env_int("CCOPS_WORKERS", 2, minimum=1)


def test_env_int_enforces_minimum(monkeypatch):
    monkeypatch.setenv("CCOPS_WORKERS", "0")

    with pytest.raises(ValueError, match=">= 1"):
        ControllerSettings.from_env()


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("apps/demo", Request("apps", "demo")),
        ("demo", Request("", "demo")),
        (" apps/demo ", Request("apps", "demo")),
    ],
)
def test_request_from_key(key, expected):
    assert Request.from_key(key) == expected
    assert Request.from_key(expected.key) == expected


@pytest.mark.parametrize("key", ["", "apps/", "  "])
def test_request_from_key_rejects_empty_name(key):
    with pytest.raises(ValueError, match="namespace/name"):
        Request.from_key(key)
