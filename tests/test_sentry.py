from contribution_widget.core.observability import init_sentry
from contribution_widget.settings import Settings


def test_init_sentry_skips_when_dsn_missing(monkeypatch) -> None:
    """Sentry initialization is skipped when DSN is absent."""

    calls: list[dict[str, object]] = []
    monkeypatch.setattr(
        "contribution_widget.core.observability.sentry_sdk.init",
        lambda **kwargs: calls.append(kwargs),
    )

    assert init_sentry(Settings(sentry_dsn=None)) is False
    assert calls == []


def test_init_sentry_passes_runtime_settings(monkeypatch) -> None:
    """Sentry SDK receives environment, release and sampling from settings."""

    calls: list[dict[str, object]] = []
    monkeypatch.setattr(
        "contribution_widget.core.observability.sentry_sdk.init",
        lambda **kwargs: calls.append(kwargs),
    )
    monkeypatch.setenv("SENTRY_DSN", "https://examplePublicKey@o0.ingest.sentry.io/0")
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("RELEASE", "abc123")

    assert init_sentry(Settings(sentry_traces_sample_rate=0.2)) is True
    assert calls == [
        {
            "dsn": "https://examplePublicKey@o0.ingest.sentry.io/0",
            "environment": "production",
            "release": "abc123",
            "traces_sample_rate": 0.2,
            "send_default_pii": False,
        }
    ]
