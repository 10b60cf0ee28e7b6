from __future__ import annotations

from scoopify.core.config import IntelligenceThresholds, Settings


def test_environment_profiles_apply_defaults() -> None:
    dev = Settings(environment="development")
    assert dev.log_level == "DEBUG"
    assert dev.reload is True
    assert dev.bi_concurrent_sections is True

    test_profile = Settings(environment="test")
    assert test_profile.log_level == "WARNING"
    assert test_profile.reload is False
    assert test_profile.bi_concurrent_sections is False

    ci_profile = Settings(environment="ci")
    assert ci_profile.log_level == "INFO"
    assert ci_profile.reload is False
    assert ci_profile.bi_concurrent_sections is True


def test_environment_aliases_are_normalised() -> None:
    assert Settings(environment="DEV").environment == "development"
    assert Settings(environment="testing").environment == "test"


def test_environment_profile_respects_explicit_overrides(monkeypatch) -> None:
    monkeypatch.setenv("SCOOPIFY_LOG_LEVEL", "error")
    assert Settings(environment="test").log_level == "ERROR"

    monkeypatch.setenv("SCOOPIFY_BI_CONCURRENT_SECTIONS", "true")
    assert Settings(environment="test").bi_concurrent_sections is True


def test_cron_secret_is_read_without_prefix(monkeypatch) -> None:
    monkeypatch.setenv("CRON_SECRET", "from-env")
    assert Settings().cron_secret == "from-env"

    monkeypatch.setenv("CRON_SECRET", "   ")
    assert Settings().cron_secret is None


def test_thresholds_defaults_and_nested_overrides(monkeypatch) -> None:
    defaults = IntelligenceThresholds()
    assert defaults.coverage_gap_high_zip_count == 5
    assert defaults.churn_risk_percent == 10
    assert defaults.revenue_decline_ratio == 0.8
    assert defaults.failed_payment_alert_count == 5

    monkeypatch.setenv("SCOOPIFY_BI_THRESHOLDS__CHURN_RISK_PERCENT", "15")
    assert Settings().bi_thresholds.churn_risk_percent == 15
    assert Settings().bi_thresholds.churn_high_percent == 20


def test_retry_backoff_accepts_comma_separated_values(monkeypatch) -> None:
    monkeypatch.setenv("SCOOPIFY_JOB_RETRY_BACKOFF_SECONDS", "1, 2,x,4")
    assert Settings().job_retry_backoff_seconds == [1, 2, 4]
