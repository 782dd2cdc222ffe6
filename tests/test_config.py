import pytest

from myturn_watch.core import config


def test_get_settings_reads_env(monkeypatch, credentials_env):
    monkeypatch.setenv("DATASET_PATH", "/data/zips.json")
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "4.5")
    monkeypatch.setenv("QUERY_WORKERS", "3")
    monkeypatch.setenv("PUBLISH_DELAY_SECONDS", "1")

    settings = config.get_settings()

    assert settings.credentials.api_key == "key"
    assert settings.credentials.api_secret == "secret"
    assert settings.credentials.access_token == "token"
    assert settings.credentials.access_secret == "token-secret"
    assert settings.dataset_path == "/data/zips.json"
    assert settings.request_timeout == 4.5
    assert settings.query_workers == 3
    assert settings.publish_delay == 1.0


def test_get_settings_defaults(monkeypatch, credentials_env):
    for name in ("DATASET_PATH", "SEARCH_URL", "SIGNUP_URL", "ELIGIBILITY_TOKEN", "QUERY_WORKERS", "PORT", "WORKER_PORT"):
        monkeypatch.delenv(name, raising=False)

    settings = config.get_settings()

    assert settings.search_url == config.DEFAULT_SEARCH_URL
    assert settings.signup_url == "https://myturn.ca.gov/"
    assert settings.eligibility_token == config.DEFAULT_ELIGIBILITY_TOKEN
    assert settings.query_workers == 1
    assert settings.query_max_retries == 2
    assert settings.worker_port == 8080


@pytest.mark.parametrize("missing", config.CREDENTIAL_ENV_VARS)
def test_each_missing_credential_is_reported(monkeypatch, credentials_env, missing):
    monkeypatch.delenv(missing)

    with pytest.raises(config.ConfigError) as excinfo:
        config.get_settings()

    assert str(excinfo.value).startswith(f"{missing} must be set")


def test_empty_credential_counts_as_missing(monkeypatch, credentials_env):
    monkeypatch.setenv("ACCESS_TOKEN", "")

    with pytest.raises(config.ConfigError, match="ACCESS_TOKEN"):
        config.get_settings()


def test_non_numeric_setting_is_rejected(monkeypatch, credentials_env):
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "soon")

    with pytest.raises(config.ConfigError, match="REQUEST_TIMEOUT_SECONDS"):
        config.get_settings()


def test_zero_workers_falls_back_to_sequential(monkeypatch, credentials_env, caplog):
    monkeypatch.setenv("QUERY_WORKERS", "0")

    with caplog.at_level("WARNING"):
        settings = config.get_settings()

    assert settings.query_workers == 1
    assert "running queries sequentially" in " ".join(caplog.messages)
