"""Tests for configuration loading through get_active_config()."""

import pytest

from invoice_config import AppConfig, ConfigurationError, get_active_config
from invoice_kernel.domain.values import Rate

BASE_ENV = {"JWT_SECRET_KEY": "s3cret"}


class TestDefaults:
    def test_defaults_with_only_secret(self):
        config = get_active_config(env=BASE_ENV)

        assert config.jwt_secret_key == "s3cret"
        assert config.database_url == "sqlite+pysqlite:///./invoices.db"
        assert config.jwt_algorithm == "HS256"
        assert config.token_ttl_seconds == 3600
        assert config.log_level == "INFO"
        assert config.default_rates.fee_rate == Rate.of("0.04")
        assert config.default_rates.tax_rate == Rate.of("0.10")

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError, match="jwt_secret_key"):
            get_active_config(env={})

    def test_blank_secret(self):
        with pytest.raises(ConfigurationError):
            get_active_config(env={"JWT_SECRET_KEY": "   "})


class TestEnvironment:
    def test_overrides(self):
        config = get_active_config(
            env={
                **BASE_ENV,
                "DATABASE_URL": "postgresql://u:p@localhost/invoices",
                "JWT_EXPIRES_IN": "120",
                "INVOICE_FEE_RATE": "0.05",
                "INVOICE_TAX_RATE": "0.08",
                "LOG_LEVEL": "debug",
            }
        )

        assert config.database_url == "postgresql://u:p@localhost/invoices"
        assert config.token_ttl_seconds == 120
        assert str(config.default_fee_rate) == "0.0500"
        assert str(config.default_tax_rate) == "0.0800"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("ttl", ["soon", "0", "-5"])
    def test_bad_ttl(self, ttl):
        with pytest.raises(ConfigurationError, match="token_ttl_seconds"):
            get_active_config(env={**BASE_ENV, "JWT_EXPIRES_IN": ttl})

    @pytest.mark.parametrize("rate", ["four", "-0.01", "1.5"])
    def test_bad_rate(self, rate):
        with pytest.raises(ConfigurationError, match="default_fee_rate"):
            get_active_config(env={**BASE_ENV, "INVOICE_FEE_RATE": rate})

    def test_bad_log_level(self):
        with pytest.raises(ConfigurationError, match="log_level"):
            get_active_config(env={**BASE_ENV, "LOG_LEVEL": "LOUD"})

    def test_empty_variable_is_ignored(self):
        config = get_active_config(env={**BASE_ENV, "INVOICE_FEE_RATE": ""})

        assert config.default_fee_rate == Rate.of("0.04")


class TestYamlFile:
    def test_yaml_values(self, tmp_path):
        path = tmp_path / "invoicing.yaml"
        path.write_text(
            "jwt_secret_key: from-yaml\n"
            "default_fee_rate: 0.03\n"
            "token_ttl_seconds: 600\n"
        )

        config = get_active_config(env={}, config_file=path)

        assert config.jwt_secret_key == "from-yaml"
        assert str(config.default_fee_rate) == "0.0300"
        assert config.token_ttl_seconds == 600

    def test_environment_wins_over_yaml(self, tmp_path):
        path = tmp_path / "invoicing.yaml"
        path.write_text("jwt_secret_key: from-yaml\ndefault_tax_rate: '0.20'\n")

        config = get_active_config(
            env={"JWT_SECRET_KEY": "from-env", "INVOICE_TAX_RATE": "0.15"},
            config_file=path,
        )

        assert config.jwt_secret_key == "from-env"
        assert str(config.default_tax_rate) == "0.1500"

    def test_file_from_environment_variable(self, tmp_path):
        path = tmp_path / "invoicing.yaml"
        path.write_text("jwt_secret_key: via-env-path\n")

        config = get_active_config(env={"INVOICE_CONFIG_FILE": str(path)})

        assert config.jwt_secret_key == "via-env-path"

    def test_unknown_keys(self, tmp_path):
        path = tmp_path / "invoicing.yaml"
        path.write_text("jwt_secret_key: x\nfee_percent: 4\n")

        with pytest.raises(ConfigurationError, match="fee_percent"):
            get_active_config(env={}, config_file=path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            get_active_config(env=BASE_ENV, config_file=tmp_path / "absent.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "invoicing.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            get_active_config(env=BASE_ENV, config_file=path)


def test_app_config_is_frozen():
    config = AppConfig(jwt_secret_key="x")

    with pytest.raises(AttributeError):
        config.jwt_secret_key = "y"  # type: ignore[misc]
