import pytest

from catalogkit.config import DEFAULT_ORIGINS, env_bool, load_client_config, load_service_config
from catalogkit.network import build_api_url, normalise_base_url, product_path


def test_client_config_defaults(tmp_path):
    config = load_client_config(tmp_path, env={})
    assert config.api_base_url == "http://127.0.0.1:7890"
    assert config.request_timeout == 5.0
    assert config.debounce_delay == 0.3
    assert config.suggestion_limit == 6
    assert config.log_level == "INFO"


def test_client_config_reads_env(tmp_path):
    config = load_client_config(
        tmp_path,
        env={
            "CATALOG_API_BASE": "https://shop.example.com/api/",
            "CATALOG_TIMEOUT": "2.5",
            "DEBOUNCE_MS": "500",
            "SUGGESTION_LIMIT": "3",
            "LOG_LEVEL": "debug",
        },
    )
    assert config.api_base_url == "https://shop.example.com/api"
    assert config.request_timeout == 2.5
    assert config.debounce_delay == 0.5
    assert config.suggestion_limit == 3
    assert config.log_level == "DEBUG"


def test_service_config_defaults(tmp_path):
    config = load_service_config(tmp_path, env={})
    assert config.product_file == tmp_path / "products.json"
    assert config.product_backups == 3
    assert config.allowed_origins == DEFAULT_ORIGINS
    assert config.force_tls is True
    assert config.port == 7890


def test_service_config_reads_env(tmp_path):
    absolute = tmp_path / "data" / "catalog.json"
    config = load_service_config(
        tmp_path,
        env={
            "PRODUCT_FILE": str(absolute),
            "PRODUCT_BACKUPS": "-2",
            "ALLOWED_ORIGINS": "https://shop.example.com, ,https://admin.example.com",
            "FORCE_TLS": "off",
            "API_HOST": "127.0.0.1",
            "API_PORT": "9000",
        },
    )
    assert config.product_file == absolute
    assert config.product_backups == 0
    assert config.allowed_origins == ("https://shop.example.com", "https://admin.example.com")
    assert config.force_tls is False
    assert (config.host, config.port) == ("127.0.0.1", 9000)


def test_relative_product_file_resolves_under_base_dir(tmp_path):
    config = load_service_config(tmp_path, env={"PRODUCT_FILE": "data/products.json"})
    assert config.product_file == tmp_path / "data" / "products.json"


@pytest.mark.parametrize("raw, expected", [(None, True), ("1", True), ("yes", True), ("no", False), ("", False)])
def test_env_bool(raw, expected):
    assert env_bool(raw, True) is expected


def test_normalise_base_url():
    assert normalise_base_url(" 127.0.0.1:7890/ ") == "http://127.0.0.1:7890"
    assert normalise_base_url("HTTPS://shop.test") == "HTTPS://shop.test"
    with pytest.raises(ValueError):
        normalise_base_url("")
    with pytest.raises(ValueError):
        normalise_base_url("ws://shop.test")


def test_build_api_url_and_product_path():
    assert build_api_url("http://api.test/", "products") == "http://api.test/products"
    assert build_api_url("http://api.test", "") == "http://api.test"
    assert product_path() == "/products"
    assert product_path(12) == "/products/12"
    assert product_path("a/b") == "/products/a%2Fb"
