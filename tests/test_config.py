import pytest

from api import create_app
from api.config import DevelopmentConfig, ProductionConfig, TestingConfig, get_config
from models.db_storage import _mask


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("prod", ProductionConfig),
        ("production", ProductionConfig),
        ("test", TestingConfig),
        ("Testing", TestingConfig),
        ("dev", DevelopmentConfig),
    ],
)
def test_get_config_by_name(name, expected):
    assert get_config(name) is expected


def test_get_config_defaults_to_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "prod")

    assert get_config(None) is ProductionConfig


def test_token_lifetimes_are_fixed():
    assert TestingConfig.ACCESS_TOKEN_EXPIRES.total_seconds() == 900
    assert TestingConfig.REFRESH_TOKEN_EXPIRES.days == 30


def test_production_app_refuses_to_start_without_secret(tmp_path):
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_app("prod", {"DATABASE_URL": f"sqlite:///{tmp_path / 'p.db'}", "JWT_SECRET": None})


def test_services_are_built_per_app(tmp_path):
    one = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'one.db'}", "JWT_SECRET": "a"})
    two = create_app("testing", {"DATABASE_URL": f"sqlite:///{tmp_path / 'two.db'}", "JWT_SECRET": "b"})
    try:
        assert one.extensions["storage"] is not two.extensions["storage"]
        assert one.extensions["tokens"].secret == "a"
        assert two.extensions["tokens"].secret == "b"
    finally:
        one.extensions["storage"].dispose()
        two.extensions["storage"].dispose()


def test_mask_hides_database_password():
    assert _mask("postgresql://user:pw@db:5432/app") == "postgresql://user:***@db:5432/app"
    assert _mask("sqlite:///database.db") == "sqlite:///database.db"
