from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # плагин "ссылка"
    ENABLE_PLAGIARISM = False
    PORTFOLIO_ENABLED = True
    LINK_SUMMARY_LENGTH = 140
    LEGACY_ONLINE_MIN_VERSION = 2011112900

    AUTH_RL_MAX = 5
    AUTH_RL_WINDOW = 300  # 5 минут

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TEST_DATA = True
    DEFAULT_USERS = [
        {"email": "admin@example.com", "password": "pass", "role": "ADMIN", "full_name": "Admin"},
        {"email": "t1@example.com",    "password": "pass", "role": "TEACHER", "full_name": "Teacher One"},
        {"email": "s1@example.com",    "password": "pass", "role": "STUDENT", "full_name": "Student One"},
    ]

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False  # формы; API-токен проверяется отдельно
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

class ProdConfig(BaseConfig):
    DEBUG = False
    JSON_SORT_KEYS = False
    SEED_TEST_DATA = False
    DEFAULT_USERS = []

config_map = {
    "dev": DevConfig,
    "testing": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
