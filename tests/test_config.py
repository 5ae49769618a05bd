"""
Tests for settings loading and user identity helpers.
"""
import pytest

from access_hub.auth import identity_for_name
from access_hub.config import STORE_MEMORY, SiblingOfferPolicy, load_settings
from access_hub.errors import ConfigurationError
from access_hub.utils import user_id_for_name

CONFIG_KEYS = [
    "SUPABASE_URL", "SUPABASE_SERVICE_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY", "APP_PASSWORD", "STORE_BACKEND", "SIBLING_OFFER_POLICY",
    "COORDINATOR_NAMES", "DEFAULT_MODEL", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.store_backend == "supabase"
        assert settings.sibling_offer_policy == SiblingOfferPolicy.KEEP_PENDING
        assert settings.coordinator_names == frozenset()
        assert settings.log_level == "INFO"

    def test_env_overrides_secrets(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")

        settings = load_settings({"GEMINI_API_KEY": "from-secrets", "OPENAI_API_KEY": "sk-test"})

        assert settings.gemini_api_key == "from-env"
        assert settings.openai_api_key == "sk-test"

    def test_parses_coordinators_and_policy(self, monkeypatch):
        monkeypatch.setenv("COORDINATOR_NAMES", " Alice, BOB ,, ")
        monkeypatch.setenv("SIBLING_OFFER_POLICY", "Reject_Siblings")
        monkeypatch.setenv("STORE_BACKEND", "memory")

        settings = load_settings()

        assert settings.coordinator_names == frozenset({"alice", "bob"})
        assert settings.sibling_offer_policy == SiblingOfferPolicy.REJECT_SIBLINGS
        assert settings.store_backend == STORE_MEMORY

    @pytest.mark.parametrize("key,value", [
        ("STORE_BACKEND", "firestore"),
        ("SIBLING_OFFER_POLICY", "first_come"),
        ("DEFAULT_MODEL", "not-a-model"),
    ])
    def test_unknown_values_rejected(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)

        with pytest.raises(ConfigurationError):
            load_settings()

    def test_missing_secrets_file_is_tolerated(self):
        class NoSecrets:
            def get(self, key, default=None):
                raise FileNotFoundError("secrets.toml")

        assert load_settings(NoSecrets()).app_password == ""


class TestIdentity:
    """Tests for identity derivation."""

    def test_uid_is_stable_and_case_insensitive(self):
        assert user_id_for_name("Dana") == user_id_for_name("  dana ")
        assert len(user_id_for_name("Dana")) == 16
        assert user_id_for_name("Dana") != user_id_for_name("Sam")

    def test_coordinator_role_from_settings(self, monkeypatch):
        monkeypatch.setenv("COORDINATOR_NAMES", "dana")
        settings = load_settings()

        assert identity_for_name("Dana", settings).is_coordinator
        assert not identity_for_name("Sam", settings).is_coordinator
