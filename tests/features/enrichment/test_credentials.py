from datetime import datetime, timedelta, timezone

import pytest

from app.features.enrichment.services.credentials import token_needs_refresh
from app.platform.utils.crypto import decrypt_credentials, encrypt_credentials

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


class TestTokenNeedsRefresh:
    def test_no_expiry_recorded(self):
        assert token_needs_refresh(None, NOW) is False

    def test_expired(self):
        assert token_needs_refresh(NOW - timedelta(seconds=1), NOW)

    def test_inside_refresh_margin(self):
        assert token_needs_refresh(NOW + timedelta(minutes=4), NOW)

    def test_still_valid(self):
        assert not token_needs_refresh(NOW + timedelta(minutes=30), NOW)

    def test_naive_expiry_treated_as_utc(self):
        assert token_needs_refresh(datetime(2026, 10, 18, 11, 0), NOW)


class TestCredentialSealing:
    def test_round_trip(self):
        token = encrypt_credentials({"access_token": "a", "refresh_token": "r"})
        assert "access_token" not in token
        assert decrypt_credentials(token) == {"access_token": "a", "refresh_token": "r"}

    def test_wrong_key_rejected(self):
        token = encrypt_credentials({"api_key": "k"}, secret="one-key")
        with pytest.raises(ValueError):
            decrypt_credentials(token, secret="another-key")

    def test_garbage_rejected(self):
        with pytest.raises(ValueError):
            decrypt_credentials("not-a-token")
