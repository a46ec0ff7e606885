"""CommerceSettings tests."""

from __future__ import annotations

import pytest

from bytes_commerce.client.errors import ConfigurationError
from bytes_commerce.settings import CommerceSettings


FULL_ENV = {
    'BYTES_IDENTITY_HOST': 'https://identity.example.com',
    'BYTES_COMMERCE_HOST': 'https://commerce.example.com',
    'BYTES_USERNAME': 'client',
    'BYTES_PASSWORD': 'secret',
    'BYTES_CONTRACT_ID': '42',
}


def test_from_env_reads_bytes_variables():
    settings = CommerceSettings.from_env(FULL_ENV)

    assert settings.identity_api_url == 'https://identity.example.com'
    assert settings.commerce_api_url == 'https://commerce.example.com'
    assert settings.username == 'client'
    assert settings.password == 'secret'
    assert settings.contract_id == 42
    assert settings.validate() == []


def test_defaults():
    settings = CommerceSettings.from_env(FULL_ENV)

    assert settings.timeout_seconds == 120.0
    assert settings.poll_interval_seconds == 30.0
    assert settings.poll_max_attempts == 40
    assert settings.basket_max_retries == 3


def test_behaviour_overrides():
    settings = CommerceSettings.from_env(
        {
            **FULL_ENV,
            'BYTES_HTTP_TIMEOUT_SECONDS': '10',
            'BYTES_POLL_INTERVAL_SECONDS': '5',
            'BYTES_POLL_MAX_ATTEMPTS': '4',
            'BYTES_BASKET_MAX_RETRIES': '1',
        }
    )

    assert settings.timeout_seconds == 10.0
    assert settings.poll_interval_seconds == 5.0
    assert settings.poll_max_attempts == 4
    assert settings.basket_max_retries == 1


def test_empty_env_lists_every_missing_value():
    errors = CommerceSettings.from_env({}).validate()

    joined = '\n'.join(errors)
    for var in (
        'BYTES_IDENTITY_HOST',
        'BYTES_COMMERCE_HOST',
        'BYTES_USERNAME',
        'BYTES_PASSWORD',
        'BYTES_CONTRACT_ID',
    ):
        assert var in joined


@pytest.mark.parametrize('key', ['BYTES_CONTRACT_ID', 'BYTES_POLL_MAX_ATTEMPTS', 'BYTES_POLL_INTERVAL_SECONDS'])
def test_non_numeric_values_rejected(key):
    with pytest.raises(ConfigurationError, match=key):
        CommerceSettings.from_env({**FULL_ENV, key: 'abc'})


def test_invalid_behaviour_values_reported():
    settings = CommerceSettings(
        identity_api_url='https://i',
        commerce_api_url='https://c',
        username='u',
        password='p',
        contract_id=1,
        poll_max_attempts=0,
        basket_max_retries=-1,
    )

    errors = settings.validate()

    assert len(errors) == 2


def test_repr_hides_password():
    assert 'secret' not in repr(CommerceSettings.from_env(FULL_ENV))
