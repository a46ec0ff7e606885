"""Log redaction tests."""

from __future__ import annotations

import logging

import pytest
import structlog

from bytes_commerce.observability.logging import get_logger, provisioning_id_ctx, redact, redact_secrets
from bytes_commerce.observability import logging as commerce_logging


@pytest.mark.parametrize(
    'text',
    [
        'Authorization: Bearer abc.def.ghi',
        '{"access_token": "abc.def.ghi", "token_type": "Bearer"}',
        'client_id=x&client_secret=abc.def.ghi&grant_type=client_credentials',
        'password=abc.def.ghi',
    ],
)
def test_redact_masks_secrets(text):
    redacted = redact(text)

    assert 'abc.def.ghi' not in redacted
    assert '[REDACTED]' in redacted


def test_redact_leaves_plain_text():
    assert redact('basket 100 created') == 'basket 100 created'


def test_redact_secrets_masks_keys_and_values():
    event = redact_secrets(
        None,
        'info',
        {
            'event': 'token_obtained',
            'access_token': 'abc',
            'Authorization': 'Bearer abc',
            'body': 'client_secret=abc',
            'basket_id': 100,
        },
    )

    assert event['access_token'] == '[REDACTED]'
    assert event['Authorization'] == '[REDACTED]'
    assert event['body'] == 'client_secret=[REDACTED]'
    assert event['basket_id'] == 100
    assert event['event'] == 'token_obtained'


def test_provisioning_id_added_from_context():
    token = provisioning_id_ctx.set('abc123')
    try:
        event = commerce_logging._add_provisioning_id(None, 'info', {'event': 'x'})
    finally:
        provisioning_id_ctx.reset(token)

    assert event['provisioning_id'] == 'abc123'
    assert 'provisioning_id' not in commerce_logging._add_provisioning_id(None, 'info', {'event': 'x'})


@pytest.fixture
def unconfigured_structlog():
    saved = structlog.get_config()
    structlog.reset_defaults()
    yield
    structlog.configure(**saved)


def test_unconfigured_events_go_through_stdlib(unconfigured_structlog, caplog, capsys):
    caplog.set_level(logging.INFO, logger='bytes_commerce.provisioning.orchestrator')

    get_logger('bytes_commerce.provisioning.orchestrator').info(
        'provisioning_started', friendly_name='acme-sub', access_token='abc'
    )

    assert structlog.is_configured()
    assert capsys.readouterr().out == ''
    (record,) = caplog.records
    assert record.getMessage() == 'provisioning_started'
    assert record.friendly_name == 'acme-sub'
    assert record.access_token == '[REDACTED]'


def test_existing_structlog_config_is_left_alone(unconfigured_structlog):
    processors = [structlog.processors.JSONRenderer()]
    structlog.configure(processors=processors)

    get_logger('host')

    assert structlog.get_config()['processors'] == processors
