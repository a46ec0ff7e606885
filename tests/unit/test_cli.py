"""Command-line entry point tests."""

from __future__ import annotations

import json

import pytest

from bytes_commerce import cli
from bytes_commerce.client.errors import QueryError

ENV = {
    'BYTES_IDENTITY_HOST': 'https://identity.example.com',
    'BYTES_COMMERCE_HOST': 'https://commerce.example.com',
    'BYTES_USERNAME': 'client',
    'BYTES_PASSWORD': 'secret',
    'BYTES_CONTRACT_ID': '42',
}


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, 'configure_logging', lambda **kwargs: None)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_parser_create_subcommand():
    args = cli.build_parser().parse_args(
        ['create', '--friendly-name', 'acme-sub', '--po-number', 'PO-1', '--budget-code', 'BC-1', '--division-id', '7']
    )

    assert args.command == 'create'
    assert args.friendly_name == 'acme-sub'
    assert args.division_id == 7
    assert args.default_admin == ''


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_resolve_settings_applies_overrides():
    args = cli.build_parser().parse_args(
        ['--commerce-url', 'https://other.example.com', '--contract-id', '7', 'order', '200']
    )

    settings = cli.resolve_settings(args, ENV)

    assert settings.identity_api_url == 'https://identity.example.com'
    assert settings.commerce_api_url == 'https://other.example.com'
    assert settings.contract_id == 7
    assert settings.password == 'secret'


def test_main_returns_2_on_missing_config(clean_env, capsys):
    assert cli.main(['order', '200']) == 2

    assert 'configuration error' in capsys.readouterr().err


def test_main_prints_record(clean_env, capsys):
    for key, value in ENV.items():
        clean_env.setenv(key, value)

    async def fake_run(args, settings):
        assert settings.contract_id == 42
        return {'id': args.order_id, 'subscription_id': 'sub-abc'}

    clean_env.setattr(cli, 'run', fake_run)

    assert cli.main(['order', '200']) == 0

    assert json.loads(capsys.readouterr().out) == {'id': '200', 'subscription_id': 'sub-abc'}


def test_main_returns_1_on_api_failure(clean_env, capsys):
    for key, value in ENV.items():
        clean_env.setenv(key, value)

    async def fake_run(args, settings):
        raise QueryError(404, 'order not found')

    clean_env.setattr(cli, 'run', fake_run)

    assert cli.main(['order', '200']) == 1

    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'order not found' in captured.err
