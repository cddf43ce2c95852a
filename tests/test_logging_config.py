"""Tests for logging setup and sensitive data masking."""

import logging

from common.logging_config import SensitiveDataFilter, setup_logging


def make_record(msg, args=()):
    return logging.LogRecord('transfer', logging.INFO, __file__, 1, msg, args, None)


def test_redirect_url_query_secrets_are_masked():
    record = make_record("sign in at https://team.example.com/login?state=abc123&code=xyz&next=/")

    SensitiveDataFilter().filter(record)

    assert 'abc123' not in record.msg
    assert 'xyz' not in record.msg
    assert 'next=/' in record.msg


def test_header_values_in_args_are_masked():
    record = make_record("headers: %s", ("Authorization: Bearer s3cr3t",))

    SensitiveDataFilter().filter(record)

    assert 's3cr3t' not in record.getMessage()


def test_plain_messages_pass_through():
    record = make_record("PUT /api/write/items/docs/a.txt -> 200")

    assert SensitiveDataFilter().filter(record) is True
    assert record.msg == "PUT /api/write/items/docs/a.txt -> 200"


def test_setup_logging_installs_one_handler():
    logger = setup_logging('flaredrive-test', log_level='debug')
    setup_logging('flaredrive-test', log_level='debug')

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False
    assert any(isinstance(f, SensitiveDataFilter) for f in logger.handlers[0].filters)
