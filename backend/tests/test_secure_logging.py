"""Log sanitization tests."""

import logging

import pytest

from dblicence_api.utils.secure_logging import log_error, sanitize_exception_message


@pytest.mark.parametrize(
    "message,leaked",
    [
        ("could not connect to postgresql+asyncpg://user:pw@db:5432/x", "user:pw"),
        ("login failed: password=hunter2", "hunter2"),
        ("cannot open /var/lib/postgresql/data/pg_hba.conf", "pg_hba.conf"),
    ],
)
def test_sensitive_parts_are_removed(message: str, leaked: str) -> None:
    assert leaked not in sanitize_exception_message(RuntimeError(message))


def test_long_messages_are_truncated() -> None:
    text = sanitize_exception_message(RuntimeError("x" * 500))
    assert len(text) == 200
    assert text.endswith("...")


def test_empty_message_falls_back_to_type_name() -> None:
    assert sanitize_exception_message(ConnectionResetError()) == "ConnectionResetError"


def test_log_error_outside_debug(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("dblicence_api.test")

    with caplog.at_level(logging.ERROR, logger="dblicence_api.test"):
        log_error(logger, "Entity store read failed", RuntimeError("password=secret"))

    assert "Entity store read failed" in caplog.text
    assert "secret" not in caplog.text
    assert caplog.records[0].exc_info is None
