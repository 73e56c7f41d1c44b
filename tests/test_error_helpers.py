import logging

import pytest

from dam_backend.shared import ErrorCode, Result, get_logger, log_structured, sanitize_error_message


def test_sanitize_error_message_masks_paths() -> None:
    msg = sanitize_error_message(RuntimeError("Failed at C:\\\\secret\\\\file.png"), "Generic error")
    assert "[path]" in msg
    assert "C:\\\\" not in msg
    assert msg.startswith("Generic error:")


def test_sanitize_error_message_masks_unix_paths_and_truncates() -> None:
    msg = sanitize_error_message(OSError("cannot open /srv/dam/private/key " + "x" * 500), "Update failed")
    assert "/srv/dam" not in msg
    assert len(msg) <= len("Update failed: ") + 200


def test_sanitize_error_message_returns_fallback_for_empty() -> None:
    assert sanitize_error_message("", "Fallback") == "Fallback"
    assert sanitize_error_message(None, "Fallback") == "Fallback"


def test_sanitize_error_message_names_silent_exceptions() -> None:
    assert sanitize_error_message(TimeoutError(), "Bulk action failed") == "Bulk action failed: TimeoutError"


def test_result_err_accepts_enum_codes() -> None:
    res = Result.Err(ErrorCode.NOT_ELIGIBLE, "nope", field="action")
    assert res.ok is False
    assert res.code == "NOT_ELIGIBLE"
    assert res.meta == {"field": "action"}


def test_result_forward_keeps_code_and_meta() -> None:
    res = Result.Err(ErrorCode.INVALID_INPUT, "", field="asset_ids")
    forwarded = res.forward("Invalid selected_ids")
    assert forwarded.ok is False
    assert forwarded.code == "INVALID_INPUT"
    assert forwarded.error == "Invalid selected_ids"
    assert forwarded.meta == {"field": "asset_ids"}
    assert forwarded.meta is not res.meta


def test_result_forward_refuses_success() -> None:
    with pytest.raises(ValueError):
        Result.Ok([]).forward()


def test_result_map_keeps_meta() -> None:
    res = Result.Ok(2, source="test").map(lambda v: v * 3)
    assert res.data == 6
    assert res.meta == {"source": "test"}


def test_loggers_are_namespaced() -> None:
    assert get_logger("dam_backend.features.bulk_actions.workflow").name == "dam.bulk_actions.workflow"


class _Capture(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_log_structured_emits_json() -> None:
    logger = get_logger("tests.structured")
    capture = _Capture()
    logger.addHandler(capture)
    try:
        log_structured(logger, logging.INFO, "bulk_action_executed", action="PUBLISH", total=3)
    finally:
        logger.removeHandler(capture)
    assert len(capture.messages) == 1
    assert '"bulk_action_executed"' in capture.messages[0]
    assert '"total": 3' in capture.messages[0]
