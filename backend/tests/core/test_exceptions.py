from app.core.exceptions import InvalidAPIKeyError, LogNotFoundError


def test_invalid_api_key_error_default_message():
    err = InvalidAPIKeyError()
    assert str(err) == "ApiKey not valid!"
    assert err.message == "ApiKey not valid!"


def test_log_not_found_error_keeps_id():
    err = LogNotFoundError(42)
    assert str(err) == "Log 42 not found"
    assert err.log_id == 42
