import pytest

from webguards.limitation.errors import (
    ClientError,
    LimitationError,
    LimitExceededError,
    OtherError,
    TimeConversionError,
)
from webguards.limitation.status import Status


def test_client_error_message_and_detail():
    err = ClientError("connection refused")
    assert str(err) == "Redis client failed to connect or run a query"
    assert err.detail == "connection refused"


def test_limit_exceeded_carries_status():
    status = Status.from_parts(200, 100, 2000)
    err = LimitExceededError(status)
    assert err.status is status
    assert str(err) == "Limit is exceeded for a key"


def test_time_conversion_message():
    assert str(TimeConversionError("out of range")) == "Time conversion failed"


def test_other_error_keeps_message():
    err = OtherError("Source duration value is out of range for the target type")
    assert str(err) == "Generic error"
    assert err.message == "Source duration value is out of range for the target type"


@pytest.mark.parametrize(
    ("err", "message"),
    [
        (ClientError("x"), "Redis client failed to connect or run a query"),
        (LimitExceededError(Status.from_parts(1, 1, 0)), "Limit is exceeded for a key"),
        (TimeConversionError("x"), "Time conversion failed"),
        (OtherError("x"), "Generic error"),
    ],
)
def test_all_errors_share_base(err, message):
    assert isinstance(err, LimitationError)
    assert str(err) == message