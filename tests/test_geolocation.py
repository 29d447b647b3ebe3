import pytest

from khonreep.models.location import PinRequest
from khonreep.services.geolocation import (
    UNAVAILABLE_MESSAGE,
    UNSUPPORTED_MESSAGE,
    Coordinates,
    DevicePosition,
    GeolocationError,
)
from tests.fakes import run


def test_fix_is_returned():
    req = PinRequest(type="WRONG_DIRECTION", latitude=13.7, longitude=100.5)
    assert run(DevicePosition.from_request(req).current_position()) == Coordinates(13.7, 100.5)


def test_unsupported_has_its_own_message():
    with pytest.raises(GeolocationError) as exc:
        run(DevicePosition(error="unsupported").current_position())
    assert str(exc.value) == UNSUPPORTED_MESSAGE


@pytest.mark.parametrize("code", ["permission_denied", "timeout", "position_unavailable"])
def test_other_failures_share_generic_message(code):
    with pytest.raises(GeolocationError) as exc:
        run(DevicePosition(13.7, 100.5, error=code).current_position())
    assert exc.value.code == code
    assert str(exc.value) == UNAVAILABLE_MESSAGE


def test_missing_fix_is_unavailable():
    with pytest.raises(GeolocationError) as exc:
        run(DevicePosition(latitude=13.7).current_position())
    assert exc.value.code == "position_unavailable"
