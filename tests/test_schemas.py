import pytest
from pydantic import ValidationError

from db.schemas import LocationSampleIn


@pytest.mark.parametrize("timestamp", [True, False, "1714552200000", 1714552200000.0])
def test_timestamp_must_be_a_json_integer(timestamp) -> None:
    with pytest.raises(ValidationError) as raised:
        LocationSampleIn.model_validate(
            {"latitude": 30.66, "longitude": 104.06, "timestamp": timestamp},
        )

    assert raised.value.errors()[0]["loc"] == ("timestamp",)


def test_integer_timestamp_and_unknown_motion_values_are_accepted() -> None:
    sample = LocationSampleIn.model_validate(
        {
            "latitude": 30.66,
            "longitude": 104.06,
            "timestamp": 0,
            "speed": -1,
            "heading": -1,
        },
    )

    assert sample.timestamp == 0
    assert sample.speed == -1
    assert sample.heading == -1
