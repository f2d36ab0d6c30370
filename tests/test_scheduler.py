import pytest
from datetime import datetime

from app.utils.errors import InvalidState
from app.utils.scheduler import has_conflict, intervals_overlap, validate_interval

from tests.conf_tests import (
    add_booking,
    clear_db,
    create_room,
    test_db,
    admin_user,
    member_user,
    test_room,
)

TEN = datetime(2030, 1, 7, 10, 0)
TEN_THIRTY = datetime(2030, 1, 7, 10, 30)
ELEVEN = datetime(2030, 1, 7, 11, 0)
ELEVEN_THIRTY = datetime(2030, 1, 7, 11, 30)
NINE = datetime(2030, 1, 7, 9, 0)


OVERLAP_CASES = [
    (TEN, ELEVEN, TEN_THIRTY, ELEVEN_THIRTY, True),  # partial overlap
    (TEN, ELEVEN_THIRTY, TEN_THIRTY, ELEVEN, True),  # containment
    (TEN, ELEVEN, TEN, ELEVEN, True),  # identical
    (TEN, ELEVEN, ELEVEN, ELEVEN_THIRTY, False),  # back-to-back after
    (TEN, ELEVEN, NINE, TEN, False),  # back-to-back before
    (NINE, TEN, ELEVEN, ELEVEN_THIRTY, False),  # disjoint
]


@pytest.mark.parametrize("start_a, end_a, start_b, end_b, expected", OVERLAP_CASES)
def test_intervals_overlap(start_a, end_a, start_b, end_b, expected):
    assert intervals_overlap(start_a, end_a, start_b, end_b) is expected
    assert intervals_overlap(start_b, end_b, start_a, end_a) is expected


def test_validate_interval_rejects_empty_and_inverted():
    with pytest.raises(InvalidState):
        validate_interval(TEN, TEN)
    with pytest.raises(InvalidState):
        validate_interval(ELEVEN, TEN)
    validate_interval(TEN, ELEVEN)


# pylint: disable-next=redefined-outer-name
def test_has_conflict(test_db, test_room, admin_user):
    add_booking(test_db, test_room, admin_user, TEN, ELEVEN)

    assert has_conflict(test_db, test_room.id, TEN_THIRTY, ELEVEN_THIRTY)
    assert not has_conflict(test_db, test_room.id, ELEVEN, ELEVEN_THIRTY)
    assert not has_conflict(test_db, test_room.id, NINE, TEN)


# pylint: disable-next=redefined-outer-name
def test_has_conflict_excludes_booking(test_db, test_room, admin_user):
    booking = add_booking(test_db, test_room, admin_user, TEN, ELEVEN)

    assert has_conflict(test_db, test_room.id, TEN_THIRTY, ELEVEN_THIRTY)
    assert not has_conflict(
        test_db, test_room.id, TEN_THIRTY, ELEVEN_THIRTY, exclude_booking_id=booking.id
    )


# pylint: disable-next=redefined-outer-name
def test_has_conflict_ignores_other_rooms(test_db, test_room, admin_user):
    other_room = create_room(test_db, admin_user, name="Other Room")
    add_booking(test_db, other_room, admin_user, TEN, ELEVEN)

    assert not has_conflict(test_db, test_room.id, TEN, ELEVEN)


@pytest.mark.parametrize("start_a, end_a, start_b, end_b, expected", OVERLAP_CASES)
# pylint: disable-next=redefined-outer-name
def test_has_conflict_matches_overlap_rule(
    test_db, test_room, admin_user, start_a, end_a, start_b, end_b, expected
):
    add_booking(test_db, test_room, admin_user, start_a, end_a)
    assert has_conflict(test_db, test_room.id, start_b, end_b) is expected
