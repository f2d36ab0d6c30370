import logging
from sqlalchemy.orm import Session
from app.models.room import Room, RoomMembership, RoomRole
from app.utils.errors import Forbidden, InvalidState, NotFound

logger = logging.getLogger(__name__)


def get_room(db: Session, room_id: int) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise NotFound("Room not found")
    return room


def get_membership(db: Session, room_id: int, user_id: int):
    return (
        db.query(RoomMembership)
        .filter(RoomMembership.room_id == room_id, RoomMembership.user_id == user_id)
        .first()
    )


def is_admin(membership) -> bool:
    return membership is not None and membership.role == RoomRole.ADMIN


def require_member(
    db: Session,
    room_id: int,
    user_id: int,
    detail: str = "You do not have access to this room",
) -> RoomMembership:
    membership = get_membership(db, room_id, user_id)
    if membership is None:
        logger.error(f"User {user_id} is not a member of room {room_id}")
        raise Forbidden(detail)
    return membership


def require_admin(
    db: Session,
    room_id: int,
    user_id: int,
    detail: str = "Only admins can manage this room",
) -> RoomMembership:
    """
    Return the caller's membership if they are an ADMIN of the room.

    A caller without any membership and a member with the USER role are
    rejected with different messages.
    """
    membership = require_member(db, room_id, user_id)
    if not is_admin(membership):
        logger.error(f"User {user_id} is not an admin of room {room_id}")
        raise Forbidden(detail)
    return membership


def ensure_not_creator(room: Room, target_user_id: int, detail: str):
    if room.created_by_id == target_user_id:
        logger.error(f"Refused to modify creator {target_user_id} of room {room.id}")
        raise InvalidState(detail)
