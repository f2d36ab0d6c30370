import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from typing import List
from app.db import get_db
from app.models.room import Room, RoomMembership, RoomRole
from app.models.user import User
from app.schemas.room import (
    MemberAdd,
    MemberRoleUpdate,
    MembershipResponse,
    MyRoomResponse,
    RoomCreate,
    RoomDetailResponse,
    RoomResponse,
    RoomUpdate,
)
from app.utils.auth import get_current_user
from app.utils.cleanup import sweep_ended_bookings
from app.utils.errors import Conflict, InvalidState, NotFound
from app.utils.loaders import load_room, room_options
from app.utils.permissions import (
    ensure_not_creator,
    get_membership,
    get_room,
    require_admin,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


def load_membership(db: Session, membership_id: int):
    return (
        db.query(RoomMembership)
        .options(selectinload(RoomMembership.user))
        .filter(RoomMembership.id == membership_id)
        .first()
    )


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    room: RoomCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Create a new meeting room.
    The caller becomes its creator and first ADMIN.
    """
    db_room = Room(**room.model_dump(), created_by_id=current_user["id"])
    db_room.members.append(
        RoomMembership(user_id=current_user["id"], role=RoomRole.ADMIN)
    )
    db.add(db_room)
    db.commit()
    logger.debug(f"Created room: {db_room.id} by user {current_user['id']}")
    return load_room(db, db_room.id)


@router.get("/", response_model=List[RoomResponse])
def get_rooms(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Retrieve a list of all meeting rooms, newest first.
    """
    rooms = (
        db.query(Room)
        .options(*room_options())
        .order_by(Room.created_at.desc(), Room.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return rooms


@router.get("/my", response_model=List[MyRoomResponse])
def get_my_rooms(
    db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)
):
    """
    Retrieve the rooms the caller is a member of, with the caller's role.
    """
    memberships = (
        db.query(RoomMembership)
        .options(selectinload(RoomMembership.room).options(*room_options()))
        .filter(RoomMembership.user_id == current_user["id"])
        .order_by(RoomMembership.created_at.desc(), RoomMembership.id.desc())
        .all()
    )
    return memberships


@router.get("/{room_id}", response_model=RoomDetailResponse)
def get_room_by_id(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Retrieve a specific meeting room with its members and bookings.
    """
    sweep_ended_bookings(db)
    room = load_room(db, room_id, with_bookings=True)
    if not room:
        raise NotFound("Room not found")
    return room


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    room_update: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update a meeting room's details.
    Requires ADMIN role in the room.
    """
    db_room = get_room(db, room_id)
    require_admin(
        db, room_id, current_user["id"], detail="Only admins can update room details"
    )

    update_data = room_update.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    for key, value in update_data.items():
        setattr(db_room, key, value)

    db.commit()
    logger.debug(f"Updated room: {room_id}")
    return load_room(db, room_id)


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Delete a meeting room with its memberships and bookings.
    Requires ADMIN role in the room.
    """
    db_room = get_room(db, room_id)
    require_admin(db, room_id, current_user["id"], detail="Only admins can delete rooms")

    db.delete(db_room)
    db.commit()
    logger.debug(f"Deleted room: {room_id}")
    return None


@router.post(
    "/{room_id}/users",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_user_to_room(
    room_id: int,
    member: MemberAdd,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Add a registered user, found by email, to the room with the given role.
    Requires ADMIN role in the room.
    """
    get_room(db, room_id)
    require_admin(
        db, room_id, current_user["id"], detail="Only admins can add users to room"
    )

    user_to_add = db.query(User).filter(User.email == member.user_email).first()
    if not user_to_add:
        raise NotFound("User with this email not found")
    if get_membership(db, room_id, user_to_add.id) is not None:
        raise Conflict("User is already in this room")

    membership = RoomMembership(room_id=room_id, user_id=user_to_add.id, role=member.role)
    db.add(membership)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User is already in this room")
    logger.debug(f"Added user {user_to_add.id} to room {room_id} as {member.role.value}")
    return load_membership(db, membership.id)


@router.patch("/{room_id}/users/{user_id}", response_model=MembershipResponse)
def update_user_role(
    room_id: int,
    user_id: int,
    role_update: MemberRoleUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Change the role of a room member.
    Requires ADMIN role in the room. The creator's role and the caller's own role cannot be changed.
    """
    db_room = get_room(db, room_id)
    require_admin(
        db, room_id, current_user["id"], detail="Only admins can change user roles"
    )
    ensure_not_creator(db_room, user_id, detail="Cannot change the role of the room creator")
    if user_id == current_user["id"]:
        raise InvalidState("You cannot change your own role")

    membership = get_membership(db, room_id, user_id)
    if membership is None:
        raise NotFound("User is not a member of this room")

    membership.role = role_update.role
    db.commit()
    logger.debug(f"Changed role of user {user_id} in room {room_id} to {role_update.role.value}")
    return load_membership(db, membership.id)


@router.delete("/{room_id}/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_user_from_room(
    room_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Remove a member from the room.
    Requires ADMIN role in the room. The creator cannot be removed.
    """
    db_room = get_room(db, room_id)
    require_admin(
        db, room_id, current_user["id"], detail="Only admins can remove users from room"
    )
    ensure_not_creator(db_room, user_id, detail="Cannot remove room creator")

    membership = get_membership(db, room_id, user_id)
    if membership is None:
        raise NotFound("User is not a member of this room")

    db.delete(membership)
    db.commit()
    logger.debug(f"Removed user {user_id} from room {room_id}")
    return None
