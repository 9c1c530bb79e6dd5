from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr

from src.guestlist.dependencies import get_current_actor
from src.guestlist.dtos import User, UserRole
from src.guestlist.errors import GuestListError
from src.guestlist.features.users.write_model import UserWriteModel
from src.guestlist.http_errors import http_error
from src.guestlist.repository.store import EventStore, get_event_store
from src.guestlist.schemas import NonBlankStr, UserResponse
from src.guestlist.urls import ME_URL, USERS_URL

router = APIRouter()


class CreateUserRequest(BaseModel):
    role: UserRole
    name: NonBlankStr
    email: EmailStr | None = None
    phone: str = ""


def get_user_write_model(store: EventStore = Depends(get_event_store)) -> UserWriteModel:
    """Dependency to get user write model instance."""
    return UserWriteModel(store=store)


@router.post(USERS_URL, response_model=UserResponse, status_code=201)
async def create_user(
    request: CreateUserRequest,
    write_model: UserWriteModel = Depends(get_user_write_model),
) -> UserResponse:
    """
    Pick a role and get a user for it.
    The returned id goes in the X-User-Id header of later requests.
    """
    try:
        user = await write_model.create_user(
            role=request.role,
            name=request.name,
            email=request.email,
            phone=request.phone,
        )
    except GuestListError as e:
        raise http_error(e) from e
    return UserResponse.from_dto(user)


@router.get(ME_URL, response_model=UserResponse)
async def who_am_i(actor: User = Depends(get_current_actor)) -> UserResponse:
    return UserResponse.from_dto(actor)
