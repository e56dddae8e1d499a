"""Users API router with CRUD operations."""

from fastapi import APIRouter, Depends, status

from src.user_service.api.http.deps import get_user_service
from src.user_service.api.http.schemas import (
    CreateUserRequest,
    Result,
    UpdateUserRequest,
    UserResponse,
)
from src.user_service.core.services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "", response_model=Result[UserResponse], status_code=status.HTTP_201_CREATED
)
def create_user(
    request: CreateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> Result[UserResponse]:
    """Register a new user."""
    user = user_service.create_user(request.to_command())
    return Result.success(UserResponse.from_entity(user))


@router.put("/{user_id}", response_model=Result[UserResponse])
def update_user(
    user_id: str,
    request: UpdateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> Result[UserResponse]:
    """Partially update a user."""
    user = user_service.update_user(request.to_command(user_id))
    return Result.success(UserResponse.from_entity(user))


@router.get("/{user_id}", response_model=Result[UserResponse])
def get_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
) -> Result[UserResponse]:
    """Get a user by ID."""
    user = user_service.get_user_by_id(user_id)
    return Result.success(UserResponse.from_entity(user))


@router.get("", response_model=Result[list[UserResponse]])
def list_users(
    user_service: UserService = Depends(get_user_service),
) -> Result[list[UserResponse]]:
    """List all users."""
    users = user_service.get_all_users()
    return Result.success([UserResponse.from_entity(user) for user in users])


@router.delete("/{user_id}", response_model=Result[None])
def delete_user(
    user_id: str,
    user_service: UserService = Depends(get_user_service),
) -> Result[None]:
    """Delete a user."""
    user_service.delete_user(user_id)
    return Result.success(message="User deleted successfully")
