# User routes: login/logout, profile, admin-driven user creation and soft deletion

import logging
from typing import Optional
from fastapi import APIRouter, Depends

import auth
import schemas
from dependencies import get_actor, get_user_context, get_user_service
from models import User
from user_context import UserContext
from user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/login")
async def login(
    request: schemas.LoginRequest,
    user_context: UserContext = Depends(get_user_context),
    service: UserService = Depends(get_user_service),
):
    """Exchange an API key for an access token, set as cookies and Authorization header"""
    result = service.login(request.api_key)
    if result.ok:
        login_result = result.value
        user_context.set_cookie("apiKey", login_result.api_key)
        user_context.set_cookie("accessToken", login_result.access_token)
        user_context.set_header(
            "Authorization", auth.format_authorization(login_result.api_key, login_result.access_token)
        )

    return schemas.RsData.from_result(
        result, "200-1", "Logged in.",
        lambda value: schemas.LoginResponse(
            user_id=value.user.id, api_key=value.api_key, access_token=value.access_token
        ).model_dump(by_alias=True),
    ).to_response()

@router.post("/logout")
async def logout(user_context: UserContext = Depends(get_user_context)):
    """Clear the credential cookies"""
    user_context.delete_cookie("apiKey")
    user_context.delete_cookie("accessToken")
    return schemas.RsData(result_code="200-1", msg="Logged out.").to_response()

@router.get("/me")
async def me(
    actor: Optional[User] = Depends(get_actor),
    service: UserService = Depends(get_user_service),
):
    """Profile of the authenticated user"""
    return schemas.RsData.from_result(
        service.me(actor), "200-1", "My profile.", schemas.to_user
    ).to_response()

@router.post("/")
async def create_user(
    actor: Optional[User] = Depends(get_actor),
    service: UserService = Depends(get_user_service),
):
    """Create a new user (by admin only)"""
    return schemas.RsData.from_result(
        service.create_user(actor), "201-1", "User created successfully.",
        lambda created: schemas.UserCreateResponse(user_id=created.user.id, api_key=created.api_key),
    ).to_response()

@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    actor: Optional[User] = Depends(get_actor),
    service: UserService = Depends(get_user_service),
):
    """Delete user (admin or self only, soft delete)"""
    return schemas.RsData.from_result(
        service.delete_user(actor, user_id), "200-1", "User deleted successfully.", schemas.to_user
    ).to_response()
