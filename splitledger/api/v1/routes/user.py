from fastapi import APIRouter, Depends, HTTPException, Response, Cookie
from splitledger.core.config import settings
from splitledger.core.dependencies import get_current_user, get_stores
from splitledger.core.entities import User
from splitledger.core.jwt_config import create_access_token, create_refresh_token, decode_token
from splitledger.repositories.base import Stores
from splitledger.schemas.user import UserCreate, UserEdit, UserLogin, UserOut
from splitledger.services.user_service import authenticate_user, create_user, edit_user

router = APIRouter()

def _set_auth_cookies(response: Response, user_id: str):
    access = create_access_token({"sub": user_id})
    refresh = create_refresh_token({"sub": user_id})

    for key, value in (("access_token", access), ("refresh_token", refresh)):
        response.set_cookie(
            key=key,
            value=value,
            httponly=True,
            secure=settings.COOKIE_SECURE,
            samesite="lax"
        )

    return access

@router.post("/register", response_model=UserOut)
async def register_user(data: UserCreate, response: Response, stores: Stores = Depends(get_stores)):
    user = await create_user(stores, data)
    _set_auth_cookies(response, user.id)
    return user

@router.post("/login")
async def login_user(data: UserLogin, response: Response, stores: Stores = Depends(get_stores)):
    user = await authenticate_user(stores, data.phone, data.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid phone or password")

    access = _set_auth_cookies(response, user.id)
    return {"user": UserOut.model_validate(user), "access_token": access, "token_type": "bearer"}

@router.get("/me", response_model=UserOut)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user

@router.patch("/me", response_model=UserOut)
async def edit(data: UserEdit, stores: Stores = Depends(get_stores), current_user: User = Depends(get_current_user)):
    return await edit_user(stores, data, user_id=current_user.id)

@router.post("/refresh", response_model=UserOut)
async def refresh_token(
    response: Response,
    stores: Stores = Depends(get_stores),
    refresh_cookie: str | None = Cookie(None, alias="refresh_token")
):
    if refresh_cookie is None:
        raise HTTPException(status_code=401, detail="Refresh token missing")

    payload = decode_token(refresh_cookie, expected_type="refresh")
    user = await stores.users.get(str(payload.get("sub")))

    if not user:
        raise HTTPException(401, "User not found")

    _set_auth_cookies(response, user.id)
    return user

@router.post("/logout")
async def logout_user(response: Response, current_user: User = Depends(get_current_user)):
    response.delete_cookie("access_token")
    response.delete_cookie("refresh_token")
    return {"message": "Logged out"}
