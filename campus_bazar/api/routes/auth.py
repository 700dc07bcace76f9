from fastapi import APIRouter, Depends, HTTPException, status

from campus_bazar.api.dependencies import get_auth_store
from campus_bazar.api.schemas.auth_schemas import LogoutResponse, UserPayload, UserResponse
from campus_bazar.infrastructure.auth.file_auth_store import FileAuthStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=UserResponse)
async def login(body: UserPayload, store: FileAuthStore = Depends(get_auth_store)) -> UserResponse:
    """Mock sign-in: the submitted user becomes the current user."""
    user = body.to_user()
    store.login(user)
    return UserResponse.from_user(user)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: UserPayload, store: FileAuthStore = Depends(get_auth_store)
) -> UserResponse:
    user = body.to_user()
    store.register(user)
    return UserResponse.from_user(user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(store: FileAuthStore = Depends(get_auth_store)) -> LogoutResponse:
    store.logout()
    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def me(store: FileAuthStore = Depends(get_auth_store)) -> UserResponse:
    user = store.current_user()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in.")
    return UserResponse.from_user(user)
