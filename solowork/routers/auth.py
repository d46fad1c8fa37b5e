"""Auth router - API endpoints for authentication."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import BaseModel

from solowork.database import get_database
from solowork.models.user import User, UserCreate
from solowork.services.auth_service import AuthService
from solowork.utils.auth import verify_access_token


router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str = "bearer"


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db=Depends(get_database)):
    """
    Register the account owner.

    Raises:
        HTTPException: 403 once an account exists, 400 if email is taken
    """
    service = AuthService(db)

    try:
        return await service.register_user(
            email=user.email,
            password=user.password,
            name=user.name,
        )
    except ValueError as e:
        code = status.HTTP_403_FORBIDDEN if "closed" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))


@router.post("/login", response_model=TokenResponse)
async def login(login_req: LoginRequest, db=Depends(get_database)):
    """
    Login user and return access token.

    Raises:
        HTTPException: If credentials are invalid (401)
    """
    service = AuthService(db)

    try:
        token = await service.login(
            email=login_req.email,
            password=login_req.password,
        )
        return TokenResponse(access_token=token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """
    Dependency to get current user ID from JWT token.

    Raises:
        HTTPException: If token is missing or invalid (401)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


@router.get("/me", response_model=User)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get current authenticated user.

    Raises:
        HTTPException: If user not found (404)
    """
    service = AuthService(db)

    try:
        return await service.get_user_by_id(user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
