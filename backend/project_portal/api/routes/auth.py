"""
Authentication API routes.

Provides endpoints for user registration, login and the current-user
lookup.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from uuid import uuid4

from ...database.connection import get_db
from ...database.models import User, Client, UserRole
from ...schemas.auth import UserRegistrationRequest, UserLoginRequest, AuthResponse, UserInfo
from ...auth.dependencies import get_current_user, CurrentUser
from ...auth.jwt_handler import JWTHandler, PasswordHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _user_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        email=user.email,
        role=user.role.value,
        client_id=user.client_id
    )


def _auth_response(user: User) -> AuthResponse:
    token = JWTHandler.create_user_token(
        user.id, user.client_id, user.email, user.role.value
    )
    return AuthResponse(user=_user_info(user), token=token)


# PUBLIC_INTERFACE
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
            summary="Register new user",
            description="Register a user inside a client, creating the client on first use.")
async def register_user(
    request: UserRegistrationRequest,
    db: Session = Depends(get_db)
):
    """
    Register a new user.

    Fails if the email is already taken. Returns the public user fields
    together with a signed access token.
    """
    existing_user = db.query(User).filter(User.email == request.email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User already exists"
        )

    client = db.query(Client).filter(Client.id == request.client_id).first()
    if not client:
        client = Client(
            id=request.client_id,
            name=request.client_name or f"Client {str(request.client_id)[:8]}"
        )
        db.add(client)
        db.flush()
        logger.info("Provisioned client %s", client.id)

    user = User(
        id=uuid4(),
        client_id=client.id,
        email=request.email,
        password_hash=PasswordHandler.hash_password(request.password),
        role=UserRole(request.role) if request.role else UserRole.MEMBER
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User already exists"
        )
    db.refresh(user)

    logger.info("Registered user %s in client %s as %s", user.email, user.client_id, user.role.value)
    return _auth_response(user)


# PUBLIC_INTERFACE
@router.post("/login", response_model=AuthResponse,
            summary="User login",
            description="Authenticate user with email and password, returning an access token.")
async def login_user(
    request: UserLoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return an access token.

    Unknown email and wrong password produce the same error.
    """
    user = db.query(User).filter(User.email == request.email).first()
    if user:
        verified, new_hash = PasswordHandler.verify_and_update(request.password, user.password_hash)
    else:
        # Unknown emails take as long as wrong passwords
        verified, new_hash = PasswordHandler.dummy_verify(), None
    if not verified:
        logger.warning("Failed login for %s", request.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    if new_hash:
        user.password_hash = new_hash
        db.commit()
        logger.info("Upgraded password hash for %s", user.email)

    return _auth_response(user)


# PUBLIC_INTERFACE
@router.get("/me", response_model=UserInfo,
           summary="Get current user",
           description="Get information about the currently authenticated user.")
async def get_current_user_info(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get current authenticated user information.
    """
    user = db.query(User).filter(User.id == current_user.user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return _user_info(user)
