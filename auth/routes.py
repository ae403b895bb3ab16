# src/auth/routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional
from auth import oauth
from auth.services import AuthService
from auth.schemas import UserCreate, UserResponse, UserLogin, Token, OAuthProvidersResponse
from auth.models import User
from database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)


def _user_from_credentials(credentials: Optional[HTTPAuthorizationCredentials], db: Session) -> Optional[User]:
    if credentials is None:
        return None
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = AuthService.decode_token(credentials.credentials)
    if payload is None:
        raise credentials_exception
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise credentials_exception
    user = AuthService.get_user(int(subject), db)
    if user is None:
        raise credentials_exception
    return user


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme), db: Session = Depends(get_db)) -> User:
    """Retrieve the current authenticated user."""
    user = _user_from_credentials(credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme), db: Session = Depends(get_db)) -> Optional[User]:
    """Retrieve the current user if a bearer token was sent."""
    return _user_from_credentials(credentials, db)


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user."""
    return AuthService.create_user(user, db)


@router.post("/login", response_model=Token)
def login(user: UserLogin, db: Session = Depends(get_db)):
    """Login and return a JWT token."""
    authenticated_user = AuthService.authenticate_user(user.username, user.password, db)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthService.token_for_user(authenticated_user)


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user details."""
    return current_user


@router.get("/providers", response_model=OAuthProvidersResponse)
def list_providers():
    """List the OAuth providers that are configured."""
    return {"providers": oauth.enabled_providers()}


@router.get("/{provider}")
def oauth_login(provider: str):
    """Redirect to the provider's consent screen."""
    return RedirectResponse(oauth.authorize_url(provider))


@router.get("/{provider}/callback", response_model=Token)
def oauth_callback(provider: str, code: str, state: str, db: Session = Depends(get_db)):
    """Complete an OAuth login and return a JWT token."""
    identity = oauth.fetch_profile(provider, code, state)
    user = AuthService.link_oauth_identity(
        identity.provider, identity.email, identity.display_name, identity.avatar_url, db
    )
    return AuthService.token_for_user(user)
