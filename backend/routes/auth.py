"""
Authentication Routes
Supabase Auth passthrough: signup, login, logout, profile, token refresh
"""
from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr
from typing import Optional
from supabase_client import get_auth_client
from auth_middleware import verify_token, AuthContext, security
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


# ============================================
# REQUEST/RESPONSE MODELS
# ============================================

class SignupRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class SignupResponse(BaseModel):
    user_id: str
    email: str
    confirmation_required: bool
    message: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    user: dict


class RefreshRequest(BaseModel):
    refresh_token: str


class UserProfileResponse(BaseModel):
    id: str
    email: str


# ============================================
# ROUTES
# ============================================

@router.post("/signup", response_model=SignupResponse)
async def signup(request: SignupRequest):
    """Sign up a new user"""
    supabase = get_auth_client()

    try:
        options = {"data": {"full_name": request.full_name}} if request.full_name else {}
        auth_result = supabase.auth.sign_up({
            "email": request.email,
            "password": request.password,
            "options": options
        })

        if auth_result.user is None:
            raise HTTPException(status_code=400, detail="Signup failed")

        # No session means the project requires email confirmation first
        confirmation_required = auth_result.session is None
        logger.info(f"✓ New user {request.email} signed up")

        return {
            "user_id": auth_result.user.id,
            "email": request.email,
            "confirmation_required": confirmation_required,
            "message": (
                "Check your email to confirm your account"
                if confirmation_required else "Account created successfully"
            )
        }

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Signup failed: {e}")
        raise HTTPException(status_code=400, detail=f"Signup failed: {str(e)}")


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """Login existing user"""
    supabase = get_auth_client()

    try:
        auth_result = supabase.auth.sign_in_with_password({
            "email": request.email,
            "password": request.password
        })

        logger.info(f"✓ User {request.email} logged in")

        return {
            "access_token": auth_result.session.access_token,
            "refresh_token": auth_result.session.refresh_token,
            "user": {
                "id": auth_result.user.id,
                "email": auth_result.user.email,
                "last_sign_in_at": str(auth_result.user.last_sign_in_at)
            }
        }

    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid credentials")


@router.post("/logout")
async def logout(
    auth: AuthContext = Depends(verify_token),
    credentials: HTTPAuthorizationCredentials = Security(security),
):
    """Logout current user (revokes the presented access token)"""
    supabase = get_auth_client()

    try:
        supabase.auth.admin.sign_out(credentials.credentials)
        logger.info(f"✓ User {auth.email} logged out")
        return {"message": "Logged out successfully"}

    except Exception as e:
        logger.error(f"Logout failed: {e}")
        raise HTTPException(status_code=500, detail="Logout failed")


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user(auth: AuthContext = Depends(verify_token)):
    """Get current user profile"""
    return {"id": auth.user_id, "email": auth.email}


@router.post("/refresh")
async def refresh_token(request: RefreshRequest):
    """Refresh access token"""
    supabase = get_auth_client()

    try:
        auth_result = supabase.auth.refresh_session(request.refresh_token)

        return {
            "access_token": auth_result.session.access_token,
            "refresh_token": auth_result.session.refresh_token
        }

    except Exception as e:
        logger.error(f"Token refresh failed: {e}")
        raise HTTPException(status_code=401, detail="Invalid refresh token")
