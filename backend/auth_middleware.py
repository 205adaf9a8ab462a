"""
Authentication Middleware
Validates Supabase JWT tokens and extracts the owner identity
"""
import jwt
from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from config import get_settings
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


class AuthContext:
    """Authenticated owner of projects, storage paths and rows"""

    def __init__(self, user_id: str, email: str = ""):
        self.user_id = user_id
        self.email = email


def decode_token(token: str) -> AuthContext:
    """Decode a Supabase access token into an AuthContext"""
    jwt_secret = get_settings().supabase_jwt_secret
    if not jwt_secret:
        raise ValueError("SUPABASE_JWT_SECRET not configured")

    payload = jwt.decode(
        token,
        jwt_secret,
        algorithms=["HS256"],
        audience="authenticated"
    )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user_id")

    return AuthContext(user_id=user_id, email=payload.get("email") or "")


async def verify_token(credentials: HTTPAuthorizationCredentials = Security(security)) -> AuthContext:
    """
    Verify JWT token from Supabase and return user context.

    Usage in routes:
        @router.get("/protected")
        async def protected_route(auth: AuthContext = Depends(verify_token)):
            # auth.user_id, auth.email
    """
    try:
        auth_context = decode_token(credentials.credentials)
        logger.debug(f"✓ Authenticated user: {auth_context.email} ({auth_context.user_id})")
        return auth_context

    except HTTPException:
        raise
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.error(f"Invalid token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")
    except Exception as e:
        logger.error(f"Token verification failed: {e}")
        raise HTTPException(status_code=401, detail="Authentication failed")
