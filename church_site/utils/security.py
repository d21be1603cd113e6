"""
Security utilities: admin authentication, password hashing, rate limiting
"""

import hmac
import time
from collections import defaultdict
from typing import Optional

import bcrypt
from fastapi import HTTPException, Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from church_site.core.config import settings

# Simple in-memory rate limiter
rate_limiter = defaultdict(list)

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if not hmac.compare_digest(credentials.credentials.encode("utf-8"), settings.ADMIN_TOKEN.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token"
        )
    return credentials.credentials

def check_admin_credentials(username: str, password: str) -> bool:
    """Compare dashboard credentials against the configured ones"""
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return username_ok and password_ok

def _to_bcrypt_secret(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]

def hash_password(password: str) -> str:
    """Return a salted bcrypt hash for storage"""
    return bcrypt.hashpw(_to_bcrypt_secret(password), bcrypt.gensalt(rounds=12)).decode("utf-8")

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """Check a password against a stored bcrypt hash"""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_to_bcrypt_secret(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage
        return False

def rate_limit_check(client_ip: str, limit: int = None) -> bool:
    """Simple rate limiting by IP address"""
    if limit is None:
        limit = settings.RATE_LIMIT_PER_MINUTE

    current_time = time.time()
    minute_ago = current_time - 60

    # Clean old requests
    rate_limiter[client_ip] = [
        req_time for req_time in rate_limiter[client_ip]
        if req_time > minute_ago
    ]

    if len(rate_limiter[client_ip]) >= limit:
        return False

    rate_limiter[client_ip].append(current_time)
    return True

def get_client_ip(request) -> str:
    """Extract client IP from request"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
