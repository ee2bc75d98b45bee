import datetime as dt
from dataclasses import dataclass
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from portfolio.core.errors import AuthError

# auto_error is off so missing credentials surface as AuthError in the envelope
bearer = HTTPBearer(auto_error=False)
ph = PasswordHasher()

DEFAULT_TTL = dt.timedelta(hours=24)


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    expires_at: dt.datetime


class AuthUser:
    def __init__(self, user_id: int, email: str = ""):
        self.user_id = user_id
        self.email = email


class TokenIssuer:
    """Issues and validates signed, time-limited bearer tokens.

    Tokens are stateless: nothing is stored server-side, so a token stays
    valid until its ``exp`` claim passes and cannot be revoked or renewed.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: dt.timedelta = DEFAULT_TTL):
        if not secret or not secret.strip():
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: int, email: str, now: Optional[dt.datetime] = None) -> str:
        now = now or dt.datetime.now(dt.timezone.utc)
        exp = now + self.ttl
        payload = {
            "user_id": user_id,
            "email": email,
            "iat": int(now.timestamp()),
            # NumericDate may be fractional; truncating would expire the token early
            "exp": exp.timestamp(),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def validate(self, token: str, now: Optional[dt.datetime] = None) -> TokenClaims:
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise AuthError("Invalid token")
        # Reject tokens that ask to be verified with another algorithm
        if header.get("alg") != self.algorithm:
            raise AuthError("Invalid token")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against the caller's clock; any require_*
                # option would switch jose's own wall-clock check back on
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            raise AuthError("Invalid token")

        exp = payload.get("exp")
        user_id = payload.get("user_id")
        if (not isinstance(exp, (int, float)) or isinstance(exp, bool)
                or not isinstance(user_id, int) or isinstance(user_id, bool)):
            raise AuthError("Invalid token")

        now = now or dt.datetime.now(dt.timezone.utc)
        if now.timestamp() >= exp:
            raise AuthError("Token expired")

        return TokenClaims(
            user_id=user_id,
            email=str(payload.get("email", "")),
            expires_at=dt.datetime.fromtimestamp(exp, dt.timezone.utc),
        )


def verify_password(pw: str, pw_hash: str) -> bool:
    try:
        return ph.verify(pw_hash, pw)
    except (VerificationError, InvalidHashError):
        return False


def hash_password(pw: str) -> str:
    return ph.hash(pw)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def require_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthUser:
    """Gate for protected routes; runs before the route body and its form parsing."""
    if creds is None:
        if not request.headers.get("authorization"):
            raise AuthError("Authorization header required")
        raise AuthError("Invalid authorization format")

    claims = issuer.validate(creds.credentials)
    return AuthUser(claims.user_id, claims.email)
