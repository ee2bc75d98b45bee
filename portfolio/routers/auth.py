from fastapi import APIRouter, Depends

from portfolio.schemas.auth import LoginPayload, RegisterPayload
from portfolio.schemas.envelope import envelope_response
from portfolio.services import users
from portfolio.services.security import AuthUser, TokenIssuer, get_token_issuer, require_user

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", status_code=201)
async def register(payload: RegisterPayload):
    await users.register(payload.name, payload.email, payload.password)
    return envelope_response(201, message="User registered successfully")


@router.post("/login")
async def login(payload: LoginPayload, issuer: TokenIssuer = Depends(get_token_issuer)):
    user = await users.authenticate(payload.email, payload.password)
    token = issuer.issue(user.id, user.email)
    return envelope_response(200, token=token, user=user.summary())


@router.get("/profile")
async def profile(auth: AuthUser = Depends(require_user)):
    user = await users.get_profile(auth.user_id)
    return envelope_response(200, user=user.summary())
