"""
Authenticated user endpoint.
"""
from fastapi import APIRouter, Depends

from x_oauth import AuthSession
from ..dependencies import get_access_token, get_auth_session
from ..models import identity_response

router = APIRouter(prefix="/api/x")


@router.get("/user")
async def get_user(
    access_token: str = Depends(get_access_token),
    session: AuthSession = Depends(get_auth_session)
):
    """Identity of the account that owns the bearer token"""
    identity = await session.whoami(access_token)
    return {"user": identity_response(identity)}
