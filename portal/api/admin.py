"""Admin area routes; reachable only through AccessGuardMiddleware."""

from fastapi import APIRouter, Request

from portal.schemas.auth import MeResponse

router = APIRouter()


@router.get("", response_model=MeResponse)
def admin_home(request: Request) -> MeResponse:
    """Entry point of the admin area: echoes the identity the guard attached."""
    return MeResponse(user=request.state.identity)
