"""
Waitlist routes: join, count.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from ..config import get_db
from ..database import Database
from ..exceptions import DuplicateEmailError
from ..schemas import WaitlistCountResponse, WaitlistCreateRequest, WaitlistResponse

router = APIRouter(prefix="/api/waitlist", tags=["waitlist"])


@router.post("")
async def join_waitlist(
    request: WaitlistCreateRequest,
    db: Annotated[Database, Depends(get_db)]
) -> WaitlistResponse:
    """Add an entry to the pre-launch waitlist."""
    try:
        entry = db.add_to_waitlist(request.full_name, request.email)
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="This email is already on the waitlist")
    return WaitlistResponse.from_db(entry)


@router.get("/count")
async def waitlist_count(
    db: Annotated[Database, Depends(get_db)]
) -> WaitlistCountResponse:
    """Number of waitlist signups."""
    return WaitlistCountResponse(count=db.get_waitlist_count())
