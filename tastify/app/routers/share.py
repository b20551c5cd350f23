from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from tastify.app.deps import CurrentUser, get_current_user, get_share_mailbox
from tastify.app.schemas.recipes import PendingShareResponse, ShareRequest
from tastify.services.ids import is_supported_video_url
from tastify.services.share_inbox import SharedUrlMailbox

router = APIRouter(prefix="/share", tags=["share"])


@router.post("/", response_model=PendingShareResponse, status_code=status.HTTP_202_ACCEPTED)
async def deposit_shared_url(
    body: ShareRequest,
    user: CurrentUser = Depends(get_current_user),
    mailbox: SharedUrlMailbox = Depends(get_share_mailbox),
) -> PendingShareResponse:
    if not is_supported_video_url(body.url):
        raise HTTPException(status_code=400, detail="Please provide a valid TikTok or Instagram URL")
    entry = mailbox.deposit(user.id, body.url)
    return PendingShareResponse(url=entry.url, sharedAt=entry.timestamp)


@router.get("/pending", response_model=PendingShareResponse)
async def consume_shared_url(
    user: CurrentUser = Depends(get_current_user),
    mailbox: SharedUrlMailbox = Depends(get_share_mailbox),
) -> PendingShareResponse:
    entry = mailbox.consume(user.id)
    if entry is None:
        return PendingShareResponse()
    return PendingShareResponse(url=entry.url, sharedAt=entry.timestamp)
