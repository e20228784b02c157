from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
import logging

from .. import models
from ..dependencies import get_db, get_current_user, get_accountant_dispatcher
from ..schemas import ChatRequest, ChatResponse, ChatErrorResponse
from ..services.accountant_service import AccountantDispatcher, APOLOGY_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI Accountant"])


@router.post(
    "/ai-accountant",
    response_model=ChatResponse,
    responses={500: {"model": ChatErrorResponse}},
)
async def ai_accountant(
    request: ChatRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    dispatcher: AccountantDispatcher = Depends(get_accountant_dispatcher),
):
    """
    Send one message to the AI accountant.

    The reply is either advice text or the outcome of at most one bookkeeping
    action. Both the message and the reply are stored in the conversation,
    which is created on demand when conversationId is omitted.
    """
    if request.user_id is not None and request.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="userId does not match the authenticated user"
        )

    try:
        return await dispatcher.handle_message(db, current_user, request)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error in ai-accountant handler")
        db.rollback()
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ChatErrorResponse(error=str(e), response=APOLOGY_MESSAGE).model_dump(),
        )
