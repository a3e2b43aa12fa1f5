from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .deps import get_chat_controller
from ..controller import ChatController
from ...data.database import get_db
from ...schemas.io_models import ChatRequest, ChatResponse, ConversationContext
from ...utils.errors import ValidationError

router = APIRouter()


@router.post("", response_model=ChatResponse)
def chat(request: ChatRequest, db: Session = Depends(get_db),
         controller: ChatController = Depends(get_chat_controller)):
    message = request.message.strip()
    if not message:
        raise ValidationError("Message is required.")
    # One context per request; nothing about the conversation outlives the call
    context = ConversationContext(user_id=request.user_id)
    return ChatResponse(reply=controller.handle(db, message, context))
