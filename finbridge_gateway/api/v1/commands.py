"""POST /v1/commands - interpret and apply one spoken or typed command"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from finbridge_gateway.api.dependencies import get_assistant, get_request_id, get_sessions
from finbridge_gateway.api.v1.schemas import CommandRequest, CommandResponse, LoanSimulationResponse, TransactionSchema
from finbridge_gateway.domain.exceptions import (
    AmbiguousAmountError,
    CascadeExhaustedError,
    InvalidLoanTermsError,
    NegativeAmountError,
    SessionBusyError,
)
from finbridge_gateway.services.assistant import SessionRegistry, TranscriptEvent, VoiceAssistant

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/commands", response_model=CommandResponse)
async def create_command(
    request_body: CommandRequest,
    request: Request,
    assistant: VoiceAssistant = Depends(get_assistant),
    sessions: SessionRegistry = Depends(get_sessions),
):
    """
    Run one final transcript through the voice session.

    Flow:
    1. Resolve the caller's session and language
    2. Open listening (rejected while a previous command is in flight)
    3. Interpret the transcript (remote cascade, or local normalizer offline)
    4. Apply it through the safety gate
    """
    request_id = get_request_id(request)
    session = sessions.get(request_body.user_id, request_body.language)

    try:
        assistant.start_listening(session)
    except SessionBusyError as e:
        logger.warning(f"Session busy: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    try:
        outcome = await assistant.handle_transcript(session, TranscriptEvent(text=request_body.text, is_final=True))

    except (AmbiguousAmountError, NegativeAmountError, InvalidLoanTermsError) as e:
        logger.warning(f"Command rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except CascadeExhaustedError as e:
        logger.error(f"Classification unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Language model service unavailable")

    finally:
        assistant.stop_listening(session)

    command = outcome.command
    return CommandResponse(
        action=outcome.action,
        intent=command.intent,
        category=command.category,
        amount=command.amount,
        language_detected=command.language_detected,
        confidence=command.confidence,
        message=outcome.message,
        transaction=TransactionSchema.model_validate(outcome.transaction) if outcome.transaction else None,
        monthly_income=outcome.profile.monthly_income if outcome.profile else None,
        simulation=LoanSimulationResponse.model_validate(outcome.simulation) if outcome.simulation else None,
    )
