"""Advice route: forwards a transaction summary to the LLM provider.

Endpoints:
- POST /api/advice: Generate finance advice for the authenticated user
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_advice_service
from api.models import AdviceRequest, AdviceResponse
from api.security import get_current_user_id, session_body
from domain.model.advice import AdviceQuery
from services.advice_service import AdviceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["advice"])


@router.post("/advice", response_model=AdviceResponse)
async def get_advice(
    user_id: str = Depends(get_current_user_id),
    request: AdviceRequest = Depends(session_body(AdviceRequest)),
    service: AdviceService = Depends(get_advice_service),
):
    """Return LLM-generated advice for the submitted transactions."""
    query = AdviceQuery(
        user_id=user_id,
        focus=request.focus,
        goal=request.goal,
        currency=request.currency,
        totals=request.totals,
        transactions=request.transactions,
        language=request.language,
    )
    advice = await service.get_advice(query)
    return AdviceResponse(advice=advice)
