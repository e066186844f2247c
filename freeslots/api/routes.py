"""
API routes for free slot generation.
"""

import logging

from fastapi import APIRouter, Request

from .. import __version__
from ..adapters.usage_log import record_usage
from .schemas import (
    GenerateSlotsRequest,
    GenerateSlotsResponse,
    InternalErrorResponse,
    ValidationErrorResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def dispatch_usage(state, timezone: str, prompt: str) -> None:
    """Hand the usage record to the background writer without ever raising."""
    try:
        state.usage_executor.submit(record_usage, state.usage_store, timezone, prompt)
    except RuntimeError as e:
        logger.warning("Usage log not recorded: %s", e)


@router.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "freeslots",
        "version": __version__,
    }


@router.post(
    "/generate-slots",
    response_model=GenerateSlotsResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        500: {"model": InternalErrorResponse},
    },
    tags=["Slots"],
)
def generate_slots(payload: GenerateSlotsRequest, request: Request) -> GenerateSlotsResponse:
    """
    Compute the free windows of the calendar feed and let the assistant
    format them per the prompt.
    """
    state = request.app.state

    # Usage logging runs beside the request and never affects the response
    dispatch_usage(state, payload.timezone, payload.prompt)

    slots = state.service.generate_slots(
        ics_link=payload.ics_link,
        working_hours=payload.to_working_hours(),
        prompt=payload.prompt,
    )
    return GenerateSlotsResponse(slots=slots)
