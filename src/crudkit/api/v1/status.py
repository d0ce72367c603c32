"""Liveness probe and a deliberate failure route for exercising the error path."""

from fastapi import APIRouter, status
from fastapi.responses import PlainTextResponse

from crudkit.exceptions.base import DefaultError

router = APIRouter(prefix="/status", tags=["status"])


@router.get("", response_class=PlainTextResponse, status_code=status.HTTP_202_ACCEPTED)
async def get_status():
    return PlainTextResponse("OK", status_code=status.HTTP_202_ACCEPTED)


@router.get("/error")
async def get_error():
    raise DefaultError("Default Error")
