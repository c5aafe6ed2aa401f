# summary_gateway/api/endpoints/health.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Health check endpoint",
    description="Returns Ok if the service is running."
)
async def health_check():
    return PlainTextResponse("Ok")
