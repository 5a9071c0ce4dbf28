from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])

LIVENESS_MESSAGE = "Checkout relay is running"
HELLO_MESSAGE = "Hello from the checkout relay"


@router.get("/", response_class=PlainTextResponse)
async def root():
    return LIVENESS_MESSAGE


@router.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


@router.get("/api/hello")
async def hello():
    return {"message": HELLO_MESSAGE}
