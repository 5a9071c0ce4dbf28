from fastapi import APIRouter, Depends

from checkout_relay.dependencies import get_checkout_service
from checkout_relay.schemas.checkout import (
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
)
from checkout_relay.services.checkout import CheckoutService

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post(
    "/create-checkout-session",
    response_model=CheckoutResponse,
    responses={500: {"model": ErrorResponse}},
)
async def create_checkout_session(
    data: CheckoutRequest,
    checkout: CheckoutService = Depends(get_checkout_service),
):
    session = await checkout.create_session(data)
    return {"id": session.id}
