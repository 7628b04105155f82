import logging

from fastapi import APIRouter, HTTPException, status

from ..schemas.quotation_schema import QuotationRequest
from ..services.email_service import send_quotation_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quotation"])


@router.post("/send-quotation")
@router.post("/quotation", include_in_schema=False)
async def send_quotation(payload: QuotationRequest):
    """
    Recibe el formulario de cotización junto con el resumen del carrito
    y le envía al cliente el detalle por email.
    """
    ok = await send_quotation_email(payload.to_template_data())
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process quotation request",
        )

    logger.info(
        f"🧾 Cotización enviada a {payload.formData.email} "
        f"({len(payload.orderSummary)} items, subtotal {payload.subtotal:.2f})"
    )
    return {"message": "Quotation request sent successfully"}
