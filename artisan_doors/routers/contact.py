import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas.contact_schema import ContactForm
from ..services.email_service import send_contact_email
from ..services.rate_limiter import contact_form_limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", dependencies=[Depends(contact_form_limiter)])
async def submit_contact(form: ContactForm):
    ok = await send_contact_email(form.model_dump())
    if not ok:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send message")

    logger.info(f"📨 Mensaje de contacto de {form.email} reenviado")
    return {"message": "Message sent successfully!"}
