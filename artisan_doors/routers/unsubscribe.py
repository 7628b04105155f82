"""
API Router para desuscripciones con token HMAC.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.subscriber import Subscriber, SubscriberStatus, normalize_email
from ..schemas.subscriber_schema import (
    UnsubscribeRequest,
    UnsubscribeResponse,
    VerifyUnsubscribeResponse,
)
from ..services.email_service import send_unsubscribe_confirmation
from ..services.token_service import verify_unsubscribe_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["unsubscribe"])

DEFAULT_REASON = "Not specified"


async def _unsubscribe(payload: UnsubscribeRequest, db: Session) -> UnsubscribeResponse:
    if not payload.token or not verify_unsubscribe_token(payload.email, payload.token):
        logger.warning(f"🚫 Token de desuscripción inválido para {payload.email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired unsubscribe token")

    subscriber = db.query(Subscriber).filter(Subscriber.email == payload.email).first()
    if not subscriber:
        logger.warning(f"Suscriptor no encontrado: {payload.email}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscriber not found")

    # Repetir la baja no cambia nada: se conserva la fecha y el motivo originales
    if subscriber.status == SubscriberStatus.UNSUBSCRIBED.value:
        logger.info(f"{payload.email} ya estaba desuscrito")
        return UnsubscribeResponse(
            message="Successfully unsubscribed",
            status=subscriber.status,
            unsubscribedAt=subscriber.unsubscribed_at,
        )

    try:
        subscriber.status = SubscriberStatus.UNSUBSCRIBED.value
        subscriber.unsubscribed_at = datetime.utcnow()
        subscriber.unsubscribed_reason = payload.reason or DEFAULT_REASON
        db.commit()
        db.refresh(subscriber)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error al desuscribir {payload.email}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process unsubscribe request",
        )

    logger.info(f"👋 {payload.email} desuscrito. Motivo: {subscriber.unsubscribed_reason}")

    if not await send_unsubscribe_confirmation(subscriber.email):
        logger.warning(f"⚠️ No se pudo enviar la confirmación de baja a {subscriber.email}")

    return UnsubscribeResponse(
        message="Successfully unsubscribed",
        status=subscriber.status,
        unsubscribedAt=subscriber.unsubscribed_at,
    )


@router.post("/unsubscribe", response_model=UnsubscribeResponse)
async def unsubscribe(payload: UnsubscribeRequest, db: Session = Depends(get_db)):
    return await _unsubscribe(payload, db)


@router.post("/verify-unsubscribe", response_model=UnsubscribeResponse)
async def confirm_unsubscribe(payload: UnsubscribeRequest, db: Session = Depends(get_db)):
    """Misma operación que /unsubscribe; es la ruta que usa la página de baja del sitio."""
    return await _unsubscribe(payload, db)


@router.get("/verify-unsubscribe", response_model=VerifyUnsubscribeResponse)
def verify_unsubscribe(
    email: Optional[str] = None,
    token: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Valida un link de baja sin modificar nada."""
    if not email or not token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing email or token")

    email = normalize_email(email)
    is_valid = verify_unsubscribe_token(email, token)

    subscriber = None
    if is_valid:
        subscriber = db.query(Subscriber).filter(Subscriber.email == email).first()

    return VerifyUnsubscribeResponse(
        isValid=is_valid,
        email=email,
        status=subscriber.status if subscriber else "not_found",
    )
