"""
API Router para suscripciones al newsletter.
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.subscriber import Subscriber, SubscriberStatus, default_preferences, normalize_email
from ..schemas.subscriber_schema import (
    PreferencesOut,
    PreferencesUpdate,
    SubscribeRequest,
    SubscribeResponse,
    SubscriberStatusOut,
)
from ..services.email_service import send_welcome_email
from ..services.rate_limiter import subscription_limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscribe", tags=["newsletter"])


def _request_metadata(request: Request) -> dict:
    return {
        "source": "website",
        "browser": request.headers.get("user-agent", ""),
        "platform": request.headers.get("sec-ch-ua-platform") or "unknown",
    }


def upsert_subscriber(db: Session, email: str, metadata: dict) -> Subscriber:
    """
    Crea el suscriptor o lo reactiva si ya existía.
    Suscribirse dos veces actualiza el registro, nunca lo duplica.
    """
    subscriber = db.query(Subscriber).filter(Subscriber.email == email).first()
    if subscriber is None:
        subscriber = Subscriber(
            email=email,
            status=SubscriberStatus.ACTIVE.value,
            preferences=default_preferences(),
            extra=metadata,
        )
        db.add(subscriber)
        try:
            db.commit()
        except IntegrityError:
            # Otro request creó el mismo email entre la búsqueda y el insert
            db.rollback()
            subscriber = db.query(Subscriber).filter(Subscriber.email == email).first()
        else:
            db.refresh(subscriber)
            logger.info(f"📬 Nuevo suscriptor: {email}")
            return subscriber

    subscriber.status = SubscriberStatus.ACTIVE.value
    subscriber.extra = metadata
    subscriber.unsubscribed_at = None
    subscriber.unsubscribed_reason = None
    db.commit()
    db.refresh(subscriber)
    logger.info(f"🔁 Suscripción actualizada: {email}")
    return subscriber


def record_email_sent(db: Session, subscriber: Subscriber) -> bool:
    """Suma el envío al contador. Un fallo acá no invalida la suscripción ya guardada."""
    email = subscriber.email
    subscriber.emails_sent = (subscriber.emails_sent or 0) + 1
    subscriber.last_email_sent = datetime.utcnow()
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"❌ No se pudo registrar el envío a {email}: {e}", exc_info=True)
        return False


@router.post(
    "",
    response_model=SubscribeResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(subscription_limiter)],
)
async def subscribe(payload: SubscribeRequest, request: Request, db: Session = Depends(get_db)):
    """
    Suscribe un email al newsletter y envía el email de bienvenida.
    Si el email de bienvenida falla la suscripción igual queda registrada.
    """
    try:
        subscriber = upsert_subscriber(db, payload.email, _request_metadata(request))
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error de suscripción para {payload.email}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process subscription. Please try again later.",
        )

    sent = await send_welcome_email(subscriber.email, payload.firstName)
    if sent:
        record_email_sent(db, subscriber)
        logger.info(f"✅ Email de bienvenida enviado a {subscriber.email}")
    else:
        logger.warning(f"⚠️ No se pudo enviar el email de bienvenida a {subscriber.email}")

    return SubscribeResponse(
        message="Successfully subscribed to newsletter",
        preferences=subscriber.merged_preferences(),
    )


@router.get("/{email}", response_model=SubscriberStatusOut)
def get_subscriber_status(email: str, db: Session = Depends(get_db)):
    subscriber = db.query(Subscriber).filter(Subscriber.email == normalize_email(email)).first()
    if not subscriber:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscriber not found")

    return SubscriberStatusOut(
        status=subscriber.status,
        preferences=subscriber.merged_preferences(),
        subscriptionDate=subscriber.subscription_date,
    )


@router.patch("/{email}/preferences", response_model=PreferencesOut)
def update_preferences(email: str, payload: PreferencesUpdate, db: Session = Depends(get_db)):
    """Actualiza sólo las preferencias enviadas; el resto se conserva."""
    subscriber = db.query(Subscriber).filter(Subscriber.email == normalize_email(email)).first()
    if not subscriber:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscriber not found")

    preferences = subscriber.merged_preferences()
    preferences.update(payload.model_dump(exclude_none=True))
    # Reasignar el dict para que SQLAlchemy detecte el cambio en la columna JSON
    subscriber.preferences = preferences
    db.commit()

    return PreferencesOut(preferences=preferences)
