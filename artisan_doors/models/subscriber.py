"""
Modelo para suscriptores del newsletter.
Nunca se borran: las desuscripciones sólo cambian el estado.
"""
import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, JSON, Text

from ..database import Base


class SubscriberStatus(str, enum.Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"
    BOUNCED = "bounced"


DEFAULT_PREFERENCES = {
    "productUpdates": True,
    "specialOffers": True,
    "newsletter": True,
}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def default_preferences() -> dict:
    return dict(DEFAULT_PREFERENCES)


class Subscriber(Base):
    __tablename__ = "subscribers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    status = Column(String(20), default=SubscriberStatus.ACTIVE.value, nullable=False, index=True)
    subscription_date = Column(DateTime, default=datetime.utcnow, index=True)
    last_email_sent = Column(DateTime, nullable=True)
    emails_sent = Column(Integer, default=0, nullable=False)
    preferences = Column(JSON, default=default_preferences)
    # "metadata" está reservado por SQLAlchemy en los modelos declarativos
    extra = Column("metadata", JSON, default=dict)  # source, browser, platform
    unsubscribed_at = Column(DateTime, nullable=True)
    unsubscribed_reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == SubscriberStatus.ACTIVE.value

    def merged_preferences(self) -> dict:
        prefs = default_preferences()
        prefs.update(self.preferences or {})
        return prefs
