from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime


class SubscribeRequest(BaseModel):
    email: EmailStr
    firstName: Optional[str] = Field(None, max_length=50)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class Preferences(BaseModel):
    productUpdates: bool = True
    specialOffers: bool = True
    newsletter: bool = True


class SubscribeResponse(BaseModel):
    message: str
    preferences: Preferences


class SubscriberStatusOut(BaseModel):
    status: str
    preferences: Preferences
    subscriptionDate: Optional[datetime] = None


class PreferencesUpdate(BaseModel):
    productUpdates: Optional[bool] = None
    specialOffers: Optional[bool] = None
    newsletter: Optional[bool] = None


class PreferencesOut(BaseModel):
    preferences: Preferences


class UnsubscribeRequest(BaseModel):
    email: EmailStr
    token: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=500)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class UnsubscribeResponse(BaseModel):
    message: str
    status: str
    unsubscribedAt: Optional[datetime] = None


class VerifyUnsubscribeResponse(BaseModel):
    isValid: bool
    email: str
    status: str
