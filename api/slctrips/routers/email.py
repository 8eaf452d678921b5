"""
Newsletter Email Capture
"""
from fastapi import APIRouter
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


class NewsletterSignup(BaseModel):
    email: EmailStr
    source: Optional[str] = Field(None, max_length=100)


@router.post("/subscribe")
async def subscribe_newsletter(signup: NewsletterSignup):
    """
    Accept a newsletter signup. Delivery to a mailing provider is not wired,
    so the address is only logged.
    """
    logger.info(f"email-subscribe {signup.email} source={signup.source or 'site'}")
    return {"ok": True}
