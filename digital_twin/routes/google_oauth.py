"""
Google OAuth flow that stores the calendar token used by /schedule/auto.
"""

import logging
from datetime import datetime, timezone

import requests

from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import RedirectResponse
from requests_oauthlib import OAuth2Session
from oauthlib.oauth2 import OAuth2Error
from sqlalchemy.orm import Session

from .. import config
from ..database import get_db
from ..models import GoogleOAuthToken

logger = logging.getLogger(__name__)

AUTHORIZATION_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
USER_INFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"

SCOPE = [
    "openid",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]

router = APIRouter()


def upsert_google_token(db: Session, email: str, token: dict) -> GoogleOAuthToken:
    expires_at = token.get("expires_at")
    token_expiry = datetime.fromtimestamp(expires_at, timezone.utc).replace(tzinfo=None) if expires_at else None

    google_token = db.query(GoogleOAuthToken).filter(GoogleOAuthToken.email == email).first()
    if google_token:
        google_token.access_token = token.get("access_token")
        # Google only sends a refresh token on first consent
        if token.get("refresh_token"):
            google_token.refresh_token = token.get("refresh_token")
        google_token.token_expiry = token_expiry
    else:
        google_token = GoogleOAuthToken(
            email=email,
            access_token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            token_expiry=token_expiry,
        )
        db.add(google_token)
    db.commit()
    return google_token


@router.get("/login")
def login_via_google():
    google = OAuth2Session(config.GOOGLE_CLIENT_ID, scope=SCOPE, redirect_uri=config.GOOGLE_REDIRECT_URI)
    auth_url, _ = google.authorization_url(
        AUTHORIZATION_BASE_URL,
        access_type="offline",
        prompt="consent",
    )
    return RedirectResponse(auth_url)


@router.get("/callback")
def google_callback(request: Request, db: Session = Depends(get_db)):
    google = OAuth2Session(config.GOOGLE_CLIENT_ID, redirect_uri=config.GOOGLE_REDIRECT_URI)
    try:
        token = google.fetch_token(
            config.GOOGLE_TOKEN_URI,
            client_secret=config.GOOGLE_CLIENT_SECRET,
            authorization_response=str(request.url),
        )
        resp = google.get(USER_INFO_URL)
        resp.raise_for_status()
    except (OAuth2Error, requests.RequestException) as e:
        logger.error(f"❌ Google OAuth token exchange failed: {e}")
        raise HTTPException(status_code=400, detail="Google authorization failed")

    email = resp.json().get("email")
    if not email:
        raise HTTPException(status_code=400, detail="No email returned from Google")

    upsert_google_token(db, email, token)
    logger.info(f"✅ Stored Google Calendar token for {email}")
    return {"message": "Google Calendar connected", "email": email}
