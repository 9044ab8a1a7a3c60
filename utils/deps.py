from fastapi import Depends
from sqlalchemy.orm import Session

from api.otp.otp_service import OtpStore
from api.user.user_service import UserStore
from config.database import get_db
from helpers.mail_helper import EmailNotifier
from services.auth_service import AuthService


async def get_auth_service(db: Session = Depends(get_db)):
    """
    Build the auth flow for one request: stores share the request's session,
    mail goes through SMTP. Tests override this dependency with fakes.

    Runs its cleanup before ``get_db`` closes the session, holding it until
    any store call that missed its deadline has finished.
    """
    service = AuthService(UserStore(db), OtpStore(db), EmailNotifier())
    try:
        yield service
    finally:
        await service.wait_for_abandoned()
