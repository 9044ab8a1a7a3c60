"""
Passwordless authentication flow: register, login and one-time code checks.

The service only talks to its collaborators through the small interfaces
below so the FastAPI layer can hand it SQLAlchemy stores and the SMTP
notifier while tests hand it in-memory fakes.
"""
import asyncio
import datetime
import logging
import secrets
from functools import partial
from typing import Callable, Dict, Optional, Protocol

from api.otp.otp_schema import OtpRecord
from api.otp.otp_service import generate_otp_code, is_expired, utcnow
from api.user.user_schema import UserResponse
from api.user.user_service import EMAIL_EXISTS_MESSAGE
from config.settings import settings
from utils.exceptions import (
    DeliveryError,
    ExpiredCredentialError,
    InvalidCredentialError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from utils.validators import (
    normalize_email,
    validate_email,
    validate_full_name,
    validate_otp_code,
)

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid login"
INVALID_DATA_MESSAGE = "Invalid data"
INVALID_CODE_MESSAGE = "Invalid code."


class UserStore(Protocol):
    def find_by_email(self, email: str) -> Optional[UserResponse]: ...

    def create(self, email: str, full_name: str) -> UserResponse: ...


class OtpStore(Protocol):
    def get_by_user_id(self, user_id: str) -> Optional[OtpRecord]: ...

    def upsert(self, user_id: str, code: str, expiry_time: datetime.datetime) -> OtpRecord: ...


class Notifier(Protocol):
    def send_otp(self, code: str, email: str, full_name: str) -> None: ...


class AuthService:
    """Orchestrates registration, login and OTP verification"""

    def __init__(
        self,
        user_store: UserStore,
        otp_store: OtpStore,
        notifier: Notifier,
        *,
        clock: Callable[[], datetime.datetime] = utcnow,
        code_generator: Callable[[], str] = generate_otp_code,
        otp_ttl: Optional[datetime.timedelta] = None,
        store_timeout: Optional[float] = None,
        notify_timeout: Optional[float] = None,
    ):
        self.user_store = user_store
        self.otp_store = otp_store
        self.notifier = notifier
        self.clock = clock
        self.code_generator = code_generator
        self.otp_ttl = otp_ttl or datetime.timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
        self.store_timeout = store_timeout or settings.STORE_TIMEOUT_SECONDS
        self.notify_timeout = notify_timeout or settings.EMAIL_TIMEOUT
        # calls that outlived their deadline and may still hold the session
        self._abandoned = []

    # ─── Blocking collaborator calls ────────────────────────────────────────────
    async def _call(self, func, *args, timeout: float, error_cls, action: str, holds_session: bool = False):
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, partial(func, *args))
        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout)
        except asyncio.TimeoutError as e:
            if holds_session:
                self._abandoned.append(future)
            raise error_cls(detail=f"{action} timed out after {timeout}s") from e

    async def wait_for_abandoned(self) -> None:
        """
        Block until every call given up on by its deadline has returned.

        The stores share the request's session, so it must not be closed or
        its connection handed back to the pool while such a call still runs.
        """
        pending, self._abandoned = self._abandoned, []
        if not pending:
            return
        results = await asyncio.gather(*pending, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.warning("Abandoned call finished with error: %s", result)

    async def _store(self, func, *args, action: str):
        return await self._call(
            func, *args,
            timeout=self.store_timeout,
            error_cls=PersistenceError,
            action=action,
            holds_session=True
        )

    async def _issue_code(self, user: UserResponse) -> None:
        """Send a fresh code to the user, then make it the user's only live code."""
        code = self.code_generator()
        try:
            await self._call(
                self.notifier.send_otp, code, user.email, user.full_name,
                timeout=self.notify_timeout,
                error_cls=DeliveryError,
                action="Sending otp email"
            )
        except DeliveryError as e:
            logger.error("Error sending email: %s", e.detail)
            raise

        expiry_time = self.clock() + self.otp_ttl
        try:
            await self._store(self.otp_store.upsert, user.id, code, expiry_time, action="Saving otp")
        except PersistenceError as e:
            logger.error("Error saving otp: %s", e.detail)
            raise

    # ─── Flows ──────────────────────────────────────────────────────────────────
    async def register(self, email: Optional[str], full_name: Optional[str]) -> UserResponse:
        """
        Create a user and email them a login code.

        All field problems are reported together. A failed email leaves the
        created user in place; logging in again issues a new code.
        """
        errors: Dict[str, str] = {}
        email = normalize_email(email)
        if not email:
            errors["email"] = "Email address is required."
        elif not validate_email(email):
            errors["email"] = "Email address is invalid."

        if not validate_full_name(full_name):
            errors["full_name"] = "Full name must be at least 3 characters."

        if "email" not in errors:
            try:
                existing = await self._store(self.user_store.find_by_email, email, action="Finding user")
            except PersistenceError as e:
                logger.error("Error finding user: %s", e.detail)
                raise
            if existing:
                errors["email"] = EMAIL_EXISTS_MESSAGE

        if errors:
            raise ValidationError(INVALID_DATA_MESSAGE, errors=errors)

        try:
            user = await self._store(self.user_store.create, email, full_name.strip(), action="Creating user")
        except PersistenceError as e:
            logger.error("Error creating user: %s", e.detail)
            raise

        await self._issue_code(user)
        return user

    async def login(self, email: Optional[str]) -> UserResponse:
        """Email a fresh code to a registered user and return their profile."""
        email = normalize_email(email)
        if not validate_email(email):
            raise ValidationError(INVALID_LOGIN_MESSAGE)

        try:
            user = await self._store(self.user_store.find_by_email, email, action="Finding user")
        except PersistenceError as e:
            logger.error("Error finding user: %s", e.detail)
            raise
        if user is None:
            logger.info("Login attempt for unknown email")
            raise NotFoundError(INVALID_LOGIN_MESSAGE)

        await self._issue_code(user)
        return user

    async def verify_otp(self, user_id: Optional[str], code: Optional[str]) -> OtpRecord:
        """
        Check ``code`` against the user's live code.

        Absent codes and store failures answer exactly like a wrong code.
        A verified code stays valid until it expires or is replaced.
        """
        if not user_id or not user_id.strip():
            raise ValidationError(INVALID_DATA_MESSAGE, status_code=400)
        if not validate_otp_code(code):
            logger.debug("Otp data: invalid pattern")
            raise ValidationError(INVALID_CODE_MESSAGE, status_code=401)

        try:
            record = await self._store(self.otp_store.get_by_user_id, user_id.strip(), action="Reading otp")
        except PersistenceError as e:
            logger.error("Error reading otp: %s", e.detail)
            record = None
        if record is None:
            raise InvalidCredentialError(INVALID_CODE_MESSAGE)

        if not secrets.compare_digest(record.code, code):
            raise InvalidCredentialError(INVALID_CODE_MESSAGE, status_code=400)

        if is_expired(record, self.clock()):
            raise ExpiredCredentialError()

        logger.info("Otp verified for user %s", record.user_id)
        return record
