# api/otp/otp_service.py
import datetime
import logging
import secrets
import uuid
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from api.otp.otp_model import OTP
from api.otp.otp_schema import OtpRecord
from utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)

OTP_MIN = 100_000
OTP_MAX = 999_999

# DATABASE_URL only admits these two; both have INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def generate_otp_code() -> str:
    """Uniform 6-digit code over the closed range [100000, 999999]."""
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def as_utc(value: datetime.datetime) -> datetime.datetime:
    """SQLite hands back naive datetimes; every stored time is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc)


def is_expired(record: OtpRecord, now: datetime.datetime) -> bool:
    return as_utc(record.expiry_time) < as_utc(now)


class OtpStore:
    """At most one OTP row per user; saving a code replaces the previous one."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user_id(self, user_id: str) -> Optional[OtpRecord]:
        try:
            otp = self.db.query(OTP).filter(OTP.user_id == user_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(detail=f"Error reading otp: {e}") from e
        if not otp:
            logger.debug("No otp stored for user %s", user_id)
            return None
        return OtpRecord.model_validate(otp)

    def upsert(self, user_id: str, code: str, expiry_time: datetime.datetime) -> OtpRecord:
        """
        Create or replace the code for ``user_id`` in a single statement,
        so concurrent writers leave exactly one row and the last write wins.
        """
        expiry_time = as_utc(expiry_time)
        try:
            insert = _UPSERT_INSERTS[self.db.get_bind().dialect.name]
            self._native_upsert(insert, user_id, code, expiry_time)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(detail=f"Error saving otp: {e}") from e

        record = self.get_by_user_id(user_id)
        if record is None:
            raise PersistenceError(detail=f"Otp for user {user_id} missing after save")
        return record

    def _native_upsert(self, insert, user_id: str, code: str, expiry_time: datetime.datetime) -> None:
        now = utcnow()
        stmt = insert(OTP).values(
            id=str(uuid.uuid4()),
            user_id=user_id,
            code=code,
            expiry_time=expiry_time,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={
                "code": stmt.excluded.code,
                "expiry_time": stmt.excluded.expiry_time,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)
