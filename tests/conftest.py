import datetime
import os
import threading
import time
import uuid

# settings are read at import time; keep the suite off real services
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASSWORD"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.otp.otp_model import OTP  # noqa: F401
from api.otp.otp_schema import OtpRecord
from api.user.user_model import User  # noqa: F401
from api.user.user_schema import UserResponse
from api.user.user_service import EMAIL_EXISTS_MESSAGE
from config.database import Base
from services.auth_service import AuthService
from utils.exceptions import ConflictError, DeliveryError, PersistenceError

T0 = datetime.datetime(2026, 10, 19, 12, 0, 0, tzinfo=datetime.timezone.utc)


class InMemoryUserStore:
    def __init__(self):
        self.users = {}
        self.calls = []
        self._lock = threading.Lock()

    def find_by_email(self, email):
        self.calls.append(("find_by_email", email))
        return self.users.get(email)

    def create(self, email, full_name):
        self.calls.append(("create", email))
        with self._lock:
            if email in self.users:
                raise ConflictError(errors={"email": EMAIL_EXISTS_MESSAGE})
            user = UserResponse(
                id=str(uuid.uuid4()),
                email=email,
                full_name=full_name,
                created_at=T0,
                updated_at=T0,
            )
            self.users[email] = user
        return user


class RacyUserStore(InMemoryUserStore):
    """Pre-check never sees the competing insert, as in a real race."""

    def find_by_email(self, email):
        self.calls.append(("find_by_email", email))
        return None


class BrokenUserStore(InMemoryUserStore):
    def find_by_email(self, email):
        raise PersistenceError(detail="connection refused")

    def create(self, email, full_name):
        raise PersistenceError(detail="connection refused")


class SlowUserStore(InMemoryUserStore):
    """Creates users only after `delay` seconds, like a stalled database."""

    def __init__(self, delay):
        super().__init__()
        self.delay = delay
        self.finished = threading.Event()

    def create(self, email, full_name):
        time.sleep(self.delay)
        try:
            return super().create(email, full_name)
        finally:
            self.finished.set()


class InMemoryOtpStore:
    def __init__(self):
        self.records = {}
        self.calls = []
        self.fail_reads = False
        self.fail_writes = False

    def get_by_user_id(self, user_id):
        self.calls.append(("get_by_user_id", user_id))
        if self.fail_reads:
            raise PersistenceError(detail="read timeout")
        return self.records.get(user_id)

    def upsert(self, user_id, code, expiry_time):
        self.calls.append(("upsert", user_id))
        if self.fail_writes:
            raise PersistenceError(detail="write failed")
        existing = self.records.get(user_id)
        record = OtpRecord(
            id=existing.id if existing else str(uuid.uuid4()),
            user_id=user_id,
            code=code,
            expiry_time=expiry_time,
        )
        self.records[user_id] = record
        return record


class RecordingNotifier:
    def __init__(self):
        self.sent = []
        self.fail = False
        self.delay = 0

    def send_otp(self, code, email, full_name):
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise DeliveryError(detail="smtp relay unavailable")
        self.sent.append((code, email, full_name))

    @property
    def last_code(self):
        return self.sent[-1][0]


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + datetime.timedelta(**kwargs)


class CodeSequence:
    def __init__(self, *codes):
        self._codes = iter(codes)

    def __call__(self):
        return next(self._codes)


@pytest.fixture
def user_store():
    return InMemoryUserStore()


@pytest.fixture
def otp_store():
    return InMemoryOtpStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def codes():
    return CodeSequence("111111", "222222", "333333", "444444")


@pytest.fixture
def service(user_store, otp_store, notifier, clock, codes):
    return AuthService(
        user_store,
        otp_store,
        notifier,
        clock=clock,
        code_generator=codes,
        otp_ttl=datetime.timedelta(minutes=5),
        store_timeout=2,
        notify_timeout=2,
    )


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    Session = sessionmaker(bind=db_engine, autocommit=False, autoflush=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def racy_user_store():
    return RacyUserStore()


@pytest.fixture
def broken_user_store():
    return BrokenUserStore()


@pytest.fixture
def make_service(otp_store, notifier, clock, codes):
    def _make(user_store, **kwargs):
        options = dict(
            clock=clock,
            code_generator=codes,
            otp_ttl=datetime.timedelta(minutes=5),
            store_timeout=2,
            notify_timeout=2,
        )
        options.update(kwargs)
        return AuthService(user_store, otp_store, notifier, **options)
    return _make


@pytest.fixture
def slow_user_store():
    return SlowUserStore(delay=0.3)
