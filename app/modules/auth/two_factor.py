"""Pending two-factor challenges and code delivery."""
import re
import secrets
import threading
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Optional

from app.modules.auth.schemas import TokenResponse

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r"^\d{6}$")


def is_valid_code_format(code: str) -> bool:
    return isinstance(code, str) and bool(CODE_PATTERN.match(code))


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


def normalize_email(email: str) -> str:
    return email.strip().lower()


class VerifyOutcome(str, Enum):
    OK = "ok"
    MISMATCH = "mismatch"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    NO_CHALLENGE = "no_challenge"


@dataclass
class PendingChallenge:
    email: str
    code: str
    issued_at: datetime
    expires_at: datetime
    session: TokenResponse
    attempts: int = 0


@dataclass
class VerifyResult:
    outcome: VerifyOutcome
    challenge: Optional[PendingChallenge] = None


class TwoFactorChallengeStore:
    """email -> PendingChallenge. A new code for the same email supersedes the previous one.

    A challenge stays readable after its code expires so the user can still be
    told it expired and ask for a resend; abandoned ones are dropped once they
    have been expired for a further code lifetime.
    """

    def __init__(
        self,
        code_ttl_minutes: int = 10,
        max_attempts: Optional[int] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.code_ttl = timedelta(minutes=code_ttl_minutes)
        self.max_attempts = max_attempts
        self._clock = clock
        self._lock = threading.Lock()
        self._pending: Dict[str, PendingChallenge] = {}

    def issue(self, email: str, session: Optional[TokenResponse] = None) -> PendingChallenge:
        """Create or replace the challenge for email. session=None keeps the held session (resend)."""
        key = normalize_email(email)
        now = self._clock()
        with self._lock:
            self._prune(now)
            previous = self._pending.get(key)
            if session is None:
                if previous is None:
                    raise KeyError(key)
                session = previous.session
            challenge = PendingChallenge(
                email=key,
                code=generate_code(),
                issued_at=now,
                expires_at=now + self.code_ttl,
                session=session,
            )
            self._pending[key] = challenge
        return challenge

    def get(self, email: str) -> Optional[PendingChallenge]:
        with self._lock:
            return self._pending.get(normalize_email(email))

    def verify(self, email: str, code: str) -> VerifyResult:
        """Check code against the pending challenge; a successful check consumes and returns it."""
        key = normalize_email(email)
        with self._lock:
            challenge = self._pending.get(key)
            if challenge is None:
                return VerifyResult(VerifyOutcome.NO_CHALLENGE)
            if self.max_attempts is not None and challenge.attempts >= self.max_attempts:
                return VerifyResult(VerifyOutcome.TOO_MANY_ATTEMPTS)
            challenge.attempts += 1
            if self._clock() >= challenge.expires_at:
                return VerifyResult(VerifyOutcome.EXPIRED)
            if not secrets.compare_digest(challenge.code, code):
                return VerifyResult(VerifyOutcome.MISMATCH)
            del self._pending[key]
            return VerifyResult(VerifyOutcome.OK, challenge)

    def discard(self, email: str) -> None:
        with self._lock:
            self._pending.pop(normalize_email(email), None)

    def _prune(self, now: datetime) -> None:
        stale = [k for k, c in self._pending.items() if now >= c.expires_at + self.code_ttl]
        for key in stale:
            del self._pending[key]
        if stale:
            logger.debug(f"Dropped {len(stale)} abandoned 2FA challenges")

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class LoggingCodeSender:
    """Delivers codes through the application log."""

    def send(self, email: str, code: str, expires_at: datetime) -> None:
        logger.warning("=" * 50)
        logger.warning(f"2FA code for {email}: {code} (expires at {expires_at.isoformat()})")
        logger.warning("=" * 50)
