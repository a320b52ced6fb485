"""
Multi-step login: password -> optional 6-digit code -> session.

    awaiting_credentials --submit_credentials--> authenticated   (2FA off)
    awaiting_credentials --submit_credentials--> awaiting_code   (2FA on)
    awaiting_credentials --submit_credentials--> failed          (bad password)
    awaiting_code --verify_code(ok)--> authenticated
    awaiting_code --verify_code(bad)--> awaiting_code
    awaiting_code --resend_code--> awaiting_code
    awaiting_code --cancel--> awaiting_credentials

The first factor is already satisfied when the code is issued; the session it
produced is held by the challenge and only released on a valid code.
"""
import logging
from typing import Optional

from fastapi import HTTPException, status

from app.core.errors import bad_request
from app.core.messages import msg
from app.modules.activity.schemas import ActivityAction, ResourceType
from app.modules.activity.service import ActivityLogger
from app.modules.auth.schemas import LoginState, TokenResponse
from app.modules.auth.service import AuthService
from app.modules.auth.two_factor import (
    TwoFactorChallengeStore, LoggingCodeSender, VerifyOutcome,
    is_valid_code_format, normalize_email,
)
from app.modules.profiles.service import ProfileService

logger = logging.getLogger(__name__)


class InvalidLoginTransition(Exception):
    pass


class LoginFlow:
    def __init__(
        self,
        auth_service: AuthService,
        profile_service: ProfileService,
        challenges: TwoFactorChallengeStore,
        code_sender: LoggingCodeSender,
        activity: Optional[ActivityLogger] = None,
    ):
        self.auth_service = auth_service
        self.profile_service = profile_service
        self.challenges = challenges
        self.code_sender = code_sender
        self.activity = activity
        self.state = LoginState.AWAITING_CREDENTIALS
        self.email: Optional[str] = None
        self.session: Optional[TokenResponse] = None

    @classmethod
    def resume(cls, email: str, *args, **kwargs) -> "LoginFlow":
        """Rebuild a flow waiting for a code from its pending challenge."""
        flow = cls(*args, **kwargs)
        challenge = flow.challenges.get(email)
        if challenge is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg("no_pending_login"))
        flow.state = LoginState.AWAITING_CODE
        flow.email = challenge.email
        return flow

    def _require(self, expected: LoginState) -> None:
        if self.state != expected:
            raise InvalidLoginTransition(f"Expected state {expected.value}, flow is {self.state.value}")

    def submit_credentials(self, email: str, password: str) -> LoginState:
        self._require(LoginState.AWAITING_CREDENTIALS)
        try:
            session = self.auth_service.sign_in(email, password)
        except HTTPException:
            self.state = LoginState.FAILED
            raise

        # The two-factor setting belongs to the account Auth just authenticated, not to the typed email
        try:
            profile = self.profile_service.get_profile(session.user_id)
        except HTTPException as e:
            self.state = LoginState.FAILED
            if e.status_code == status.HTTP_404_NOT_FOUND:
                raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=msg("profile_not_found"))
            raise

        if profile.two_factor_enabled:
            challenge = self.challenges.issue(email, session)
            self.code_sender.send(challenge.email, challenge.code, challenge.expires_at)
            self.email = challenge.email
            self.state = LoginState.AWAITING_CODE
            logger.info(f"Password accepted for {self.email}, waiting for 2FA code")
            return self.state

        self._establish(email, session, has_2fa=False)
        return self.state

    def resend_code(self) -> LoginState:
        self._require(LoginState.AWAITING_CODE)
        challenge = self.challenges.issue(self.email)
        self.code_sender.send(challenge.email, challenge.code, challenge.expires_at)
        return self.state

    def verify_code(self, code: str) -> LoginState:
        self._require(LoginState.AWAITING_CODE)
        if not is_valid_code_format(code):
            raise bad_request("code_format")
        result = self.challenges.verify(self.email, code)
        outcome = result.outcome
        if outcome == VerifyOutcome.OK:
            self._establish(self.email, result.challenge.session, has_2fa=True)
            return self.state
        if outcome == VerifyOutcome.NO_CHALLENGE:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=msg("no_pending_login"))
        if outcome == VerifyOutcome.TOO_MANY_ATTEMPTS:
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=msg("too_many_attempts"))
        if outcome == VerifyOutcome.EXPIRED:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=msg("code_expired"))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=msg("invalid_code"))

    def cancel(self) -> LoginState:
        self._require(LoginState.AWAITING_CODE)
        self.challenges.discard(self.email)
        self.email = None
        self.session = None
        self.state = LoginState.AWAITING_CREDENTIALS
        return self.state

    def _establish(self, email: str, session: TokenResponse, has_2fa: bool) -> None:
        self.email = normalize_email(email)
        self.session = session
        self.state = LoginState.AUTHENTICATED
        if self.activity:
            self.activity.log(
                ActivityAction.LOGIN, ResourceType.AUTH,
                user_id=session.user_id,
                details={"email": self.email, "has_2fa": has_2fa},
            )
