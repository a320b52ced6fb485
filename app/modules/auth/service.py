import hashlib
import logging
from supabase import Client
from app.modules.auth.schemas import TokenResponse
from app.core.cache import TTLCache
from app.core.errors import store_error
from app.core.messages import msg
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        supabase: Client,
        token_cache: Optional[TTLCache] = None,
        cache_ttl: int = 60,
        cache_max_size: int = 500,
    ):
        self.supabase = supabase
        self.token_cache = token_cache
        self.cache_ttl = cache_ttl
        self.cache_max_size = cache_max_size

    def sign_in(self, email: str, password: str) -> TokenResponse:
        """First login factor: email + password against Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail=msg("invalid_credentials"))
            raise store_error("Sign-in failed", e)

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail=msg("invalid_credentials"))

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=getattr(auth_response.session, "refresh_token", None),
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        if self.token_cache is not None:
            cached = self.token_cache.get(cache_key)
            if cached is not None:
                return cached
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info(f"Token validation failed: {e}")
            raise HTTPException(status_code=401, detail=msg("not_authenticated"))
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail=msg("not_authenticated"))
        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
        }
        if self.token_cache is not None and len(self.token_cache) < self.cache_max_size:
            self.token_cache.set(cache_key, user_data, self.cache_ttl)
        return user_data

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        if self.token_cache is not None:
            self.token_cache.invalidate(hashlib.sha256(token.encode()).hexdigest())
        try:
            # Supabase tokens are stateless JWTs; an already-expired session still counts as logged out
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.info(f"Sign-out reported an error, treating session as closed: {e}")
            return False
