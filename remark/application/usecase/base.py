"""Base use case and the checks shared by every request."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import logfire

from remark.domain.error import InvalidCredentialError
from remark.domain.model import User
from remark.domain.service import AuthService, ModerationService, RateLimitService
from remark.domain.value import ActionType


class BaseUseCase(ABC):
    """Base use case for orchestrating domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        pass


class AccessGate:
    """Resolves the caller of a request and admits writes.

    A write passes the rate limiter first and then the moderation write
    gate, which reads the caller's ban and mute state fresh.
    """

    def __init__(
        self,
        auth_service: AuthService,
        rate_limit_service: RateLimitService,
        moderation_service: ModerationService,
    ) -> None:
        """Initialize access gate.

        Args:
            auth_service: Credential verification
            rate_limit_service: Write throttling
            moderation_service: Ban and mute checks
        """
        self.auth_service = auth_service
        self.rate_limit_service = rate_limit_service
        self.moderation_service = moderation_service

    async def authenticate(self, credential: str) -> User:
        """Resolve a credential to its user.

        Raises:
            InvalidCredentialError: If the credential is missing or rejected
        """
        return await self.auth_service.authenticate(credential)

    async def identify(self, credential: Optional[str]) -> Optional[User]:
        """Resolve an optional credential for a read.

        A missing or rejected credential makes the caller anonymous.
        """
        if not credential:
            return None
        try:
            return await self.auth_service.authenticate(credential)
        except InvalidCredentialError as e:
            logfire.info("Reading anonymously after rejected credential", error=str(e))
            return None

    async def admit(self, credential: str, action: Optional[ActionType]) -> User:
        """Admit a write request.

        Args:
            credential: Caller's credential
            action: Rate-limited action, or None for unthrottled writes

        Returns:
            The caller, freshly read after expired restrictions are cleared

        Raises:
            InvalidCredentialError: If the credential is missing or rejected
            RateLimitedError: If the action's budget is spent
            BannedError: If the caller is banned
        """
        user = await self.auth_service.authenticate(credential)
        if action is not None:
            await self.rate_limit_service.consume(user.id, action)
        return await self.moderation_service.ensure_can_write(user.id)
