"""Authentication domain service."""

from abc import ABC, abstractmethod

import logfire

from remark.domain.error import InvalidCredentialError
from remark.domain.model import User
from remark.domain.value import VerifiedIdentity

from .base import Service
from .user_service import UserService


class IdentityVerifier(ABC):
    """Contract for the external identity provider."""

    @abstractmethod
    async def verify(self, credential: str) -> VerifiedIdentity:
        """Resolve an opaque credential to an identity.

        Args:
            credential: Caller-supplied credential (e.g. a bearer token)

        Returns:
            The verified identity

        Raises:
            InvalidCredentialError: If the provider rejects the credential
        """
        pass


class AuthService(Service):
    """Domain service that turns credentials into users."""

    def __init__(
        self, identity_verifier: IdentityVerifier, user_service: UserService
    ) -> None:
        """Initialize authentication service.

        Args:
            identity_verifier: Identity provider client
            user_service: User domain service
        """
        self.identity_verifier = identity_verifier
        self.user_service = user_service

    async def authenticate(self, credential: str) -> User:
        """Verify a credential and upsert the user behind it.

        Raises:
            InvalidCredentialError: If the credential is missing or rejected
        """
        with logfire.span("auth_service.authenticate"):
            if not credential or not credential.strip():
                raise InvalidCredentialError("Credential is required")

            identity = await self.identity_verifier.verify(credential.strip())
            return await self.user_service.upsert_from_identity(identity)
