"""Test configuration and fixtures."""

import logfire
import pytest

from remark.domain.model import User
from remark.domain.repository import UserRepository
from remark.domain.value import DisplayName, MediaId, MediaRef, MediaType, Role, UserId

# Keep spans and logs local while testing
logfire.configure(send_to_logfire=False, console=False)


def auth(user_id: int, moderator: bool = False) -> dict[str, str]:
    """Authorization header for the mock identity provider."""
    credential = f"user-{user_id}"
    if moderator:
        credential = f"mod-{credential}"
    return {"Authorization": f"Bearer {credential}"}


@pytest.fixture
def media() -> MediaRef:
    """Media item used by most comment tests."""
    return MediaRef(media_id=MediaId(21), media_type=MediaType.ANIME)


async def add_user(
    user_repository: UserRepository,
    user_id: int,
    role: Role = Role.USER,
    **fields,
) -> User:
    """Store a user directly, bypassing sign-in.

    Args:
        user_repository: Repository to store the user in
        user_id: Identity provider id
        role: Stored role
        **fields: Any other User fields to set

    Returns:
        The stored user
    """
    user = User(
        id=UserId(user_id),
        username=DisplayName(f"user{user_id}"),
        role=role,
        **fields,
    )
    return await user_repository.save(user)
