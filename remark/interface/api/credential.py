"""Bearer credential extraction.

The service never issues sessions; each request carries the identity
provider's access token and it is verified by the use case.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from remark.interface.error import AuthenticationRequiredError

bearer_scheme = HTTPBearer(auto_error=False)


async def bearer_credential(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Return the bearer token if the request carries one."""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def require_credential(
    credential: Optional[str] = Depends(bearer_credential),
) -> str:
    """Return the bearer token.

    Raises:
        AuthenticationRequiredError: If the request has no bearer token
    """
    if credential is None:
        raise AuthenticationRequiredError("Authentication required")
    return credential
