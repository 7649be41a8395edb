"""
Local-only access guard for agent-facing endpoints.

The action and scrape endpoints are called by the coordinating agent
running next to the service; requests from any other address are refused.
"""

from fastapi import HTTPException, Request, status

from clawpulse.config.settings import get_settings


async def require_local_client(request: Request) -> str:
    """
    Verify the request comes from a trusted (local) address.

    Returns:
        The client host

    Raises:
        HTTPException: 403 if the client address is not trusted
    """
    settings = get_settings()
    host = request.client.host if request.client else ""

    if host not in settings.trusted_host_list:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    return host
