from typing import Optional

from fastapi import Header


async def get_current_actor(
    x_actor_id: Optional[str] = Header(None, description="Identity of the caller, set by the identity provider")
) -> Optional[str]:
    """Return the caller's actor id, or None for anonymous callers.

    Sessions are issued upstream; the id is trusted as given. Whether the actor
    is an admin is decided by the catalog store against admin_users.
    """
    if x_actor_id is None:
        return None
    x_actor_id = x_actor_id.strip()
    return x_actor_id or None
