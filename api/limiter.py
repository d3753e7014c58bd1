"""
api/limiter.py -- Shared slowapi rate limiter instance.

Import this in api/main.py (to attach to app.state) and in
api/routes/tokens.py (to apply the admin limit with @admin_limit).

Using a single shared instance ensures all routes share the same in-memory
counter store. If this were instantiated in each module separately, each
module would get its own isolated counter and rate limits would never trigger.

admin_limit is a shared limit: POST, GET and DELETE /tokens draw from one
"admin" bucket per client address, so spreading guesses across routes does
not multiply the allowance. GET /auth carries no limit -- the proxy calls it
on every proxied request.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from core.config import get_settings


def admin_rate_limit() -> str:
    """Limit string for admin routes, read from ADMIN_RATE_LIMIT."""
    return get_settings().admin_rate_limit


limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")

admin_limit = limiter.shared_limit(admin_rate_limit, scope="admin")
