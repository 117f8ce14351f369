from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed by client IP; limits are declared per-route with ``@limiter.limit``
limiter = Limiter(key_func=get_remote_address)
