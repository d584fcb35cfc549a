from slowapi import Limiter
from slowapi.util import get_remote_address

from freedom_wall.config import settings

# Applied to posting and uploads; likes stay unlimited
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
