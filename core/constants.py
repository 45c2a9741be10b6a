"""Global constants for the core package.

This module contains shared constants used across the application core.
"""

from typing import Final

# HTTP Client Constants
HTTP_CONNECTION_LIMIT: Final[int] = 10
HTTP_TIMEOUT_CONNECT: Final[float] = 5.0
HTTP_TIMEOUT_SOCK_READ: Final[float] = 10.0
HTTP_TIMEOUT_TOTAL: Final[float] = 30.0
HTTP_USER_AGENT: Final[str] = "Footprint/1.0"

# Time Conversion
MILLISECONDS_PER_HOUR: Final[int] = 3_600_000
