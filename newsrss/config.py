from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """configuration class for environment variable"""

    # Logging
    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv('LOG_LEVEL', 'info')

    # Fetch Settings
    @property
    def FETCH_TIMEOUT_SECONDS(self) -> float:
        return float(os.getenv('FETCH_TIMEOUT_SECONDS', '30'))

    @property
    def FETCH_MAX_CONCURRENCY(self) -> int:
        """Upper bound on article pages fetched at once per source, 0 disables the cap"""
        return int(os.getenv('FETCH_MAX_CONCURRENCY', '8'))

    @property
    def FETCH_USER_AGENT(self) -> Optional[str]:
        return os.getenv('FETCH_USER_AGENT', 'newsrss/0.1')


CONFIG = Config()

__all__ = ["CONFIG"]
