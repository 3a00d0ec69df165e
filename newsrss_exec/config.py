from typing import Tuple
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration class for environment variables"""

    # Server Settings
    @property
    def BIND_ADDRESS(self) -> str:
        """host:port the feed server listens on"""
        return os.getenv('BIND_ADDRESS', '0.0.0.0:3000')

    # Refresh Settings
    @property
    def REFRESH_INTERVAL_SECONDS(self) -> float:
        """Pause between two refresh cycles"""
        return float(os.getenv('REFRESH_INTERVAL_SECONDS', str(60 * 60)))


def parse_bind_address(address: str) -> Tuple[str, int]:
    """Split a 'host:port' string, accepting bracketed IPv6 hosts."""
    host, separator, port = address.strip().rpartition(":")
    if not separator or not host or not port.isdigit():
        raise ValueError(f"Invalid bind address '{address}', expected host:port")

    port_number = int(port)
    if not 0 < port_number < 65536:
        raise ValueError(f"Invalid port {port_number} in bind address '{address}'")

    return host.strip("[]"), port_number


CONFIG = Config()

__all__ = ["CONFIG", "parse_bind_address"]
