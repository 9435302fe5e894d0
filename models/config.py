"""Connection settings for the Canto API"""

from dataclasses import dataclass
from typing import List

DEFAULT_API_DOMAIN = "canto.com"
DEFAULT_TIMEOUT = 30
DEFAULT_PUBLIC_URL = "http://127.0.0.1:8000"


@dataclass(frozen=True)
class CantoConfig:
    """Account domain, token and the public base URL of this server"""
    domain: str = ""
    token: str = ""
    api_domain: str = DEFAULT_API_DOMAIN
    timeout: int = DEFAULT_TIMEOUT
    public_url: str = DEFAULT_PUBLIC_URL

    @property
    def is_configured(self) -> bool:
        return bool(self.domain) and bool(self.token)

    def config_errors(self) -> List[str]:
        errors = []
        if not self.domain:
            errors.append("Canto domain not configured")
        if not self.token:
            errors.append("Canto API token not configured")
        return errors

    @property
    def site_base_url(self) -> str:
        return f"https://{self.domain}.{self.api_domain}/"

    @property
    def api_base_url(self) -> str:
        return f"{self.site_base_url}api/v1/"

    @property
    def binary_base_url(self) -> str:
        return f"{self.site_base_url}api_binary/v1/"
