"""
Google Ads REST access for the placement exclusion job.

Credentials come from .env (python-dotenv); every call goes through
requests against googleads.googleapis.com.
"""

import os
from pathlib import Path
from typing import Iterator, Optional

import requests
from dotenv import load_dotenv

from core.exclude.config import ConfigError

# =============================================================================
# CONFIGURATION
# =============================================================================

SCRIPT_DIR = Path(__file__).parent
CORE_DIR = SCRIPT_DIR.parent
PROJECT_ROOT = CORE_DIR.parent

GOOGLE_ADS_API_VERSION = "v19"
TOKEN_URL = "https://oauth2.googleapis.com/token"
REQUEST_TIMEOUT_SECONDS = 60

REQUIRED_ENV_VARS = [
    "GOOGLE_ADS_DEVELOPER_TOKEN",
    "GOOGLE_ADS_CLIENT_ID",
    "GOOGLE_ADS_CLIENT_SECRET",
    "GOOGLE_ADS_REFRESH_TOKEN",
    "GOOGLE_ADS_CUSTOMER_ID",
]


class GoogleAdsApiError(Exception):
    """Raised for any non-200 response from Google Ads or the token endpoint."""
    pass


# =============================================================================
# CREDENTIAL LOADING
# =============================================================================


def load_env() -> Optional[str]:
    """Load environment variables from the first .env found. Returns its path."""
    env_paths = [
        PROJECT_ROOT / ".env",
        Path.home() / "placement-excluder" / ".env",
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return str(env_path)
    return None


def get_credentials() -> dict:
    """Collect Google Ads credentials from the environment."""
    missing = [var for var in REQUIRED_ENV_VARS if not os.getenv(var)]
    if missing:
        raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

    return {
        "developer_token": os.getenv("GOOGLE_ADS_DEVELOPER_TOKEN"),
        "client_id": os.getenv("GOOGLE_ADS_CLIENT_ID"),
        "client_secret": os.getenv("GOOGLE_ADS_CLIENT_SECRET"),
        "refresh_token": os.getenv("GOOGLE_ADS_REFRESH_TOKEN"),
        "customer_id": os.getenv("GOOGLE_ADS_CUSTOMER_ID").replace("-", ""),
        "login_customer_id": os.getenv("GOOGLE_ADS_LOGIN_CUSTOMER_ID", "").replace("-", "") or None,
    }


def get_access_token(credentials: dict) -> str:
    """Exchange refresh token for access token."""
    response = requests.post(
        TOKEN_URL,
        data={
            "client_id": credentials["client_id"],
            "client_secret": credentials["client_secret"],
            "refresh_token": credentials["refresh_token"],
            "grant_type": "refresh_token",
        },
        timeout=REQUEST_TIMEOUT_SECONDS,
    )
    if response.status_code != 200:
        raise GoogleAdsApiError(f"Token refresh failed: {response.text}")
    return response.json()["access_token"]


# =============================================================================
# GOOGLE ADS API CLIENT
# =============================================================================


class GoogleAdsClient:
    """Google Ads API client for GAQL reads and service mutates."""

    def __init__(self, customer_id: str, access_token: str, developer_token: str,
                 login_customer_id: str = None):
        self.customer_id = customer_id.replace("-", "")
        self.access_token = access_token
        self.developer_token = developer_token
        self.login_customer_id = login_customer_id.replace("-", "") if login_customer_id else None
        self.base_url = f"https://googleads.googleapis.com/{GOOGLE_ADS_API_VERSION}"

    @classmethod
    def from_credentials(cls, credentials: dict) -> "GoogleAdsClient":
        access_token = get_access_token(credentials)
        return cls(
            credentials["customer_id"],
            access_token,
            credentials["developer_token"],
            credentials.get("login_customer_id"),
        )

    def _headers(self):
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "developer-token": self.developer_token,
            "Content-Type": "application/json",
        }
        if self.login_customer_id:
            headers["login-customer-id"] = self.login_customer_id
        return headers

    def _post(self, url: str, payload: dict) -> dict:
        response = requests.post(url, headers=self._headers(), json=payload, timeout=REQUEST_TIMEOUT_SECONDS)
        if response.status_code != 200:
            raise GoogleAdsApiError(f"API error {response.status_code}: {response.text}")
        return response.json()

    def iter_search(self, query: str) -> Iterator[dict]:
        """Execute GAQL query, yielding result rows one page at a time."""
        url = f"{self.base_url}/customers/{self.customer_id}/googleAds:search"
        page_token = None

        while True:
            payload = {"query": query}
            if page_token:
                payload["pageToken"] = page_token

            data = self._post(url, payload)
            for row in data.get("results", []):
                yield row

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def search(self, query: str) -> list:
        """Execute GAQL query and return all results."""
        return list(self.iter_search(query))

    def mutate(self, service: str, operations: list) -> dict:
        """Execute operations against a single service, e.g. 'sharedSets'."""
        url = f"{self.base_url}/customers/{self.customer_id}/{service}:mutate"
        return self._post(url, {"operations": operations})

    def resource(self, collection: str, resource_id) -> str:
        """Build a resource name like customers/123/adGroups/456."""
        return f"customers/{self.customer_id}/{collection}/{resource_id}"
