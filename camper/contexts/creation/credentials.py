"""
Google Ads API credential providers.

Credentials are fetched once per creation run. A provider that cannot produce
a complete set of credentials raises CredentialRetrievalError, which aborts the
run before any job or campaign is touched.
"""

import json
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from camper.exceptions import CredentialRetrievalError

load_dotenv()
CAMPER_CREDENTIALS_SECRET = os.getenv("CAMPER_CREDENTIALS_SECRET", "camper-googleads-oauth-credentials")
AWS_REGION = os.getenv("AWS_REGION", "ap-southeast-2")

REQUIRED_FIELDS = ("client_id", "client_secret", "developer_token", "refresh_token")

# Environment variable for each credential field
ENV_VARS = {
    "client_id": "GOOGLE_ADS_CLIENT_ID",
    "client_secret": "GOOGLE_ADS_CLIENT_SECRET",
    "developer_token": "GOOGLE_ADS_DEVELOPER_TOKEN",
    "refresh_token": "GOOGLE_ADS_REFRESH_TOKEN",
    "login_customer_id": "GOOGLE_ADS_LOGIN_CUSTOMER_ID",
}


@dataclass(frozen=True)
class Credentials:
    """OAuth credentials for the Google Ads API."""

    client_id: str
    client_secret: str
    developer_token: str
    refresh_token: str
    login_customer_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: dict[str, Any], source: str) -> "Credentials":
        """
        Build credentials from a snake_case mapping.

        Raises:
            CredentialRetrievalError: If a required field is missing or empty
        """
        missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
        if missing:
            raise CredentialRetrievalError(f"{source} is missing credential fields: {missing}")

        login_customer_id = values.get("login_customer_id")
        return cls(
            client_id=str(values["client_id"]),
            client_secret=str(values["client_secret"]),
            developer_token=str(values["developer_token"]),
            refresh_token=str(values["refresh_token"]),
            login_customer_id=str(login_customer_id).replace("-", "") if login_customer_id else None,
        )


class CredentialProvider(ABC):
    """Abstract source of Google Ads API credentials."""

    @abstractmethod
    def get_credentials(self) -> Credentials:
        """Return credentials or raise CredentialRetrievalError."""
        pass


class EnvironmentCredentialProvider(CredentialProvider):
    """Reads GOOGLE_ADS_* variables (from the environment or .env)."""

    def get_credentials(self) -> Credentials:
        values = {name: os.getenv(env_var) for name, env_var in ENV_VARS.items()}
        return Credentials.from_mapping(values, source="Environment")


class SecretsManagerCredentialProvider(CredentialProvider):
    """
    Reads a JSON secret from AWS Secrets Manager.

    The secret holds the snake_case fields of Credentials, e.g.
    {"client_id": "...", "client_secret": "...", "developer_token": "...",
     "refresh_token": "...", "login_customer_id": "123-456-7890"}
    """

    def __init__(self, secret_id: str = None, region: str = None, client=None):
        self.secret_id = secret_id or CAMPER_CREDENTIALS_SECRET
        self.region = region or AWS_REGION
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client

        # Lazy import - boto3 is only needed when secrets come from AWS
        try:
            import boto3
        except ImportError:
            raise ImportError("boto3 package required. Install with: pip install boto3")

        self._client = boto3.client("secretsmanager", region_name=self.region)
        return self._client

    def get_credentials(self) -> Credentials:
        client = self._get_client()
        try:
            response = client.get_secret_value(SecretId=self.secret_id)
        except Exception as e:
            raise CredentialRetrievalError(
                f"Could not read secret {self.secret_id}: {e}"
            ) from e

        try:
            values = json.loads(response["SecretString"])
        except (KeyError, TypeError, json.JSONDecodeError) as e:
            raise CredentialRetrievalError(
                f"Secret {self.secret_id} does not hold a JSON string"
            ) from e

        return Credentials.from_mapping(values, source=f"Secret {self.secret_id}")
