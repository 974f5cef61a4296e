"""
HTTP client for the CAMPER backend API.

Two endpoints:
    POST /parse            {"mdContent": ..., "accountId": ...} -> {"jobId", "message", "campaignCount"}
    GET  /status/{job_id}  -> {"job": {...}}

Methods never raise for HTTP or network failures; they return an ApiResponse
whose error distinguishes an unreachable/misconfigured backend from ordinary
request failures. ApiResponse.unwrap() converts a failure into ApiClientError
for callers that prefer exceptions.
"""

import os
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from dotenv import load_dotenv

from camper.contexts.jobs.job_data_structure import CampaignJob
from camper.contexts.progress.logger import _log_debug, _log_warning
from camper.exceptions import ApiClientError

load_dotenv()
DEFAULT_API_URL = "http://localhost:8000"
CAMPER_API_URL = os.getenv("CAMPER_API_URL")

UNREACHABLE_MESSAGE = (
    "Cannot connect to server. Please ensure the backend is deployed and API URL is configured."
)
UNREACHABLE_DETAILS = "Check your .env file for CAMPER_API_URL configuration"

DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ApiError:
    """Error half of an ApiResponse."""

    message: str
    details: Optional[Any] = None
    unreachable: bool = False


@dataclass(frozen=True)
class ApiResponse:
    """Either success with data, or failure with error."""

    success: bool
    data: Optional[Any] = None
    error: Optional[ApiError] = None

    def unwrap(self) -> Any:
        """
        Return data, or raise ApiClientError for a failed response.

        Raises:
            ApiClientError: If success is False
        """
        if self.success:
            return self.data
        raise ApiClientError(
            self.error.message, details=self.error.details, unreachable=self.error.unreachable
        )


class CampaignApiClient:
    """
    Synchronous client for the backend API (httpx).

    Args:
        base_url: API root (defaults to CAMPER_API_URL, else DEFAULT_API_URL)
        timeout: Request timeout in seconds
        auth_token: Optional bearer token
        transport: Optional httpx transport (e.g., httpx.MockTransport in tests)
    """

    def __init__(
        self,
        base_url: str = None,
        timeout: float = DEFAULT_TIMEOUT,
        auth_token: str = None,
        transport: httpx.BaseTransport = None,
    ):
        base_url = base_url or CAMPER_API_URL
        if not base_url:
            _log_warning(f"CAMPER_API_URL not configured, using {DEFAULT_API_URL}")
            base_url = DEFAULT_API_URL

        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url, headers=headers, timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "CampaignApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, default_message: str, **kwargs) -> ApiResponse:
        _log_debug(f"{method} {path}")
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.NetworkError:
            return ApiResponse(
                success=False,
                error=ApiError(UNREACHABLE_MESSAGE, details=UNREACHABLE_DETAILS, unreachable=True),
            )
        except httpx.HTTPStatusError as e:
            body = _json_or_empty(e.response)
            return ApiResponse(
                success=False,
                error=ApiError(body.get("message") or default_message, details=body.get("details")),
            )
        except httpx.HTTPError as e:
            return ApiResponse(success=False, error=ApiError(default_message, details=str(e)))

        return ApiResponse(success=True, data=_json_or_empty(response))

    def parse_file(self, md_content: str, account_id: str) -> ApiResponse:
        """
        Submit a campaign plan.

        Returns:
            ApiResponse whose data is {"jobId": ..., "message": ..., "campaignCount": ...}
        """
        return self._request(
            "POST",
            "/parse",
            "Failed to parse file",
            json={"mdContent": md_content, "accountId": account_id},
        )

    def get_status(self, job_id: str) -> ApiResponse:
        """
        Fetch a job's status.

        Returns:
            ApiResponse whose data is a CampaignJob
        """
        response = self._request("GET", f"/status/{job_id}", "Failed to fetch job status")
        if not response.success:
            return response

        try:
            job = CampaignJob.from_dict(response.data["job"])
        except (KeyError, TypeError, ValueError) as e:
            return ApiResponse(
                success=False,
                error=ApiError("Malformed job status response", details=str(e)),
            )
        return ApiResponse(success=True, data=job)


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
