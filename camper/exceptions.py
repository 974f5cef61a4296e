"""Custom exceptions shared across CAMPER contexts."""

from typing import Optional


class InvalidDocumentError(ValueError):
    """
    Raised when a submitted campaign plan is rejected before a job is created.

    Attributes:
        reason: User-facing rejection reason (e.g., "file is empty")
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class RemoteServiceError(Exception):
    """
    Raised by an ad service when a single remote call fails.

    Attributes:
        message: Error description reported by the remote platform
        step: Creation step that failed ("budget", "campaign", "location_criterion", ...)
    """

    def __init__(self, message: str, step: Optional[str] = None):
        self.message = message
        self.step = step
        super().__init__(message)


class CredentialRetrievalError(Exception):
    """Raised when API credentials cannot be retrieved. Aborts a creation run."""


class JobStoreError(Exception):
    """Raised when the job store cannot complete an operation."""


class JobNotFoundError(JobStoreError):
    """Raised when a job record does not exist or has expired."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class JobAlreadyClaimedError(JobStoreError):
    """Raised when another worker claimed a pending job first."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job already claimed by another worker: {job_id}")


class ApiClientError(Exception):
    """
    Client-visible API failure.

    Attributes:
        message: User-readable message
        details: Optional extra detail for troubleshooting
        unreachable: True when the backend could not be reached at all
    """

    def __init__(self, message: str, details: Optional[str] = None, unreachable: bool = False):
        self.message = message
        self.details = details
        self.unreachable = unreachable
        super().__init__(message)
