"""Shared fixtures: fake collaborators and an isolated job event log."""

import pytest

from camper.contexts.creation.ad_service import AdCampaignService
from camper.contexts.creation.credentials import CredentialProvider, Credentials
from camper.contexts.creation.settings import CreationSettings
from camper.contexts.jobs.job_store import InMemoryJobStore
from camper.exceptions import CredentialRetrievalError, RemoteServiceError
from camper.utils import event_logging

FIXED_COMPLETED_AT = "2026-01-01T00:00:00+00:00"


@pytest.fixture(autouse=True)
def job_events_file(tmp_path, monkeypatch):
    """Send job events to a per-test file instead of outs/logs."""
    events_file = tmp_path / "job_events.log"
    monkeypatch.setattr(event_logging, "JOB_EVENTS_FILE", events_file)
    return events_file


class FakeAdService(AdCampaignService):
    """
    Records every call. fail_at maps a campaign name to the step that fails
    ("budget", "campaign", "location_criterion" or "language_criterion").
    fail_with replaces the RemoteServiceError raised there (e.g. a transport error).
    """

    def __init__(self, fail_at=None, fail_with=None):
        self.fail_at = fail_at or {}
        self.fail_with = fail_with
        self.calls = []
        self._campaign_names = {}

    def _maybe_fail(self, name, step):
        if self.fail_at.get(name) == step:
            if self.fail_with is not None:
                raise self.fail_with
            raise RemoteServiceError(f"{step} rejected for {name}", step=step)

    def create_budget(self, account_id, name, amount_micros):
        campaign_name = name.removesuffix(" - Budget")
        self.calls.append(("budget", account_id, name, amount_micros))
        self._maybe_fail(campaign_name, "budget")
        return f"customers/{account_id}/campaignBudgets/{len(self.calls)}"

    def create_campaign(self, account_id, name, budget_ref):
        self.calls.append(("campaign", account_id, name, budget_ref))
        self._maybe_fail(name, "campaign")
        campaign_ref = f"customers/{account_id}/campaigns/{len(self.calls)}"
        self._campaign_names[campaign_ref] = name
        return campaign_ref

    def create_criterion(self, account_id, campaign_ref, criterion):
        name = self._campaign_names[campaign_ref]
        self.calls.append(("criterion", account_id, campaign_ref, criterion))
        self._maybe_fail(name, f"{criterion.kind}_criterion")


class FakeCredentialProvider(CredentialProvider):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = 0

    def get_credentials(self):
        self.calls += 1
        if self.fail:
            raise CredentialRetrievalError("secret unavailable")
        return Credentials(
            client_id="client-id",
            client_secret="client-secret",
            developer_token="dev-token",
            refresh_token="refresh-token",
        )


@pytest.fixture
def store():
    return InMemoryJobStore()


@pytest.fixture
def settings():
    return CreationSettings()


@pytest.fixture
def ad_service():
    return FakeAdService()


@pytest.fixture
def credential_provider():
    return FakeCredentialProvider()


@pytest.fixture
def make_orchestrator(store, settings, credential_provider):
    """Build an orchestrator around a given fake service; sleeps are recorded, not slept."""
    from camper.contexts.creation.orchestrator import CampaignCreationOrchestrator

    def _make(service, sleeps=None, provider=None):
        recorded = sleeps if sleeps is not None else []
        return CampaignCreationOrchestrator(
            store=store,
            credential_provider=provider or credential_provider,
            service_factory=lambda credentials: service,
            settings=settings,
            sleep=recorded.append,
            clock=lambda: FIXED_COMPLETED_AT,
        )

    return _make


@pytest.fixture
def fake_ad_service_class():
    return FakeAdService


@pytest.fixture
def fake_credential_provider_class():
    return FakeCredentialProvider
