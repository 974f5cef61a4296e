"""
Remote ad-campaign service abstraction.

AdCampaignService is the three-call surface the orchestrator needs from the ad
platform. create_remote_campaign() runs the fixed creation sequence for one
campaign: budget, paused search campaign, location criterion, language
criterion. The first failing step stops the sequence for that campaign and
surfaces as a RemoteServiceError naming the step.

GoogleAdsCampaignService implements the surface with the google-ads SDK.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from camper.contexts.creation.credentials import Credentials
from camper.contexts.creation.settings import CreationSettings
from camper.exceptions import RemoteServiceError

MICROS_PER_UNIT = Decimal(1_000_000)

# Criterion kinds
LOCATION = "location"
LANGUAGE = "language"


def to_micros(amount: Decimal) -> int:
    """Currency amount to integer micros, rounded half-up."""
    return int((Decimal(str(amount)) * MICROS_PER_UNIT).quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class TargetingCriterion:
    """
    A targeting criterion attached to a campaign.

    Attributes:
        kind: LOCATION or LANGUAGE
        resource_name: Constant resource (e.g., "geoTargetConstants/2554")
    """

    kind: str
    resource_name: str


@dataclass(frozen=True)
class RemoteCampaignResult:
    """Resource names produced by a successful creation sequence."""

    budget_ref: str
    campaign_ref: str


class AdCampaignService(ABC):
    """
    Abstract remote ad-campaign service.

    Every method raises RemoteServiceError on failure.
    """

    @abstractmethod
    def create_budget(self, account_id: str, name: str, amount_micros: int) -> str:
        """Create a campaign budget. Returns its resource name."""
        pass

    @abstractmethod
    def create_campaign(self, account_id: str, name: str, budget_ref: str) -> str:
        """Create a campaign using budget_ref. Returns its resource name."""
        pass

    @abstractmethod
    def create_criterion(
        self, account_id: str, campaign_ref: str, criterion: TargetingCriterion
    ) -> None:
        """Attach a targeting criterion to a campaign."""
        pass


def create_remote_campaign(
    service: AdCampaignService,
    account_id: str,
    name: str,
    daily_budget: Decimal,
    settings: CreationSettings,
) -> RemoteCampaignResult:
    """
    Run the creation sequence for one campaign.

    Args:
        service: Remote service to call
        account_id: Customer account the campaign is created in
        name: Campaign name
        daily_budget: Daily budget in account currency
        settings: Fixed creation settings (budget naming, criteria)

    Returns:
        RemoteCampaignResult with the budget and campaign resource names

    Raises:
        RemoteServiceError: From the first failing step; later steps are not run.
            Any other error a step raises is converted to one.
    """
    budget_ref = _run_step(
        "budget",
        lambda: service.create_budget(
            account_id, settings.budget_name(name), to_micros(daily_budget)
        ),
    )
    campaign_ref = _run_step(
        "campaign", lambda: service.create_campaign(account_id, name, budget_ref)
    )
    for criterion in (
        TargetingCriterion(LOCATION, settings.location),
        TargetingCriterion(LANGUAGE, settings.language),
    ):
        _run_step(
            f"{criterion.kind}_criterion",
            lambda: service.create_criterion(account_id, campaign_ref, criterion),
        )
    return RemoteCampaignResult(budget_ref=budget_ref, campaign_ref=campaign_ref)


def _run_step(step: str, call):
    """Run one creation step; every failure surfaces as RemoteServiceError."""
    try:
        return call()
    except RemoteServiceError:
        raise
    except Exception as e:
        # e.g. a gRPC deadline error or an empty mutate response
        raise RemoteServiceError(str(e) or type(e).__name__, step=step) from e


class GoogleAdsCampaignService(AdCampaignService):
    """Google Ads API implementation (google-ads SDK, proto-plus messages)."""

    def __init__(self, client, settings: CreationSettings = None):
        self.client = client
        self.settings = settings or CreationSettings()

    @classmethod
    def from_credentials(
        cls, credentials: Credentials, settings: CreationSettings = None
    ) -> "GoogleAdsCampaignService":
        # Lazy import - google-ads SDK is heavy, only load if this service is used
        try:
            from google.ads.googleads.client import GoogleAdsClient
        except ImportError:
            raise ImportError("google-ads package required. Install with: pip install google-ads")

        config = {
            "developer_token": credentials.developer_token,
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
            "refresh_token": credentials.refresh_token,
            "use_proto_plus": True,
        }
        if credentials.login_customer_id:
            config["login_customer_id"] = credentials.login_customer_id

        return cls(GoogleAdsClient.load_from_dict(config), settings)

    def _mutate(self, step: str, call):
        from google.ads.googleads.errors import GoogleAdsException

        try:
            return call()
        except GoogleAdsException as e:
            messages = [error.message for error in e.failure.errors] or [str(e)]
            raise RemoteServiceError("; ".join(messages), step=step) from e

    @staticmethod
    def _customer_id(account_id: str) -> str:
        return account_id.replace("-", "")

    def create_budget(self, account_id: str, name: str, amount_micros: int) -> str:
        client = self.client
        operation = client.get_type("CampaignBudgetOperation")
        budget = operation.create
        budget.name = name
        budget.amount_micros = amount_micros
        budget.delivery_method = getattr(
            client.enums.BudgetDeliveryMethodEnum, self.settings.budget_delivery_method
        )

        service = client.get_service("CampaignBudgetService")
        response = self._mutate(
            "budget",
            lambda: service.mutate_campaign_budgets(
                customer_id=self._customer_id(account_id), operations=[operation]
            ),
        )
        return response.results[0].resource_name

    def create_campaign(self, account_id: str, name: str, budget_ref: str) -> str:
        client = self.client
        settings = self.settings
        operation = client.get_type("CampaignOperation")
        campaign = operation.create
        campaign.name = name
        campaign.campaign_budget = budget_ref
        campaign.status = getattr(client.enums.CampaignStatusEnum, settings.campaign_status)
        campaign.advertising_channel_type = getattr(
            client.enums.AdvertisingChannelTypeEnum, settings.advertising_channel_type
        )

        if settings.bidding_strategy == "MAXIMIZE_CLICKS":
            # Maximize clicks is the TargetSpend strategy
            client.copy_from(campaign.target_spend, client.get_type("TargetSpend"))
        elif settings.bidding_strategy == "MANUAL_CPC":
            client.copy_from(campaign.manual_cpc, client.get_type("ManualCpc"))
        else:
            raise ValueError(f"Unsupported bidding strategy: {settings.bidding_strategy}")

        campaign.network_settings.target_google_search = settings.target_google_search
        campaign.network_settings.target_search_network = settings.target_search_network
        campaign.network_settings.target_content_network = settings.target_content_network
        campaign.geo_target_type_setting.positive_geo_target_type = getattr(
            client.enums.PositiveGeoTargetTypeEnum, settings.positive_geo_target_type
        )
        campaign.geo_target_type_setting.negative_geo_target_type = getattr(
            client.enums.NegativeGeoTargetTypeEnum, settings.negative_geo_target_type
        )

        service = client.get_service("CampaignService")
        response = self._mutate(
            "campaign",
            lambda: service.mutate_campaigns(
                customer_id=self._customer_id(account_id), operations=[operation]
            ),
        )
        return response.results[0].resource_name

    def create_criterion(
        self, account_id: str, campaign_ref: str, criterion: TargetingCriterion
    ) -> None:
        client = self.client
        operation = client.get_type("CampaignCriterionOperation")
        campaign_criterion = operation.create
        campaign_criterion.campaign = campaign_ref

        if criterion.kind == LOCATION:
            campaign_criterion.location.geo_target_constant = criterion.resource_name
        elif criterion.kind == LANGUAGE:
            campaign_criterion.language.language_constant = criterion.resource_name
        else:
            raise ValueError(f"Unknown criterion kind: {criterion.kind}")

        service = client.get_service("CampaignCriterionService")
        self._mutate(
            f"{criterion.kind}_criterion",
            lambda: service.mutate_campaign_criteria(
                customer_id=self._customer_id(account_id), operations=[operation]
            ),
        )
