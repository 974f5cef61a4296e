"""
Creation defaults for CAMPER.

Loads camper/config/creation_defaults.yaml (or an alternate YAML with the same
structure) into a frozen CreationSettings. These are the fixed settings every
created campaign shares: targeting criteria, channel, bidding, network
settings and the inter-campaign rate limit.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "creation_defaults.yaml"
CREATION_SETTINGS_PATH = Path(os.getenv("CREATION_SETTINGS_PATH", str(DEFAULT_SETTINGS_PATH)))


@dataclass(frozen=True)
class CreationSettings:
    """Fixed settings applied to every created campaign."""

    budget_name_suffix: str = " - Budget"
    budget_delivery_method: str = "STANDARD"
    campaign_status: str = "PAUSED"
    advertising_channel_type: str = "SEARCH"
    bidding_strategy: str = "MAXIMIZE_CLICKS"
    target_google_search: bool = True
    target_search_network: bool = True
    target_content_network: bool = False
    positive_geo_target_type: str = "PRESENCE_OR_INTEREST"
    negative_geo_target_type: str = "PRESENCE"
    location: str = "geoTargetConstants/2554"
    language: str = "languageConstants/1000"
    inter_campaign_delay: float = 2.0

    def budget_name(self, campaign_name: str) -> str:
        return f"{campaign_name}{self.budget_name_suffix}"


def load_creation_settings(config_path: Path = None) -> CreationSettings:
    """
    Load creation settings from YAML.

    Args:
        config_path: Optional path to a settings file (defaults to CREATION_SETTINGS_PATH)

    Returns:
        CreationSettings

    Raises:
        ValueError: If the inter-campaign delay is negative
    """
    if config_path is None:
        config_path = CREATION_SETTINGS_PATH

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)

    budget = config.get("budget", {})
    campaign = config.get("campaign", {})
    network = campaign.get("network_settings", {})
    geo_type = campaign.get("geo_target_type", {})
    targeting = config.get("targeting", {})
    rate_limit = config.get("rate_limit", {})

    defaults = CreationSettings()
    settings = CreationSettings(
        budget_name_suffix=budget.get("name_suffix", defaults.budget_name_suffix),
        budget_delivery_method=budget.get("delivery_method", defaults.budget_delivery_method),
        campaign_status=campaign.get("status", defaults.campaign_status),
        advertising_channel_type=campaign.get(
            "advertising_channel_type", defaults.advertising_channel_type
        ),
        bidding_strategy=campaign.get("bidding_strategy", defaults.bidding_strategy),
        target_google_search=network.get("target_google_search", defaults.target_google_search),
        target_search_network=network.get(
            "target_search_network", defaults.target_search_network
        ),
        target_content_network=network.get(
            "target_content_network", defaults.target_content_network
        ),
        positive_geo_target_type=geo_type.get("positive", defaults.positive_geo_target_type),
        negative_geo_target_type=geo_type.get("negative", defaults.negative_geo_target_type),
        location=targeting.get("location", defaults.location),
        language=targeting.get("language", defaults.language),
        inter_campaign_delay=float(
            rate_limit.get("inter_campaign_delay", defaults.inter_campaign_delay)
        ),
    )

    if settings.inter_campaign_delay < 0:
        raise ValueError(
            f"inter_campaign_delay must not be negative, got: {settings.inter_campaign_delay}"
        )
    return settings
