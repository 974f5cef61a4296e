"""
Job data structures for the Jobs context.

A CampaignJob is the persisted record of one submitted campaign plan: the
account it targets and one Campaign per parsed definition, each carrying its
own creation status. Records serialize to plain dicts whose keys match the
status endpoint's wire format (camelCase, money as decimal strings).
"""

import uuid
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Optional

from camper.contexts.intake.campaign_data_structure import CampaignDefinition
from camper.utils.timestamp import expiry_epoch, now_exact

# Job records expire this many days after creation
JOB_TTL_DAYS = 7


class CampaignStatus(str, Enum):
    """Creation status of a single campaign."""

    PENDING = "pending"
    CREATING = "creating"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CampaignStatus.COMPLETED, CampaignStatus.FAILED)


class JobStatus(str, Enum):
    """Overall status of a campaign creation job."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


def campaign_id_for(job_id: str, position: int) -> str:
    """Campaign identifier for the 1-based position within a job."""
    return f"{job_id}-campaign-{position}"


@dataclass
class Campaign:
    """
    One campaign within a job.

    Attributes:
        id: Identifier unique within the job ("{job_id}-campaign-{n}")
        name: Campaign name
        tier: Tier number (1-4)
        daily_budget: Daily budget
        monthly_budget: daily_budget * 30
        status: Creation status
        error: Failure message (only when status is FAILED)
    """

    id: str
    name: str
    tier: int
    daily_budget: Decimal
    monthly_budget: Decimal
    status: CampaignStatus = CampaignStatus.PENDING
    error: Optional[str] = None

    @classmethod
    def from_definition(cls, definition: CampaignDefinition, campaign_id: str) -> "Campaign":
        return cls(
            id=campaign_id,
            name=definition.name,
            tier=definition.tier,
            daily_budget=definition.daily_budget,
            monthly_budget=definition.monthly_budget,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "tier": self.tier,
            "dailyBudget": str(self.daily_budget),
            "monthlyBudget": str(self.monthly_budget),
            "status": self.status.value,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Campaign":
        return cls(
            id=data["id"],
            name=data["name"],
            tier=int(data["tier"]),
            daily_budget=Decimal(str(data["dailyBudget"])),
            monthly_budget=Decimal(str(data["monthlyBudget"])),
            status=CampaignStatus(data["status"]),
            error=data.get("error"),
        )


@dataclass
class CampaignJob:
    """
    A submitted campaign plan and the creation progress of its campaigns.

    Factory methods:
        create(account_id, definitions) - New pending job with pending campaigns
        from_dict(data) - Rebuild from a stored or wire record
    """

    job_id: str
    account_id: str
    status: JobStatus
    campaigns: list[Campaign] = field(default_factory=list)
    created_at: str = ""
    completed_at: Optional[str] = None
    ttl: int = 0

    @classmethod
    def create(
        cls,
        account_id: str,
        definitions: Iterable[CampaignDefinition],
        job_id: Optional[str] = None,
        ttl_days: int = JOB_TTL_DAYS,
    ) -> "CampaignJob":
        """
        Build a new pending job from parsed definitions.

        Args:
            account_id: Ad platform customer account
            definitions: Parsed campaign definitions, in plan order
            job_id: Job identifier (random UUID if omitted)
            ttl_days: Days until the record expires

        Returns:
            CampaignJob with status PENDING and every campaign PENDING
        """
        job_id = job_id or str(uuid.uuid4())
        campaigns = [
            Campaign.from_definition(definition, campaign_id_for(job_id, position))
            for position, definition in enumerate(definitions, start=1)
        ]
        return cls(
            job_id=job_id,
            account_id=account_id,
            status=JobStatus.PENDING,
            campaigns=campaigns,
            created_at=now_exact(),
            ttl=expiry_epoch(ttl_days),
        )

    def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        for campaign in self.campaigns:
            if campaign.id == campaign_id:
                return campaign
        return None

    def campaign_statuses(self) -> list[CampaignStatus]:
        return [campaign.status for campaign in self.campaigns]

    def copy(self) -> "CampaignJob":
        """Deep enough copy: campaigns are copied, values are immutable."""
        return replace(self, campaigns=[replace(c) for c in self.campaigns])

    def to_dict(self) -> dict[str, Any]:
        data = {
            "jobId": self.job_id,
            "accountId": self.account_id,
            "status": self.status.value,
            "campaigns": [campaign.to_dict() for campaign in self.campaigns],
            "createdAt": self.created_at,
            "ttl": self.ttl,
        }
        if self.completed_at is not None:
            data["completedAt"] = self.completed_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CampaignJob":
        return cls(
            job_id=data["jobId"],
            account_id=data["accountId"],
            status=JobStatus(data["status"]),
            campaigns=[Campaign.from_dict(c) for c in data.get("campaigns", [])],
            created_at=data.get("createdAt", ""),
            completed_at=data.get("completedAt"),
            ttl=int(data.get("ttl", 0)),
        )
