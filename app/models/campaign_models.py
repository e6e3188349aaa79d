"""Agate AI — Campaign-side tables read by the suggestion pipeline.

Clients, campaigns, adverts, budget lines and concept notes are owned by the
CMS; this service only reads them to build prompt context.
"""

import uuid
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CampaignStatus:
    PLANNED = "planned"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AdvertStatus:
    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Client(SQLModel, table=True):
    """Agency client owning one or more campaigns."""

    __tablename__ = "clients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str
    contact_email: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    campaigns: List["Campaign"] = Relationship(back_populates="client")


class Campaign(SQLModel, table=True):
    """Top-level unit of agency work, with budget and date range."""

    __tablename__ = "campaigns"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    client_id: uuid.UUID = Field(foreign_key="clients.id", index=True)
    title: str
    description: Optional[str] = None
    status: str = CampaignStatus.PLANNED
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_budget: float = 0.0
    actual_cost: float = 0.0  # rolled up from budget lines by the CMS
    created_at: datetime = Field(default_factory=_utcnow)

    client: Optional[Client] = Relationship(back_populates="campaigns")
    adverts: List["Advert"] = Relationship(back_populates="campaign")
    budget_lines: List["BudgetLine"] = Relationship(back_populates="campaign")
    concept_notes: List["ConceptNote"] = Relationship(back_populates="campaign")


class Advert(SQLModel, table=True):
    """A scheduled creative unit within a campaign."""

    __tablename__ = "adverts"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    campaign_id: uuid.UUID = Field(foreign_key="campaigns.id", index=True)
    title: str
    channel: str = ""  # Instagram, TV, Billboard, ...
    status: str = AdvertStatus.BACKLOG
    cost: float = 0.0

    campaign: Optional[Campaign] = Relationship(back_populates="adverts")


class BudgetLine(SQLModel, table=True):
    """Planned or actual financial entry for a campaign (optionally an advert)."""

    __tablename__ = "budget_lines"

    id: Optional[int] = Field(default=None, primary_key=True)
    campaign_id: uuid.UUID = Field(foreign_key="campaigns.id", index=True)
    advert_id: Optional[uuid.UUID] = Field(default=None, foreign_key="adverts.id")
    item: str
    category: str = "Other"  # Creative | Media | Production | Talent | Other
    type: str = "Planned"  # Planned | Actual
    amount: float = 0.0
    planned_amount: float = 0.0

    campaign: Optional[Campaign] = Relationship(back_populates="budget_lines")


class ConceptNote(SQLModel, table=True):
    """Freeform creative-idea record authored by staff."""

    __tablename__ = "concept_notes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    campaign_id: uuid.UUID = Field(foreign_key="campaigns.id", index=True)
    title: str
    content: str
    status: str = "Ideas"  # Ideas | InReview | Approved | Archived
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    campaign: Optional[Campaign] = Relationship(back_populates="concept_notes")
