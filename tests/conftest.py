import os
import sys
import uuid
from datetime import date
from pathlib import Path
from typing import List, Optional

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

TEST_DB = ROOT_DIR / "test_agate.db"

os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB}"
os.environ["AI_API_KEY"] = ""  # mock mode unless a test injects a provider
os.environ["JWT_SECRET_KEY"] = "test-secret"

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.ai.base_provider import AIProvider  # noqa: E402
from app.ai.generator import TextGenerator, get_text_generator  # noqa: E402
from app.database import engine, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.campaign_models import (  # noqa: E402
    Advert,
    AdvertStatus,
    BudgetLine,
    Campaign,
    CampaignStatus,
    Client,
    ConceptNote,
)

USER_ID = uuid.UUID("11111111-2222-3333-4444-555555555555")


class FakeProvider(AIProvider):
    """Records prompts and replays a canned answer or error."""

    name = "fake"

    def __init__(self, text: str = "{}", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def is_available(self) -> bool:
        return True

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(engine)
    init_db()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_campaign():
    """Campaign with budget 1000 / cost 250, 4 adverts (1 completed), 2 budget lines."""
    with Session(engine) as session:
        client = Client(name="Acme Foods")
        session.add(client)
        session.flush()
        campaign = Campaign(
            client_id=client.id,
            title="Summer Launch",
            description="Launch of the summer range",
            status=CampaignStatus.ACTIVE,
            start_date=date(2026, 6, 1),
            end_date=date(2026, 8, 31),
            estimated_budget=1000.0,
            actual_cost=250.0,
        )
        session.add(campaign)
        session.flush()
        for i, status in enumerate(
            [AdvertStatus.COMPLETED, AdvertStatus.BACKLOG, AdvertStatus.READY, AdvertStatus.SCHEDULED]
        ):
            session.add(Advert(campaign_id=campaign.id, title=f"Advert {i}", channel="Instagram", status=status))
        session.add(BudgetLine(campaign_id=campaign.id, item="Shoot", amount=150.0))
        session.add(BudgetLine(campaign_id=campaign.id, item="Media", amount=100.0, type="Actual"))
        note = ConceptNote(
            campaign_id=campaign.id,
            title="Sunny picnic",
            content="Families sharing a picnic in the park",
            tags=["summer", "family"],
        )
        session.add(note)
        session.commit()
        return {"campaign_id": campaign.id, "concept_note_id": note.id}


@pytest.fixture
def auth_headers():
    token = jwt.encode({"sub": str(USER_ID)}, "test-secret", algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api_client(auth_headers):
    with TestClient(app) as client:
        client.headers.update(auth_headers)
        yield client


@pytest.fixture
def use_provider():
    """Route the API through a FakeProvider instead of mock mode."""

    def _install(provider: FakeProvider) -> FakeProvider:
        app.dependency_overrides[get_text_generator] = lambda: TextGenerator(provider)
        return provider

    return _install
