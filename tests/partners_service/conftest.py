import pytest
from fastapi.testclient import TestClient

from src.partners_service.app import create_app
from src.partners_service.mongo_repository import ChannelPartner
from src.partners_service.pages import ChannelPartnerRepository
from src.shared.auth import User


class FakeChannelPartnerRepository(ChannelPartnerRepository):
    def __init__(self, partners: list[ChannelPartner] | None = None) -> None:
        self.partners = partners or []
        self.calls = 0

    def list_partners(self) -> list[ChannelPartner]:
        self.calls += 1
        return self.partners


class FakeAuthProvider:
    """Accepts exactly one token."""

    def __init__(self, valid_token: str = "user-token") -> None:
        self.valid_token = valid_token

    def get_user(self, access_token: str) -> User | None:
        if access_token == self.valid_token:
            return User(id="user-1", email="ana@example.com")
        return None


@pytest.fixture
def sample_partners() -> list[ChannelPartner]:
    return [
        ChannelPartner(partner_id="p-1", name="Acme Referrals", region="EMEA"),
        ChannelPartner(partner_id="p-2", name="Blue Harbor", contact_email="ops@blueharbor.test"),
    ]


@pytest.fixture
def fake_repository(sample_partners) -> FakeChannelPartnerRepository:
    return FakeChannelPartnerRepository(sample_partners)


@pytest.fixture
def client(fake_repository) -> TestClient:
    app = create_app(auth_provider=FakeAuthProvider(), partner_repository=fake_repository)
    return TestClient(app)
