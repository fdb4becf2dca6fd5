from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel

from src.partners_service.mongo_repository import ChannelPartner
from src.shared.auth import AuthContext


class ChannelPartnerRepository(ABC):
    @abstractmethod
    def list_partners(self) -> list[ChannelPartner]:
        pass


class NoOpChannelPartnerRepository(ChannelPartnerRepository):
    def list_partners(self) -> list[ChannelPartner]:
        return []


class ChannelPartnersPage(BaseModel):
    view: Literal["loading", "login", "content"]
    partners: list[ChannelPartner] = []


def render_channel_partners_page(
    auth: AuthContext,
    repository: ChannelPartnerRepository,
) -> ChannelPartnersPage:
    """Pick what the channel-partners page shows for the given session.

    A spinner while the session is still resolving, the login form when there
    is no user, and the partner list otherwise. The repository is only read
    for a signed-in user.
    """
    if auth.loading:
        return ChannelPartnersPage(view="loading")
    if auth.user is None:
        return ChannelPartnersPage(view="login")
    return ChannelPartnersPage(view="content", partners=repository.list_partners())
