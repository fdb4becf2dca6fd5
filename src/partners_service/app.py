import logging

from fastapi import FastAPI, Header, HTTPException, Response, status

from src.partners_service.pages import (
    ChannelPartnerRepository,
    ChannelPartnersPage,
    NoOpChannelPartnerRepository,
    render_channel_partners_page,
)
from src.shared.auth import AuthProvider, User, bearer_token, resolve_auth_context
from src.shared.exceptions import AuthError


logger = logging.getLogger(__name__)


class AnonymousAuthProvider:
    """AuthProvider that recognises no session at all."""

    def get_user(self, access_token: str) -> User | None:
        return None


def create_app(
    auth_provider: AuthProvider | None = None,
    partner_repository: ChannelPartnerRepository | None = None,
) -> FastAPI:
    if auth_provider is None:
        auth_provider = AnonymousAuthProvider()
    if partner_repository is None:
        partner_repository = NoOpChannelPartnerRepository()

    app = FastAPI(title="Channel Partners Service")

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/channel-partners", response_model=ChannelPartnersPage)
    def get_channel_partners(
        response: Response,
        authorization: str | None = Header(default=None),
    ) -> ChannelPartnersPage:
        try:
            auth = resolve_auth_context(auth_provider, bearer_token(authorization))
        except AuthError as e:
            logger.error("Could not resolve session: %s", e)
            raise HTTPException(status_code=503, detail="Service unavailable")

        page = render_channel_partners_page(auth, partner_repository)
        if page.view == "login":
            response.status_code = status.HTTP_401_UNAUTHORIZED
        return page

    return app
