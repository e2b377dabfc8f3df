"""Device-token registration management."""

from collections import Counter
from typing import Any

import structlog
from protean.exceptions import ObjectNotFoundError
from pydantic import BaseModel, ConfigDict, Field

from notifications.notification.notification import NotificationType
from notifications.notification.repository import page_count
from notifications.notification.schemas import PageMeta, validate_input
from notifications.token.repository import UserTokenRepository
from notifications.token.user_token import DeviceDetails, UserToken

logger = structlog.get_logger(__name__)


class TokenRegistration(BaseModel):
    token: str = Field(..., min_length=1)
    device_info: DeviceDetails | None = None


class TokenQuery(BaseModel):
    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    user_id: str | None = None
    type: NotificationType | None = None
    platform: str | None = None


class TokenPage(BaseModel):
    items: list[Any]
    meta: PageMeta


def _not_found(user_id: str) -> ObjectNotFoundError:
    return ObjectNotFoundError({"_entity": f"Tokens for user with ID {user_id} not found"})


class TokensService:
    def __init__(self, repository: UserTokenRepository) -> None:
        self.repository = repository

    async def create(
        self,
        user_id: str,
        token: str,
        device_info: DeviceDetails | dict | None = None,
        type: NotificationType | str = NotificationType.SYSTEM,
    ) -> UserToken:
        """Register ``token`` for the user, creating the record on first use."""
        registration = validate_input(TokenRegistration, {"token": token, "device_info": device_info})

        user_token = await self.repository.get_user_token(user_id)
        if user_token is None:
            user_token = UserToken(user_id=user_id, type=NotificationType(type).value)
        user_token.add_token(registration.token, registration.device_info)

        await self.repository.save(user_token)
        logger.info("Device token registered", user_id=user_id, token_count=len(user_token.tokens))
        return user_token

    async def find_all(self, query: TokenQuery | dict[str, Any] | None = None) -> TokenPage:
        query = validate_input(TokenQuery, query or {})

        items, total = await self.repository.query(
            user_id=query.user_id,
            type=query.type,
            platform=query.platform,
            offset=(query.page - 1) * query.limit,
            limit=query.limit,
        )
        return TokenPage(
            items=items,
            meta=PageMeta(
                total_items=total,
                item_count=len(items),
                items_per_page=query.limit,
                total_pages=page_count(total, query.limit),
                current_page=query.page,
            ),
        )

    async def find_one(self, user_id: str) -> UserToken:
        user_token = await self.repository.get_user_token(user_id)
        if user_token is None:
            raise _not_found(user_id)
        return user_token

    async def has_tokens(self, user_id: str) -> bool:
        user_token = await self.repository.get_user_token(user_id)
        return bool(user_token and user_token.tokens)

    async def update(
        self,
        user_id: str,
        type: NotificationType | str | None = None,
        add_tokens: list[TokenRegistration | dict] | None = None,
        remove_tokens: list[str] | None = None,
    ) -> UserToken:
        user_token = await self.find_one(user_id)

        if type:
            user_token.type = NotificationType(type).value
        for item in add_tokens or []:
            registration = validate_input(TokenRegistration, item)
            user_token.add_token(registration.token, registration.device_info)
        if remove_tokens:
            user_token.remove_tokens(remove_tokens)

        await self.repository.save(user_token)
        return user_token

    async def remove(self, user_id: str) -> dict[str, bool]:
        await self.find_one(user_id)
        await self.repository.delete(user_id)
        logger.info("Device tokens removed", user_id=user_id)
        return {"deleted": True}

    async def remove_tokens(self, user_id: str, tokens: list[str]) -> UserToken:
        user_token = await self.find_one(user_id)
        user_token.remove_tokens(tokens)
        await self.repository.save(user_token)
        return user_token

    async def get_statistics(self) -> dict[str, Any]:
        records = await self.repository.list_all()
        devices = [d for r in records for d in r.device_info]
        by_platform = Counter(d.platform or "unknown" for d in devices)
        by_browser = Counter(d.browser or "unknown" for d in devices)
        return {
            "user_count": sum(1 for r in records if r.tokens),
            "token_count": sum(len(r.tokens) for r in records),
            "by_platform": [{"platform": k, "count": v} for k, v in by_platform.most_common()],
            "by_browser": [{"browser": k, "count": v} for k, v in by_browser.most_common()],
        }
