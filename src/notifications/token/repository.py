"""UserToken persistence, an async facade over the domain repository."""

from protean.utils.globals import current_domain

from notifications.token.user_token import UserToken


class UserTokenRepository:
    @property
    def _repo(self):
        return current_domain.repository_for(UserToken)

    async def get_user_token(self, user_id: str) -> UserToken | None:
        return self._repo.get_or_none(user_id)

    async def save(self, user_token: UserToken) -> UserToken:
        return self._repo.add(user_token)

    async def delete(self, user_id: str) -> None:
        user_token = self._repo.get_or_none(user_id)
        if user_token is not None:
            self._repo._dao.delete(user_token)

    async def query(
        self,
        user_id: str | None = None,
        type: str | None = None,
        platform: str | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[UserToken], int]:
        criteria = {}
        if user_id:
            criteria["user_id"] = user_id
        if type:
            criteria["type"] = type
        if platform:
            criteria["platforms__any"] = [platform]

        results = (
            self._repo._dao.query.filter(**criteria)
            .order_by(["-created_at"])
            .offset(offset)
            .limit(limit)
            .all()
        )
        return results.items, results.total

    async def list_all(self) -> list[UserToken]:
        items, _total = await self.query()
        return items
