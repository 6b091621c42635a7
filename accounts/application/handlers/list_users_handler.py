"""
ListUsersHandler.
"""
from typing import List

from accounts.application.dto.account_dto import UserDTO
from accounts.application.queries.list_users import ListUsersQuery
from accounts.ports.account_repository import AccountRepository


class ListUsersHandler:
    """Handler for ListUsersQuery."""

    def __init__(self, account_repository: AccountRepository):
        self.account_repository = account_repository

    async def handle(self, query: ListUsersQuery) -> List[UserDTO]:
        """Return every account, newest first."""
        accounts = await self.account_repository.list_accounts()
        return [UserDTO.from_account(account) for account in accounts]
