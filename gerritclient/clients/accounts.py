"""Accounts resource client and the cached account directory."""

from typing import TYPE_CHECKING, Any

from gerritclient.exceptions import GerritError, MetadataError
from gerritclient.logging import get_logger
from gerritclient.options import build_query_string
from gerritclient.types.accounts import AccountInfo

if TYPE_CHECKING:
    from gerritclient.transport import HTTPTransport

logger = get_logger()


def parse_account(data: dict[str, Any]) -> AccountInfo:
    """Parse an AccountInfo object. Only _account_id is required."""
    if "_account_id" not in data:
        raise MetadataError("_account_id", "account")
    return AccountInfo(
        account_id=data["_account_id"],
        name=data.get("name"),
        username=data.get("username"),
        email=data.get("email"),
        display_name=data.get("display_name"),
        more_accounts=data.get("_more_accounts", False),
    )


class AccountsClient:
    """Client for account queries."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def list_active(self) -> list[AccountInfo]:
        """
        List all active accounts with details.

        Follows the server's paging until the last page, which is the one
        whose final entry does not carry _more_accounts.
        """
        accounts: list[AccountInfo] = []
        while True:
            query = build_query_string(
                [("q", "is:active"), ("o", "DETAILS"), ("S", str(len(accounts)))]
            )
            page = self.transport.sync("GET", f"/accounts/{query}") or []
            parsed = [parse_account(entry) for entry in page]
            accounts.extend(parsed)
            if not parsed or not parsed[-1].more_accounts:
                return accounts

    def get_self(self) -> AccountInfo:
        """Return the account the client is authenticated as."""
        return parse_account(self.transport.sync("GET", "/accounts/self"))


class AccountDirectory:
    """
    Process-scoped cache of active accounts.

    Backs reviewer/assignee selection and owner username lookup. Loaded on
    first use; call refresh() to reload or invalidate() to drop it. A failed
    load yields an empty list instead of raising, since nothing in the
    directory is needed to complete a request. Failed loads are not cached.
    """

    def __init__(self, accounts: AccountsClient) -> None:
        self._client = accounts
        self._accounts: list[AccountInfo] | None = None

    @property
    def loaded(self) -> bool:
        return self._accounts is not None

    def accounts(self) -> list[AccountInfo]:
        if self._accounts is None:
            self._accounts = self._load()
        return self._accounts or []

    def refresh(self) -> list[AccountInfo]:
        self._accounts = self._load()
        return self._accounts or []

    def invalidate(self) -> None:
        self._accounts = None

    def usernames(self) -> list[str]:
        """Usernames of all active accounts, for selection lists."""
        return [a.username for a in self.accounts() if a.username]

    def username_for(self, account_id: int) -> str | None:
        for account in self.accounts():
            if account.account_id == account_id:
                return account.username
        return None

    def _load(self) -> list[AccountInfo] | None:
        try:
            accounts = self._client.list_active()
        except GerritError as e:
            logger.warning("Could not load account directory: %s", e)
            return None
        logger.debug("Loaded %d accounts into directory", len(accounts))
        return accounts
