"""Account-related data models."""

from dataclasses import dataclass


@dataclass
class AccountInfo:
    """A Gerrit account as embedded in changes, messages and labels."""

    account_id: int
    name: str | None = None
    username: str | None = None
    email: str | None = None
    display_name: str | None = None
    more_accounts: bool = False  # set on the last entry of a truncated page

    @property
    def label(self) -> str:
        """Best human-readable name for the account."""
        return (
            self.display_name
            or self.name
            or self.username
            or self.email
            or str(self.account_id)
        )
