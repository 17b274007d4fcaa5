"""User container holding per-user configuration."""

from dataclasses import dataclass, field
from typing import List, Optional

from models.account import Account
from models.category import Category


DEFAULT_CATEGORIES = [
    Category("cat-1", "Food", "🍔"),
    Category("cat-2", "Transport", "🚗"),
    Category("cat-3", "Leisure", "☕"),
    Category("cat-4", "Housing", "🏠"),
    Category("cat-5", "Health", "💊"),
    Category("cat-6", "Education", "🎓"),
    Category("cat-7", "Groceries", "🛒"),
    Category("cat-8", "Subscriptions", "📱"),
    Category("cat-9", "Bills", "⚡"),
    Category("cat-10", "Shopping", "🛍️"),
    Category("cat-11", "Investments", "📈"),
    Category("cat-12", "Taxes and fees", "📄"),
    Category("cat-13", "Income", "💼"),
    Category("cat-14", "Other", "🏷️"),
]

DEFAULT_ACCOUNTS = [
    Account("acc1", "Nubank", "bank"),
    Account("acc2", "Itaú Personalité", "bank"),
    Account("acc3", "Visa Infinite", "credit_card"),
    Account("acc4", "Main Pix key", "pix"),
    Account("acc5", "Cash", "cash"),
]


@dataclass
class User:
    """A user and the accounts/categories they configured.

    Attributes:
        id: Unique identifier.
        name: Display name.
        username: Login handle, unique across users.
        categories: Category configuration, referenced by name from transactions.
        accounts: Accounts transactions can be booked against.
    """

    id: str
    name: str
    username: str
    categories: List[Category] = field(default_factory=list)
    accounts: List[Account] = field(default_factory=list)
    email: Optional[str] = None
    phone: Optional[str] = None

    def find_account(self, account_id: str) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def visible_categories(self) -> List[Category]:
        return [c for c in self.categories if c.is_visible]

    def to_dict(self) -> dict:
        """Convert user to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "phone": self.phone,
            "categories": [c.to_dict() for c in self.categories],
            "accounts": [a.to_dict() for a in self.accounts],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            username=data["username"],
            categories=[Category.from_dict(c) for c in data.get("categories", [])],
            accounts=[Account.from_dict(a) for a in data.get("accounts", [])],
            email=data.get("email"),
            phone=data.get("phone"),
        )
