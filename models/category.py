"""Category model for transaction categorization."""

from dataclasses import dataclass


@dataclass
class Category:
    """Represents a user-defined transaction category.

    Transactions reference categories by ``name``; the id only identifies
    the configuration entry.

    Attributes:
        id: Unique identifier, e.g. "cat-1".
        name: Category name, unique per user.
        icon: Emoji shown next to the name.
        is_visible: Whether the category is offered when recording transactions.
    """

    id: str
    name: str
    icon: str
    is_visible: bool = True

    def to_dict(self) -> dict:
        """Convert category to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "isVisible": self.is_visible,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            icon=data.get("icon", ""),
            is_visible=bool(data.get("isVisible", True)),
        )
