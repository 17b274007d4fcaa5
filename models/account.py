from dataclasses import dataclass


ACCOUNT_TYPES = ("bank", "credit_card", "cash", "pix")


@dataclass
class Account:
    id: str
    name: str  # human readable, e.g., "Nubank"
    type: str  # one of ACCOUNT_TYPES

    def to_dict(self) -> dict:
        """Convert account to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        return cls(id=str(data["id"]), name=data["name"], type=data["type"])
