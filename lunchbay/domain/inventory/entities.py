"""Store-independent records for categories and inventory items."""
from dataclasses import dataclass, fields as dataclass_fields
from datetime import date, datetime
import enum
from typing import Any, Dict, Optional

from lunchbay.core.exceptions import ValidationError
from lunchbay.domain.inventory.status import ItemStatus


class ItemCondition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Item:
    id: int
    name: str
    category_id: int
    category_name: str
    quantity: int
    unit: str
    expiration_date: date
    condition: ItemCondition
    notes: Optional[str] = None
    category_description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Derived on read, never persisted
    status: Optional[ItemStatus] = None
    days_until_expiry: Optional[int] = None

    def user_fields(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category_name,
            "quantity": self.quantity,
            "unit": self.unit,
            "expiration_date": self.expiration_date,
            "condition": self.condition,
            "notes": self.notes,
        }


REQUIRED_ITEM_FIELDS = ("name", "category", "quantity", "unit", "expiration_date", "condition")


@dataclass(frozen=True)
class ItemFields:
    """User-supplied item fields for create and full-replace update.

    Instances are always valid: the checks run on construction, so a store
    never receives a negative quantity or an unknown condition.
    """

    name: str
    category: str
    quantity: int
    unit: str
    expiration_date: date
    condition: ItemCondition
    notes: Optional[str] = None

    def __post_init__(self):
        for name in ("name", "category", "unit"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(message=f"Invalid {name}", details={"field": name})

        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(message="Quantity must be a whole number", details={"field": "quantity"})
        if self.quantity < 0:
            raise ValidationError(message="Quantity must be zero or greater", details={"field": "quantity"})

        if not isinstance(self.condition, ItemCondition):
            raise _invalid_condition(self.condition)

        # datetime is a date subclass; only calendar dates are stored
        if isinstance(self.expiration_date, datetime) or not isinstance(self.expiration_date, date):
            raise ValidationError(message="Invalid expiration_date", details={"field": "expiration_date"})

        if self.notes is not None and not isinstance(self.notes, str):
            raise ValidationError(message="Invalid notes", details={"field": "notes"})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemFields":
        missing = [
            name for name in REQUIRED_ITEM_FIELDS
            if data.get(name) is None or (isinstance(data.get(name), str) and not data[name].strip())
        ]
        if missing:
            raise ValidationError(
                message=f"Missing required fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )

        known = {f.name for f in dataclass_fields(cls)}
        values = {k: v for k, v in data.items() if k in known}

        for name in ("name", "category", "unit"):
            if isinstance(values[name], str):
                values[name] = values[name].strip()
        if isinstance(values["category"], str):
            values["category"] = values["category"].lower()

        if isinstance(values.get("notes"), str) and not values["notes"].strip():
            values["notes"] = None

        try:
            values["condition"] = ItemCondition(values["condition"])
        except ValueError:
            raise _invalid_condition(values["condition"])

        expiration_date = values["expiration_date"]
        if isinstance(expiration_date, datetime):
            values["expiration_date"] = expiration_date.date()
        elif isinstance(expiration_date, str):
            try:
                values["expiration_date"] = date.fromisoformat(expiration_date)
            except ValueError:
                raise ValidationError(
                    message="Invalid expiration_date format. Use YYYY-MM-DD",
                    details={"field": "expiration_date"},
                )

        return cls(**values)


def _invalid_condition(value: Any) -> ValidationError:
    return ValidationError(
        message=f"Invalid condition: {value}",
        details={"field": "condition", "allowed": [c.value for c in ItemCondition]},
    )
