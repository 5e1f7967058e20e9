"""
Form state for adding a tracked position.
Collects keyed field edits, validates them and forwards a complete
Position to the store.
"""

from typing import Any, Dict
from loguru import logger

from ..errors import ValidationError
from ..utils.validation_utilities import (
    validate_non_negative_number,
    validate_positive_number,
    validate_ticker,
)
from .models import Position
from .portfolio_storage import PortfolioStorage

REQUIRED_FIELDS = ("ticker", "averageBuyPrice", "targetEntry", "targetExit")
OPTIONAL_FIELDS = ("quantity",)

FIELD_ALIASES = {
    "average_buy_price": "averageBuyPrice",
    "target_entry": "targetEntry",
    "target_exit": "targetExit",
}

FIELD_LABELS = {
    "ticker": "Stock Ticker",
    "quantity": "Quantity",
    "averageBuyPrice": "Average Buy Price",
    "targetEntry": "Target Entry Price",
    "targetExit": "Target Exit Price",
}


class PositionForm:
    """Form for entering a new position"""

    def __init__(self):
        self.fields: Dict[str, Any] = {}
        self.clear()

    def clear(self) -> None:
        """Reset every field to empty"""
        self.fields = {name: "" for name in REQUIRED_FIELDS + OPTIONAL_FIELDS}

    def set_field(self, name: str, value: Any) -> None:
        """
        Apply a keyed field edit.

        Raises:
            ValidationError: If the field name is unknown
        """
        key = FIELD_ALIASES.get(name, name)
        if key not in self.fields:
            raise ValidationError(f"Unknown field: {name}", field=name)
        self.fields[key] = "" if value is None else value

    def update(self, **values: Any) -> None:
        """Apply several field edits at once"""
        for name, value in values.items():
            self.set_field(name, value)

    def validate(self) -> Position:
        """
        Build a Position from the current fields.

        Raises:
            ValidationError: If a required field is empty or not a positive
                number, or quantity is negative
        """
        ticker = str(self.fields["ticker"]).strip()
        if not ticker:
            raise ValidationError("Please fill in all fields: Stock Ticker is empty", field="ticker")
        is_valid, error = validate_ticker(ticker)
        if not is_valid:
            raise ValidationError(error, field="ticker")

        numbers = {}
        for name in REQUIRED_FIELDS[1:]:
            raw = self.fields[name]
            label = FIELD_LABELS[name]
            if raw == "" or raw is None:
                raise ValidationError(f"Please fill in all fields: {label} is empty", field=name)
            is_valid, error = validate_positive_number(raw)
            if not is_valid:
                raise ValidationError(f"{label}: {error}", field=name)
            numbers[name] = float(raw)

        quantity = self.fields["quantity"]
        if quantity == "" or quantity is None:
            quantity_value = 0.0
        else:
            is_valid, error = validate_non_negative_number(quantity)
            if not is_valid:
                raise ValidationError(f"{FIELD_LABELS['quantity']}: {error}", field="quantity")
            quantity_value = float(quantity)

        return Position(
            ticker=ticker,
            average_buy_price=numbers["averageBuyPrice"],
            target_entry=numbers["targetEntry"],
            target_exit=numbers["targetExit"],
            quantity=quantity_value,
        )

    async def submit(self, store: PortfolioStorage) -> Position:
        """
        Validate, persist and clear the form.

        Nothing is written and the fields are kept when validation or the
        store write fails.

        Returns:
            The stored position
        """
        try:
            position = self.validate()
        except ValidationError as e:
            logger.info(f"Rejected portfolio entry: {e.message}")
            raise

        await store.add_entry(position)
        self.clear()
        return position


async def submit_position(store: PortfolioStorage, **values: Any) -> Position:
    """Fill a fresh form with ``values`` and submit it"""
    form = PositionForm()
    form.update(**values)
    return await form.submit(store)
