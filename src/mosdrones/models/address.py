"""Address entity."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    """Structured postal location.

    ``id`` is ``None`` until the address has been persisted.
    """

    street: str
    city: str
    state: str
    postal_code: str
    unit: str | None = None
    country: str = "US"
    id: int | None = None

    def one_line(self) -> str:
        """Return the address formatted on a single line."""
        street = f"{self.street} {self.unit}" if self.unit else self.street
        return f"{street}, {self.city}, {self.state} {self.postal_code}, {self.country}"
