from __future__ import annotations

from typing import Protocol

from app.domain.entities import EnquiryEmail


class EmailPort(Protocol):
    async def send(self, email: EnquiryEmail) -> None:
        """Hand the message to the provider. Raises EmailDispatchError."""

    async def aclose(self) -> None:
        """Release any resources owned by the adapter."""
