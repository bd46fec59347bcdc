"""Remote API clients."""

from golden_ticket.clients.api_client import GoldenTicketApi

__all__ = ["GoldenTicketApi"]
