"""
Webhook response schema.
"""
from typing import Optional

from nurture.schemas.base import CamelModel


class WebhookResponse(CamelModel):
    """Acknowledgement returned to the provider."""
    success: bool = True
    message: str = "Webhook processed successfully"
    event: Optional[str] = None
    processed: bool = True
