from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    to_address: str
    from_address: str
    subject: str
    html_body: str
    text_body: str | None = None
    email_type: str = "custom"
    guest_id: str | None = None


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_email(
        self,
        to_address: str,
        subject: str,
        html_body: str,
        text_body: str | None = None,
        email_type: str = "custom",
        guest_id: str | None = None,
    ) -> str | None:
        """Send one email. Returns the provider id when the provider gives one."""
        pass
