from rsvp_api.config.settings import settings
from rsvp_api.email_service.base import EmailServiceBase, OutgoingEmail
from rsvp_api.email_service.email_logger import SQLEmailLogger
from rsvp_api.email_service.resend_service import ResendEmailService
from rsvp_api.email_service.smtp_service import SMTPEmailService
from rsvp_api.email_service.templates import EmailTemplates, merge_placeholders


def get_email_service() -> EmailServiceBase:
    """Resend when an API key is configured, plain SMTP otherwise."""
    if settings.resend_api_key:
        return ResendEmailService(config=settings, email_logger=SQLEmailLogger())
    return SMTPEmailService(config=settings, email_logger=SQLEmailLogger())


__all__ = [
    "EmailServiceBase",
    "EmailTemplates",
    "OutgoingEmail",
    "get_email_service",
    "merge_placeholders",
]
