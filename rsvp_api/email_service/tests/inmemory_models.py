"""In-memory email log for testing - no database required."""

from uuid import uuid4

from rsvp_api.email_service.email_logger import EmailLogger


class RecordingEmailLogger(EmailLogger):
    def __init__(self):
        self.attempts = []
        self.successes = []
        self.failures = []

    async def log_email_attempt(self, email):
        log_uuid = uuid4()
        self.attempts.append((log_uuid, email))
        return log_uuid

    async def log_email_success(self, log_uuid, provider_email_id):
        self.successes.append((log_uuid, provider_email_id))

    async def log_email_failure(self, log_uuid, error_message):
        self.failures.append((log_uuid, error_message))
