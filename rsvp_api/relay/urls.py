SEND_EMAILS_URL = "/send-emails"
RELAY_HEALTH_URL = "/health"
