RESEND_WEBHOOK_URL = "/api/v1/webhooks/resend"
