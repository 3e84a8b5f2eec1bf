from enum import Enum


class TableNames(str, Enum):
    OCCASIONS = "occasions"
    ALIASES = "aliases"
    EVENTS = "events"
    GUESTS = "guests"
    SUB_GUESTS = "sub_guests"
    TAGS = "tags"
    EMAIL_LOGS = "email_logs"
