OCCASIONS_URL = "/api/v1/occasions"
OCCASION_URL = "/api/v1/occasions/{occasion_id}"
OCCASION_BY_ALIAS_URL = "/api/v1/occasions/by-alias/{alias}"
ALIAS_AVAILABILITY_URL = "/api/v1/occasions/aliases/{alias}"
