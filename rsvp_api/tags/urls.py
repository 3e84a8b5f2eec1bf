OCCASION_TAGS_URL = "/api/v1/occasions/{occasion_id}/tags"
TAG_URL = "/api/v1/tags/{tag_id}"
