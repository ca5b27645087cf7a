"""Constants shared by the briefing, feed and cache layers."""

from typing import Any

# FreshRSS state tags
STAR_TAG = "user/-/state/com.google/starred"
READ_TAG = "user/-/state/com.google/read"
STATE_TAG_MARKERS = ("/state/com.google/", "/state/org.freshrss/")

# FreshRSS user label prefix
LABEL_PREFIX = "user/-/label/"

# Google Reader item id format
ARTICLE_ID_PREFIX = "tag:google.com,2005:reader/item/"

# Importance bands, in display order
IMPORTANT = "重要新闻"
MUST_KNOW = "必知要闻"
REGULAR = "常规更新"
BRIEFING_SECTIONS: tuple[str, ...] = (IMPORTANT, MUST_KNOW, REGULAR)

RANKING_WEIGHTS: dict[str, Any] = {
    "score": 1,
    "importance_bonus": {
        IMPORTANT: 20,
        MUST_KNOW: 10,
        REGULAR: 0,
    },
}

# Cache tags and keys
BRIEFING_DATA_TAG = "briefing-data"
AVAILABLE_DATES_TAG = "available-dates"
AVAILABLE_FILTERS_TAG = "available-filters"
BRIEFING_TTL_SECONDS = 7 * 24 * 60 * 60
FILTERS_TTL_SECONDS = 24 * 60 * 60
DATES_TTL_SECONDS = 60 * 60


def briefing_tag(date: str) -> str:
    return f"{BRIEFING_DATA_TAG}-{date}"


def date_page_path(date: str) -> str:
    return f"/date/{date}"


HOME_PATH = "/"

# Access control
SITE_TOKEN_COOKIE = "site_token"
SITE_TOKEN_MAX_AGE = 60 * 60 * 24 * 90

PREWARM_USER_AGENT = "BriefingHub-Prewarmer/1.0"
PREWARM_DELAY_SECONDS = 1.0
