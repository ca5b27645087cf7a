"""User-agent and path rules for the bot guard."""

import re

# Passed silently, not recorded
UTILITY_BOTS_PATTERN = re.compile(
    r"SentryUptimeBot|Uptime-Kuma|UptimeRobot|StatusCake|BriefingHub-Prewarmer|BriefingHub-Warmup",
    re.IGNORECASE,
)

# Allowed and recorded
SEARCH_ENGINE_BOTS_PATTERN = re.compile(
    r"Baiduspider|Googlebot|Bingbot|Slurp|Yisou|YandexBot|DuckDuckGo|Sogou|Exabot|facebot"
    r"|facebookexternalhit|Applebot|Bytespider|TikTokSpider|LinkedInBot|Twitterbot"
    r"|Pinterestbot|Discordbot|Telegrambot|WhatsApp|NaverBot|360Spider|PetalBot",
    re.IGNORECASE,
)

SEARCH_ENGINE_NAMES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(pattern, re.IGNORECASE), name)
    for pattern, name in (
        (r"Googlebot", "Googlebot"),
        (r"Baiduspider", "Baiduspider"),
        (r"Bingbot", "Bingbot"),
        (r"YandexBot", "YandexBot"),
        (r"DuckDuckGo", "DuckDuckGo"),
        (r"Sogou", "Sogou"),
        (r"Applebot", "Applebot"),
        (r"Bytespider|TikTokSpider", "Bytespider"),
        (r"LinkedInBot", "LinkedInBot"),
        (r"Twitterbot", "Twitterbot"),
        (r"Pinterestbot", "Pinterestbot"),
        (r"Discordbot", "Discordbot"),
        (r"Telegrambot", "Telegrambot"),
        (r"WhatsApp", "WhatsApp"),
        (r"NaverBot", "NaverBot"),
        (r"360Spider", "360Spider"),
        (r"PetalBot", "PetalBot"),
        (r"Slurp", "Yahoo-Slurp"),
        (r"Yisou", "Yisou"),
        (r"Exabot", "Exabot"),
        (r"facebot|facebookexternalhit", "Facebook"),
    )
]

# Blocked (403) and recorded
SEO_SCRAPER_BOTS_PATTERN = re.compile(
    r"AhrefsBot|SemrushBot|MJ12bot|Dotbot|DataForSeoBot|Barkrowler|ZoominfoBot|BLEXBot|SeekportBot",
    re.IGNORECASE,
)

AI_ARCHIVE_BOTS_PATTERN = re.compile(
    r"archive\.org_bot|DuckAssistBot|meta-externalfetcher|MistralAI-User|OAI-SearchBot"
    r"|Perplexity-User|PerplexityBot|ProRataInc|GPTBot|ChatGPT-User|CCBot|anthropic-ai"
    r"|ClaudeBot|Claude-Web|Google-Extended|Amazonbot|cohere-ai",
    re.IGNORECASE,
)

MALICIOUS_PATH_MARKERS = ("/wp-", ".env", "/.git")
MALICIOUS_PATH_SUFFIXES = (".php",)

MIN_USER_AGENT_LENGTH = 10

# Never guarded
EXEMPT_PATHS = frozenset({"/robots.txt", "/sitemap.xml", "/health"})

# Country header set by the edge proxy, when there is one
COUNTRY_HEADERS = ("cf-ipcountry", "x-vercel-ip-country")


def search_engine_name(user_agent: str) -> str:
    for pattern, name in SEARCH_ENGINE_NAMES:
        if pattern.search(user_agent):
            return name
    return "Search-Engine"


def is_malicious_path(path: str) -> bool:
    return any(marker in path for marker in MALICIOUS_PATH_MARKERS) or path.endswith(
        MALICIOUS_PATH_SUFFIXES
    )
