"""Gemini-written operations summary for the admin dashboard."""

import json
from typing import Any

from google import genai
from google.genai import types

from app.config import Settings
from app.logging_config import get_logger
from app.schemas.dashboard import DashboardStats

logger = get_logger(__name__)

SEARCH_ENGINE_KEYWORDS = (
    "google",
    "baidu",
    "bing",
    "sogou",
    "yandex",
    "duckduckgo",
    "yahoo",
    "bytedance",
    "spider",
)

EMPTY_SUMMARY = "暂时无法生成 AI 总结。"
FAILED_SUMMARY = "AI 总结生成失败，请检查模型配额。"


def compress_stats(stats: DashboardStats) -> dict[str, Any]:
    """Keep only the numbers the summary talks about."""
    search_bots = [
        bot
        for bot in stats.security.top_bots
        if any(keyword in bot.name.lower() for keyword in SEARCH_ENGINE_KEYWORDS)
    ]
    return {
        "articles": {
            "total": stats.content.total_articles,
            "today": stats.content.today_added,
            "articleTrend7d": [d.model_dump() for d in stats.content.daily_trend[-7:]],
            "verdicts": [v.model_dump() for v in stats.content.verdict_distribution],
        },
        "searchEngines": [
            {"name": b.name, "success": b.allowed_count, "errorOrBlock": b.blocked_count}
            for b in search_bots
        ],
        "security": {
            "blockedToday": stats.security.today_blocked,
            "topThreats": [p.model_dump() for p in stats.security.blocked_paths[:3]],
        },
    }


class DashboardSummaryAgent:
    """Turns dashboard statistics into a short Markdown briefing."""

    SUMMARY_PROMPT = """你是一位首席运营总监。请根据现有数据撰写一份简报。

当前数据摘要：{stats_json}

**重要数据结构说明**:
- articles.articleTrend7d: 这是【文章生产数量】的7日趋势，不是爬虫数据！
- searchEngines: 这是【搜索引擎爬虫访问次数】，来自 bot_hits 表。

撰写要求 (必须严格遵守)：
1. **开篇必须是 [搜索引擎监测]**
   - 仅关注 searchEngines 字段的数据。
   - 汇报爬虫的 "访问次数" (success + errorOrBlock)。
   - 如果 searchEngines 数组为空，则说明"今日暂无搜索引擎访问记录"。
2. **内容生产概览**
   - 使用 articles.articleTrend7d 字段汇报文章生产数量的7日趋势，日期用短格式如 01-13。
3. **安全简述**
   - 若有高危拦截 (blockedToday > 50 或有异常路径)，请提示；否则简略带过。
4. **风格规范**
   - 使用 Markdown，严禁使用标题语法 (#/##)，用 **加粗** 或 > 引用来区分段落。
   - 文字极度精简：数据->结论。"""

    def __init__(self, settings: Settings, client: genai.Client | None = None) -> None:
        self.client = client or genai.Client(api_key=settings.gemini_api_key)
        self.model = settings.gemini_model

    def build_prompt(self, stats: DashboardStats) -> str:
        stats_json = json.dumps(compress_stats(stats), ensure_ascii=False)
        return self.SUMMARY_PROMPT.format(stats_json=stats_json)

    async def summarize(self, stats: DashboardStats) -> str:
        """Never raises; provider failures become a fixed sentence."""
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=self.build_prompt(stats),
                config=types.GenerateContentConfig(
                    temperature=0.3,
                    max_output_tokens=1000,
                ),
            )
        except Exception:
            logger.exception("Failed to generate dashboard AI summary")
            return FAILED_SUMMARY

        return (response.text or "").strip() or EMPTY_SUMMARY
