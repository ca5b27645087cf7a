"""Ranking strategies for articles inside a briefing section.

Sections are already split by importance before ranking, so within one
section ``by_importance_and_score`` adds the same bonus to every article.
It is kept as an alternative for ranking mixed lists.
"""

from collections.abc import Callable, Iterable

from app.constants.briefing import RANKING_WEIGHTS
from app.schemas.article import Article

RankingStrategy = Callable[[Iterable[Article]], list[Article]]


def _score(article: Article) -> float:
    if article.verdict is None:
        return 0
    return article.verdict.score or 0


def _weighted_score(article: Article) -> float:
    importance = article.verdict.importance if article.verdict else None
    bonus = RANKING_WEIGHTS["importance_bonus"].get(importance or "", 0)
    return _score(article) * RANKING_WEIGHTS["score"] + bonus


def by_score(articles: Iterable[Article]) -> list[Article]:
    """Highest verdict score first; articles without a verdict score 0."""
    return sorted(articles, key=_score, reverse=True)


def by_importance_and_score(articles: Iterable[Article]) -> list[Article]:
    """Highest weighted score plus importance bonus first."""
    return sorted(articles, key=_weighted_score, reverse=True)


STRATEGIES: dict[str, RankingStrategy] = {
    "score": by_score,
    "importance_and_score": by_importance_and_score,
}

default_strategy: RankingStrategy = by_score
