"""Tests for ranking strategies and section grouping."""

from app.constants.briefing import BRIEFING_SECTIONS, IMPORTANT, MUST_KNOW, REGULAR
from app.schemas.article import Article
from app.services.briefing_service import dedupe_by_id, group_by_section
from app.services.ranking import STRATEGIES, by_importance_and_score, by_score


def article(article_id: str, score: int | None = None, importance: str | None = None, **fields) -> Article:
    verdict = None
    if score is not None or importance is not None:
        verdict = {"score": score or 0, "importance": importance}
    return Article(id=article_id, verdict=verdict, **fields)


class TestByScore:
    def test_highest_first(self) -> None:
        ranked = by_score([article("a", 3), article("b", 9), article("c", 1)])

        assert [a.verdict.score for a in ranked] == [9, 3, 1]

    def test_missing_verdict_scores_zero(self) -> None:
        ranked = by_score([article("none"), article("neg", -1), article("pos", 2)])

        assert [a.id for a in ranked] == ["pos", "none", "neg"]

    def test_null_score_ranks_as_zero(self) -> None:
        nulled = Article(id="null", verdict={"score": None, "importance": REGULAR})

        ranked = by_score([nulled, article("neg", -1), article("pos", 2)])

        assert [a.id for a in ranked] == ["pos", "null", "neg"]

    def test_ties_keep_input_order(self) -> None:
        ranked = by_score([article("first", 5), article("second", 5), article("third", 5)])

        assert [a.id for a in ranked] == ["first", "second", "third"]

    def test_does_not_mutate_input(self) -> None:
        articles = [article("a", 1), article("b", 2)]
        by_score(articles)

        assert [a.id for a in articles] == ["a", "b"]


class TestByImportanceAndScore:
    def test_bonus_outweighs_small_score_gap(self) -> None:
        ranked = by_importance_and_score(
            [
                article("regular", 15, REGULAR),
                article("important", 1, IMPORTANT),
                article("must", 5, MUST_KNOW),
            ]
        )

        assert [a.id for a in ranked] == ["important", "regular", "must"]

    def test_same_band_matches_by_score(self) -> None:
        """Inside one band the bonus is constant, so the order is the plain score order."""
        band = [article("a", 2, MUST_KNOW), article("b", 8, MUST_KNOW), article("c", 5, MUST_KNOW)]

        assert [a.id for a in by_importance_and_score(band)] == [a.id for a in by_score(band)]

    def test_registered(self) -> None:
        assert STRATEGIES["score"] is by_score
        assert STRATEGIES["importance_and_score"] is by_importance_and_score


class TestGroupBySection:
    def test_all_bands_present_when_empty(self) -> None:
        groups = group_by_section([])

        assert list(groups) == list(BRIEFING_SECTIONS)
        assert all(items == [] for items in groups.values())

    def test_unknown_section_goes_to_regular(self) -> None:
        groups = group_by_section(
            [
                article("x", 4, briefing_section="other"),
                article("y", 6, briefing_section=""),
                article("z", 9, briefing_section=IMPORTANT),
            ]
        )

        assert [a.id for a in groups[REGULAR]] == ["y", "x"]
        assert [a.id for a in groups[IMPORTANT]] == ["z"]
        assert groups[MUST_KNOW] == []

    def test_uses_given_strategy(self) -> None:
        def reverse_ids(items):
            return sorted(items, key=lambda a: a.id, reverse=True)

        groups = group_by_section(
            [article("a", briefing_section=REGULAR), article("b", briefing_section=REGULAR)],
            strategy=reverse_ids,
        )

        assert [a.id for a in groups[REGULAR]] == ["b", "a"]


class TestDedupeById:
    def test_first_occurrence_wins(self) -> None:
        unique = dedupe_by_id([article("a", 1), article("b", 2), article("a", 3)])

        assert [(a.id, a.verdict.score) for a in unique] == [("a", 1), ("b", 2)]
