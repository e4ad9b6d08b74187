"""
Tests for Merging and Trending.
===============================

Tests for:
- Merger: Duplicate entities across departments
- Research-area union
- Trending split
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Merger Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestMerge:
    """Tests for collapsing duplicate entities."""

    def test_cross_department_merge(self, make_result):
        """Test one professor listed in two departments."""
        from labcompass.search.merger import merge

        results = [
            make_result(
                "Tian Li",
                department="data science",
                num_lab_members=0,
                num_undergrad_researchers=0,
                num_published_papers=0,
            ),
            make_result(
                "Tian Li",
                department="statistics",
                num_lab_members=2,
                num_undergrad_researchers=1,
                num_published_papers=10,
            ),
        ]

        merged = merge(results)

        assert len(merged) == 1
        tian = merged[0]
        assert tian.department == "data science, statistics"
        assert tian.num_lab_members == 2
        assert tian.num_undergrad_researchers == 1
        assert tian.num_published_papers == 10

    def test_numeric_max(self, make_result):
        """Test stats take the larger value."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A", num_lab_members=3),
            make_result("A", department="biology", num_lab_members=7),
        ])

        assert merged[0].num_lab_members == 7

    def test_missing_stat_counts_as_zero(self, make_result):
        """Test a missing stat never beats a present one."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A"),
            make_result("A", department="biology", num_published_papers=4),
        ])

        assert merged[0].num_published_papers == 4
        assert merged[0].num_lab_members is None

    def test_relevance_is_max(self, make_result):
        """Test the merged record keeps the best relevance."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A", relevance=0.4),
            make_result("A", department="biology", relevance=0.8),
        ])

        assert merged[0].relevance == 0.8

    def test_first_non_empty_text(self, make_result):
        """Test text fields keep the first non-empty value."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A", lab="", email="a@example.edu"),
            make_result("A", department="biology", lab="Smith Lab", email="other@example.edu"),
        ])

        assert merged[0].lab == "Smith Lab"
        assert merged[0].email == "a@example.edu"

    def test_flags_are_ored(self, make_result):
        """Test recruiting and translucent flags survive a merge."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A", is_recruiting=True),
            make_result("A", department="biology", is_translucent=True),
        ])

        assert merged[0].is_recruiting is True
        assert merged[0].is_translucent is True

    def test_match_type_priority(self, make_result):
        """Test the strongest match type is reported."""
        from labcompass.search.merger import merge
        from labcompass.shared.schemas import MatchType

        merged = merge([
            make_result("A", match_type=MatchType.RESEARCH_AREA),
            make_result("A", department="biology", match_type=MatchType.NAME),
            make_result("A", department="physics", match_type=MatchType.DEPARTMENT),
        ])

        assert merged[0].match_type == MatchType.NAME

    def test_same_department_not_repeated(self, make_result):
        """Test merging the same department twice keeps it once."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("A", department="statistics"),
            make_result("A", department="statistics"),
        ])

        assert merged[0].department == "statistics"

    def test_exact_name_identity(self, make_result):
        """Test differently cased names are different people."""
        from labcompass.search.merger import merge

        merged = merge([make_result("Tian Li"), make_result("Tian LI")])

        assert [r.name for r in merged] == ["Tian Li", "Tian LI"]

    def test_first_seen_order(self, make_result):
        """Test output order follows first appearance."""
        from labcompass.search.merger import merge

        merged = merge([
            make_result("B", relevance=0.9),
            make_result("A", relevance=0.8),
            make_result("B", department="biology", relevance=0.5),
        ])

        assert [r.name for r in merged] == ["B", "A"]

    def test_idempotent(self, make_result):
        """Test merging merged results changes nothing."""
        from labcompass.search.merger import merge

        results = [
            make_result("A", research_area="Machine Learning", num_lab_members=3),
            make_result("B", department="biology"),
            make_result("A", department="biology", research_area="Optimization"),
        ]

        once = merge(results)

        assert merge(once) == once

    def test_inputs_not_mutated(self, make_result):
        """Test merge works on copies."""
        from labcompass.search.merger import merge

        first = make_result("A", department="statistics")
        merge([first, make_result("A", department="biology")])

        assert first.department == "statistics"

    def test_empty(self):
        """Test merging nothing."""
        from labcompass.search.merger import merge

        assert merge([]) == []


class TestResearchAreas:
    """Tests for research-area union."""

    def test_subsumed_area_dropped(self):
        """Test a sub-area contained in a longer one is removed."""
        from labcompass.search.merger import merge_research_areas

        merged = merge_research_areas("Machine Learning", "Learning, Statistics")

        assert merged == "Machine Learning, Statistics"

    def test_case_insensitive_dedupe(self):
        """Test repeated areas differing in case appear once."""
        from labcompass.search.merger import merge_research_areas

        merged = merge_research_areas("Optimization", "optimization, Control")

        assert merged == "Optimization, Control"

    def test_one_side_empty(self):
        """Test an empty side yields the other."""
        from labcompass.search.merger import merge_research_areas

        assert merge_research_areas("", "Optimization") == "Optimization"
        assert merge_research_areas("Optimization", "") == "Optimization"

    def test_identical(self):
        """Test identical strings are returned unchanged."""
        from labcompass.search.merger import merge_research_areas

        assert merge_research_areas("A, B", "A, B") == "A, B"


# ─────────────────────────────────────────────────────────────────────────────
# Trending Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestTrending:
    """Tests for the trending/regular split."""

    @pytest.mark.parametrize("words,top,expected", [
        (1, 0.9, 0.6),
        (1, 0.7, 0.4),
        (1, 0.5, 0.3),
        (2, 0.85, 0.7),
        (2, 0.65, 0.5),
        (3, 0.3, 0.4),
    ])
    def test_min_trending_relevance(self, words, top, expected):
        """Test the trending cutoff ladder."""
        from labcompass.search.trending import min_trending_relevance

        assert min_trending_relevance(words, top) == expected

    def test_trending_cutoff_applies(self, make_result):
        """Test a trending lab must clear the cutoff to be shown as trending."""
        from labcompass.search.trending import split_trending

        top = make_result("Top", relevance=0.9)
        strong = make_result("Ada Lee", relevance=0.65, lab="Smith Lab")
        weak = make_result("Bo Chen", relevance=0.5, lab="Smith Lab")

        partition = split_trending([top, strong, weak], ["Smith Lab"], "biology")

        assert partition.min_relevance == 0.6
        assert [r.name for r in partition.trending] == ["Ada Lee"]
        assert [r.name for r in partition.regular] == ["Top", "Bo Chen"]
        assert partition.total == 3

    def test_trending_by_professor_name(self, make_result):
        """Test entities without a lab trend by their name."""
        from labcompass.search.trending import split_trending

        partition = split_trending(
            [make_result("Tian Li", relevance=0.9)], ["Tian Li"], "tian"
        )

        assert [r.name for r in partition.trending] == ["Tian Li"]

    def test_no_trending_names(self, make_result):
        """Test everything is regular without a trending list."""
        from labcompass.search.trending import split_trending

        results = [make_result("A", relevance=0.9), make_result("B", relevance=0.8)]
        partition = split_trending(results, [], "bayes")

        assert partition.trending == []
        assert partition.regular == results

    def test_order_preserved(self, make_result):
        """Test each side keeps the input order."""
        from labcompass.search.trending import split_trending

        results = [
            make_result("A", relevance=0.95, lab="Lab A"),
            make_result("B", relevance=0.9),
            make_result("C", relevance=0.85, lab="Lab C"),
        ]
        partition = split_trending(results, ["Lab C", "Lab A"], "lab")

        assert [r.name for r in partition.trending] == ["A", "C"]
