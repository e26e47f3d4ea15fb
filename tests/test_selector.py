"""Tests for candidate selection."""

from __future__ import annotations

from growthcase.models.run import Industry
from growthcase.similarity.selector import CANDIDATE_LIMIT, select_candidates


class TestSelectCandidates:
    def test_caps_at_fifty_most_recent(self, make_run):
        target = make_run(minutes=1000)
        pool = [make_run(minutes=i) for i in range(60)]

        selected = select_candidates(target, pool)

        assert CANDIDATE_LIMIT == 50
        assert len(selected) == 50
        assert {r.id for r in selected} == {r.id for r in pool[10:]}
        assert selected[0].id == pool[-1].id
        assert selected[-1].id == pool[10].id

    def test_newest_first(self, make_run):
        target = make_run(minutes=100)
        pool = [make_run(minutes=m) for m in (5, 40, 1, 22)]

        selected = select_candidates(target, pool)

        stamps = [r.created_at for r in selected]
        assert stamps == sorted(stamps, reverse=True)

    def test_only_same_industry(self, make_run):
        target = make_run(industry=Industry.WELLNESS)
        pool = [
            make_run(minutes=1, industry=Industry.WELLNESS),
            make_run(minutes=2, industry=Industry.BEAUTY),
            make_run(minutes=3, industry=Industry.FASHION),
        ]

        selected = select_candidates(target, pool)

        assert [r.industry for r in selected] == [Industry.WELLNESS]

    def test_excludes_target(self, make_run):
        target = make_run(minutes=5)
        pool = [target, make_run(minutes=1)]

        selected = select_candidates(target, pool)

        assert target.id not in {r.id for r in selected}
        assert len(selected) == 1

    def test_ties_keep_pool_order(self, make_run):
        target = make_run(minutes=99)
        first = make_run(minutes=10)
        second = make_run(minutes=10)

        selected = select_candidates(target, [first, second])

        assert [r.id for r in selected] == [first.id, second.id]

    def test_custom_limit(self, make_run):
        target = make_run(minutes=99)
        pool = [make_run(minutes=i) for i in range(5)]

        assert len(select_candidates(target, pool, limit=2)) == 2
        assert select_candidates(target, pool, limit=0) == []

    def test_empty_pool(self, make_run):
        assert select_candidates(make_run(), []) == []
