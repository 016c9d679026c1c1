"""
Hypothesis-based property tests for the estimation engines.

Properties checked here:
- Parametric models: cost tracks effort, COCOMO effort grows with size
- Three-point estimates stay inside [optimistic, pessimistic]
- PERT network: node identities, non-negative slack, critical path reaches
  the project duration, order_tasks yields a valid dependency order
- EVM: variance identities and a bounded health score
- Aggregation: sums and maxima over per-feature results
"""

import random

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from estimation_engines.aggregation import summarize_estimations
from estimation_engines.evm import calculate_evm_metrics, get_health_score
from estimation_engines.feature_models import calculate_feature_estimations
from estimation_engines.parametric import calculate_all_models, calculate_cocomo
from estimation_engines.pert_network import build_pert_schedule, order_tasks
from estimation_kernel.domain import (
    EstimationParams,
    EVMData,
    FeatureInput,
    PertInput,
    PertTask,
    StoryPointsInput,
)
from estimation_kernel.domain.pert import CRITICAL_TOLERANCE, three_point_expected
from estimation_kernel.domain.values import round_half_up

TOLERANCE = 1e-6

complexities = st.sampled_from(["low", "medium", "high"])


@composite
def three_points(draw, max_value=60):
    """Integer (optimistic, most_likely, pessimistic) with o <= m <= p."""
    values = sorted(draw(st.lists(st.integers(0, max_value), min_size=3, max_size=3)))
    return tuple(values)


@composite
def task_networks(draw, max_tasks=12):
    """Tasks in dependency order; each task depends only on earlier ones."""
    count = draw(st.integers(1, max_tasks))
    tasks = []
    for i in range(count):
        o, m, p = draw(three_points())
        earlier = [t.id for t in tasks]
        deps = draw(st.lists(st.sampled_from(earlier), unique=True, max_size=3)) if earlier else []
        tasks.append(PertTask(f"T{i}", f"Task {i}", o, m, p, tuple(deps)))
    return tasks


class TestParametricProperties:

    @given(
        size=st.integers(1, 500),
        team=st.integers(1, 50),
        timeline=st.integers(1, 48),
        complexity=complexities,
    )
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_cost_is_rounded_effort_times_rate(self, size, team, timeline, complexity):
        results = calculate_all_models(EstimationParams(size, team, timeline, complexity))

        for result in results.values():
            assert result.cost == round_half_up(result.effort * 8000)
            assert result.effort >= 0
            assert result.duration >= 0

    @given(size=st.integers(1, 499), complexity=complexities)
    @settings(max_examples=100)
    def test_cocomo_effort_grows_with_size(self, size, complexity):
        smaller = calculate_cocomo(EstimationParams(size, 5, 12, complexity))
        larger = calculate_cocomo(EstimationParams(size + 1, 5, 12, complexity))

        assert larger.effort > smaller.effort
        assert larger.duration > smaller.duration


class TestThreePointProperties:

    @given(points=three_points(max_value=1000))
    def test_expected_within_range(self, points):
        o, m, p = points
        expected = three_point_expected(o, m, p)
        assert o - TOLERANCE <= expected <= p + TOLERANCE

    @given(points=three_points())
    def test_feature_pert_results_non_negative(self, points):
        result = calculate_feature_estimations(
            FeatureInput(id="f", name="F", pert=PertInput(*points))
        ).pert

        assert result.standard_deviation >= 0
        assert result.duration >= 0


class TestPertNetworkProperties:

    @given(tasks=task_networks())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_node_identities(self, tasks):
        schedule = build_pert_schedule(tasks)
        by_id = {t.id: t for t in tasks}

        assert [n.id for n in schedule.nodes] == [t.id for t in tasks]
        for node in schedule.nodes:
            duration = by_id[node.id].expected_time
            assert node.ef == pytest.approx(node.es + duration)
            assert node.ls == pytest.approx(node.lf - duration)
            assert node.slack >= -CRITICAL_TOLERANCE
            assert node.lf <= schedule.total_duration + TOLERANCE

    @given(tasks=task_networks())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_successors_start_after_predecessors(self, tasks):
        nodes = {n.id: n for n in build_pert_schedule(tasks).nodes}

        for task in tasks:
            for dep in task.dependencies:
                assert nodes[task.id].es >= nodes[dep].ef - TOLERANCE

    @given(tasks=task_networks())
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_critical_path_reaches_total_duration(self, tasks):
        schedule = build_pert_schedule(tasks)

        assert schedule.critical_path
        critical_finishes = [schedule.node(t).ef for t in schedule.critical_path]
        assert max(critical_finishes) == pytest.approx(schedule.total_duration)

    @given(tasks=task_networks(), seed=st.integers(0, 2**16))
    @settings(max_examples=100)
    def test_order_tasks_restores_a_dependency_order(self, tasks, seed):
        shuffled = list(tasks)
        random.Random(seed).shuffle(shuffled)

        ordered = order_tasks(shuffled)
        seen = set()
        for task in ordered:
            assert all(dep in seen for dep in task.dependencies)
            seen.add(task.id)
        assert build_pert_schedule(ordered).total_duration == pytest.approx(
            build_pert_schedule(tasks).total_duration
        )

    @given(tasks=task_networks())
    def test_order_tasks_keeps_ordered_input(self, tasks):
        assert order_tasks(tasks) == tasks


class TestEvmProperties:

    @given(
        bac=st.integers(0, 10**9),
        pv=st.integers(0, 10**9),
        ev=st.integers(0, 10**9),
        ac=st.integers(0, 10**9),
    )
    @settings(max_examples=200)
    def test_variance_identities(self, bac, pv, ev, ac):
        metrics = calculate_evm_metrics(EVMData(bac=bac, pv=pv, ev=ev, ac=ac))

        assert metrics.cv == ev - ac
        assert metrics.sv == ev - pv
        assert metrics.vac == pytest.approx(bac - metrics.eac)

    @given(
        pv=st.integers(1, 10**7),
        ev=st.integers(0, 10**7),
        ac=st.integers(1, 10**7),
    )
    def test_health_score_bounded(self, pv, ev, ac):
        metrics = calculate_evm_metrics(EVMData(bac=10**7, pv=pv, ev=ev, ac=ac))
        score = get_health_score(metrics.cpi, metrics.spi)

        assert 0 <= score <= 100

    @given(ev=st.integers(1, 10**7), ac=st.integers(1, 10**7))
    def test_eac_scales_budget_by_cpi(self, ev, ac):
        metrics = calculate_evm_metrics(EVMData(bac=10**6, pv=ev, ev=ev, ac=ac))
        assert metrics.eac == pytest.approx(10**6 * ac / ev)


class TestAggregationProperties:

    @given(
        features=st.lists(
            st.tuples(three_points(), st.integers(0, 200), st.integers(1, 40)),
            max_size=8,
        )
    )
    @settings(max_examples=100, suppress_health_check=[HealthCheck.too_slow])
    def test_totals_are_sums_and_maxima(self, features):
        results = [
            calculate_feature_estimations(
                FeatureInput(
                    id=f"f{i}",
                    name=f"Feature {i}",
                    pert=PertInput(*points),
                    story_points=StoryPointsInput(points=sp, team_velocity=velocity),
                )
            )
            for i, (points, sp, velocity) in enumerate(features)
        ]
        aggregate = summarize_estimations(results)

        assert aggregate.pert.total_cost == sum(r.pert.cost for r in results)
        assert aggregate.pert.total_duration == max((r.pert.duration for r in results), default=0)
        assert aggregate.story_points.total_sprints == max(
            (r.story_points.sprints for r in results), default=0
        )
        assert aggregate.fpa.total_cost == 0
