"""
Tests for the PERT network solver.

Covers:
- Forward / backward pass on a linear chain and on a branching network
- Critical path, slack and total duration
- Typed errors for malformed networks
- Opt-in topological ordering
"""

import pytest

from estimation_engines.pert_network import (
    build_pert_schedule,
    order_tasks,
    solve_pert_network,
)
from estimation_kernel.domain import PertTask
from estimation_kernel.exceptions import (
    CyclicDependencyError,
    DependencyOrderError,
    DuplicateTaskError,
    UnknownDependencyError,
)


def task(task_id: str, duration: float, *deps: str) -> PertTask:
    """Task whose three estimates are equal, so expected_time == duration."""
    return PertTask(task_id, f"Task {task_id}", duration, duration, duration, deps)


SAMPLE_CHAIN = [
    PertTask("A", "Requirements Analysis", 3, 5, 8),
    PertTask("B", "System Design", 5, 7, 10, ("A",)),
    PertTask("C", "Development", 10, 18, 25, ("B",)),
    PertTask("D", "Testing", 5, 8, 12, ("C",)),
    PertTask("E", "Deployment", 2, 4, 6, ("D",)),
]


class TestPertTask:

    def test_derived_fields(self):
        t = PertTask("A", "Requirements Analysis", 3, 5, 8)

        assert t.expected_time == pytest.approx(5.1667, abs=1e-4)
        assert t.variance == pytest.approx(0.6944, abs=1e-4)

    def test_derived_fields_cannot_be_passed(self):
        with pytest.raises(TypeError):
            PertTask("A", "x", 1, 2, 3, (), expected_time=10)

    def test_from_dict_ignores_derived_keys(self):
        t = PertTask.from_dict({
            "id": "A",
            "taskName": "Req",
            "optimistic": 1,
            "mostLikely": 2,
            "pessimistic": 9,
            "dependencies": [],
            "expectedTime": 99,
            "variance": 99,
        })
        assert t.expected_time == pytest.approx(3.0)
        assert t.variance == pytest.approx(16 / 9)


class TestLinearChain:
    """A -> B -> C -> D -> E is critical end to end."""

    def setup_method(self):
        self.schedule = build_pert_schedule(SAMPLE_CHAIN)

    def test_all_nodes_critical(self):
        assert all(node.is_critical for node in self.schedule.nodes)
        assert all(node.slack == pytest.approx(0) for node in self.schedule.nodes)

    def test_total_duration_is_sum_of_expected_times(self):
        expected = sum(t.expected_time for t in SAMPLE_CHAIN)
        assert self.schedule.total_duration == pytest.approx(expected)
        assert self.schedule.total_duration == pytest.approx(254 / 6)

    def test_critical_path_in_input_order(self):
        assert self.schedule.critical_path == ("A", "B", "C", "D", "E")

    def test_critical_path_variance(self):
        assert self.schedule.critical_path_variance == pytest.approx(340 / 36)
        assert self.schedule.critical_path_std_dev == pytest.approx((340 / 36) ** 0.5)

    def test_node_timing_chain(self):
        nodes = self.schedule.nodes
        for prev, cur in zip(nodes, nodes[1:]):
            assert cur.es == pytest.approx(prev.ef)

    def test_node_lookup(self):
        assert self.schedule.node("C").es == pytest.approx(12 + 1 / 3)
        with pytest.raises(KeyError):
            self.schedule.node("Z")


class TestBranchingNetwork:
    """A shorter parallel branch carries slack."""

    def setup_method(self):
        self.tasks = [
            task("A", 5),
            task("B", 10, "A"),
            task("F", 3, "A"),
            task("C", 4, "B", "F"),
        ]
        self.schedule = build_pert_schedule(self.tasks)

    def test_branch_slack(self):
        f = self.schedule.node("F")

        assert f.es == 5
        assert f.ef == 8
        assert f.lf == 15
        assert f.ls == 12
        assert f.slack == 7
        assert f.is_critical is False

    def test_join_waits_for_longest_predecessor(self):
        c = self.schedule.node("C")
        assert c.es == 15
        assert c.ef == 19

    def test_critical_path_skips_branch(self):
        assert self.schedule.critical_path == ("A", "B", "C")
        assert self.schedule.total_duration == 19

    def test_node_invariants(self):
        durations = {t.id: t.expected_time for t in self.tasks}
        for node in self.schedule.nodes:
            assert node.ef == pytest.approx(node.es + durations[node.id])
            assert node.ls == pytest.approx(node.lf - durations[node.id])
            assert node.slack == pytest.approx(node.ls - node.es)


class TestEdgeCases:

    def test_empty_network(self):
        schedule = build_pert_schedule([])

        assert schedule.nodes == ()
        assert schedule.total_duration == 0
        assert schedule.critical_path == ()

    def test_zero_duration_task(self):
        nodes = solve_pert_network([task("A", 4), task("M", 0, "A")])
        milestone = nodes[1]

        assert milestone.es == milestone.ef == 4
        assert milestone.is_critical

    def test_multiple_roots_start_at_zero(self):
        nodes = solve_pert_network([task("A", 3), task("B", 6), task("C", 1, "A", "B")])

        assert nodes[0].es == 0
        assert nodes[1].es == 0
        assert nodes[0].slack == 3
        assert nodes[1].is_critical

    def test_unconnected_short_task_has_slack(self):
        nodes = solve_pert_network([task("A", 10), task("B", 2)])
        assert nodes[1].slack == 8

    def test_output_keeps_input_order(self):
        nodes = solve_pert_network([task("X", 1), task("A", 1, "X")])
        assert [n.id for n in nodes] == ["X", "A"]


class TestMalformedNetworks:

    def test_duplicate_id(self):
        with pytest.raises(DuplicateTaskError) as exc:
            solve_pert_network([task("A", 1), task("A", 2)])
        assert exc.value.task_id == "A"

    def test_unknown_dependency(self):
        with pytest.raises(UnknownDependencyError) as exc:
            solve_pert_network([task("A", 1, "Q")])
        assert exc.value.dependency_id == "Q"
        assert exc.value.code == "UNKNOWN_DEPENDENCY"

    def test_dependency_listed_after_dependent(self):
        with pytest.raises(DependencyOrderError) as exc:
            solve_pert_network([task("B", 1, "A"), task("A", 1)])
        assert exc.value.task_id == "B"
        assert exc.value.dependency_id == "A"


class TestOrderTasks:

    def test_sorted_input_unchanged(self):
        assert order_tasks(SAMPLE_CHAIN) == SAMPLE_CHAIN

    def test_reverses_out_of_order_chain(self):
        ordered = order_tasks(list(reversed(SAMPLE_CHAIN)))
        assert [t.id for t in ordered] == ["A", "B", "C", "D", "E"]

    def test_stable_for_independent_tasks(self):
        tasks = [task("C", 1), task("B", 1, "A"), task("A", 1)]
        assert [t.id for t in order_tasks(tasks)] == ["C", "A", "B"]

    def test_ordered_tasks_solve(self):
        schedule = build_pert_schedule(order_tasks([task("B", 2, "A"), task("A", 3)]))
        assert schedule.total_duration == 5

    def test_cycle(self):
        with pytest.raises(CyclicDependencyError) as exc:
            order_tasks([task("A", 1, "B"), task("B", 1, "A"), task("C", 1)])
        assert sorted(exc.value.task_ids) == ["A", "B"]

    def test_unknown_dependency(self):
        with pytest.raises(UnknownDependencyError):
            order_tasks([task("A", 1, "missing")])
