"""Skill-scored task assignment.

Scores every employee carrying a task's required skill and picks the
best one. The score is the policy's deterministic base score plus a
bounded random tie-breaker drawn from an injectable ``random.Random``;
pass a seeded generator, or a policy with ``jitter=0``, for reproducible
results. Equal totals go to the lower estimated load, then the lower
employee id.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from shiftdesk.domain.models import Employee, Task, TaskDistribution
from shiftdesk.domain.policies import DefaultTaskScoringPolicy, TaskScoringPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredCandidate:
    """An employee scored against one task."""

    employee: Employee
    base_score: float
    jitter: float
    load: int

    @property
    def total(self) -> float:
        return self.base_score + self.jitter

    def sort_key(self) -> tuple:
        return (-self.total, self.load, self.employee.id)


class TaskAssigner:
    """Assigns tasks to skill-matched employees.

    Example:
        >>> assigner = TaskAssigner(roster, rng=random.Random(42))
        >>> employee_id = assigner.assign_task(task)
    """

    def __init__(
        self,
        employees: Iterable[Employee],
        scoring_policy: Optional[TaskScoringPolicy] = None,
        rng: Optional[random.Random] = None,
    ):
        self.employees = list(employees)
        self.scoring_policy = scoring_policy or DefaultTaskScoringPolicy()
        self.rng = rng or random.Random()

    def eligible_employees(self, task: Task) -> list[Employee]:
        """Employees whose skills include the task's required skill."""
        return [e for e in self.employees if e.has_skill(task.skill_required)]

    def score_candidate(self, employee: Employee, task: Task) -> ScoredCandidate:
        """Score one employee for one task, drawing a fresh tie-breaker."""
        bound = self.scoring_policy.jitter_bound()
        return ScoredCandidate(
            employee=employee,
            base_score=self.scoring_policy.base_score(employee, task),
            jitter=self.rng.random() * bound if bound > 0 else 0.0,
            load=self.scoring_policy.estimated_load(employee),
        )

    def rank_candidates(self, task: Task) -> list[ScoredCandidate]:
        """Eligible employees, best first."""
        scored = [self.score_candidate(e, task) for e in self.eligible_employees(task)]
        return sorted(scored, key=lambda c: c.sort_key())

    def assign_task(self, task: Task) -> Optional[str]:
        """Pick the best employee for a task.

        Returns:
            The chosen employee id, or None if nobody has the required skill.
        """
        ranked = self.rank_candidates(task)
        if not ranked:
            logger.info(
                "No eligible employee for task %s (needs '%s')",
                task.id,
                task.skill_required,
            )
            return None

        best = ranked[0]
        logger.debug(
            "Task %s -> %s (score %.2f over %d candidates)",
            task.id,
            best.employee.id,
            best.total,
            len(ranked),
        )
        return best.employee.id

    def get_task_recommendations(
        self,
        employee_id: str,
        tasks: Iterable[Task],
    ) -> list[Task]:
        """Best-scoring tasks matching an employee's skills.

        Args:
            employee_id: Employee to recommend tasks for.
            tasks: Candidate tasks.

        Returns:
            Up to the policy's limit (5 by default), best first. Empty for
            an unknown employee.
        """
        employee = next((e for e in self.employees if e.id == employee_id), None)
        if employee is None:
            return []

        scored = [
            (self.score_candidate(employee, task).total, task)
            for task in tasks
            if employee.has_skill(task.skill_required)
        ]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [task for _, task in scored[: self.scoring_policy.recommendation_limit()]]

    def distribute_tasks_equally(self, tasks: Iterable[Task]) -> TaskDistribution:
        """Assign a batch of tasks, heaviest first.

        Tasks are ordered by priority weight plus difficulty weight
        (descending, stable) and each is given to ``assign_task``'s pick.
        Every employee appears in the result, possibly with no tasks.
        Tasks nobody is eligible for are collected in ``unassigned``.
        """
        distribution = TaskDistribution(assignments={e.id: [] for e in self.employees})

        ordered = sorted(
            tasks,
            key=self.scoring_policy.distribution_weight,
            reverse=True,
        )
        for task in ordered:
            employee_id = self.assign_task(task)
            if employee_id is None:
                distribution.unassigned.append(task)
                continue
            distribution.assignments[employee_id].append(task)

        if distribution.unassigned:
            logger.warning(
                "%d of %d tasks had no eligible employee",
                len(distribution.unassigned),
                len(ordered),
            )
        return distribution
