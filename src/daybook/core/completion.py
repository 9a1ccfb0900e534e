"""Task completion logic - no I/O dependencies."""

import math
from dataclasses import replace

from .errors import DerivedCompletionError, InvalidReference
from .models import ALL_CATEGORIES, Subtask, Task, TaskKind, new_id


def completion_percentage(tasks: tuple[Task, ...] | list[Task]) -> float:
    """
    Weighted completion of a task list, 0 to 100.

    Each task is worth an equal share. A composite task earns the fraction
    of its subtasks that are done; a simple task earns all or nothing. The
    result is not rounded.

    Pure function - no I/O.
    """
    if not tasks:
        return 0
    # Summing fractions first keeps an all-done list at exactly 100.
    return 100 * sum(t.fraction_complete() for t in tasks) / len(tasks)


def round_percent(value: float) -> int:
    """Round half up, the way percentages are displayed."""
    return math.floor(value + 0.5)


def filter_by_category(tasks, category_id: str) -> list[Task]:
    """Tasks in a category, or all of them for ALL_CATEGORIES."""
    if category_id == ALL_CATEGORIES:
        return list(tasks)
    return [t for t in tasks if t.category_id == category_id]


def _find(tasks, task_id: str) -> Task:
    for t in tasks:
        if t.id == task_id:
            return t
    raise InvalidReference(f"Unknown task: {task_id}")


def _swap(tasks, updated: Task) -> tuple[Task, ...]:
    return tuple(updated if t.id == updated.id else t for t in tasks)


def add_task(tasks, text: str, category_id: str) -> tuple[Task, ...]:
    """Append a manually added (non-recurring) task."""
    task = Task(id=new_id(), text=text, category_id=category_id)
    return (*tasks, task)


def toggle_task(tasks, task_id: str) -> tuple[Task, ...]:
    """
    Flip a simple task's completion.

    A composite task's completion follows its subtasks, so toggling it
    directly raises DerivedCompletionError.
    """
    task = _find(tasks, task_id)
    if task.kind is TaskKind.COMPOSITE:
        raise DerivedCompletionError(f"Task {task.text!r} is completed through its subtasks")
    return _swap(tasks, replace(task, done=not task.done))


def toggle_subtask(tasks, task_id: str, subtask_id: str) -> tuple[Task, ...]:
    """Flip one subtask; the parent's completion is re-derived."""
    task = _find(tasks, task_id)
    if not any(st.id == subtask_id for st in task.subtasks):
        raise InvalidReference(f"Unknown subtask: {subtask_id}")
    subtasks = tuple(
        replace(st, completed=not st.completed) if st.id == subtask_id else st
        for st in task.subtasks
    )
    return _swap(tasks, replace(task, subtasks=subtasks))


def delete_task(tasks, task_id: str) -> tuple[Task, ...]:
    _find(tasks, task_id)
    return tuple(t for t in tasks if t.id != task_id)


def add_subtask(tasks, task_id: str, text: str) -> tuple[Task, ...]:
    """Add an incomplete subtask, which makes the task composite and incomplete."""
    task = _find(tasks, task_id)
    subtask = Subtask(id=new_id(), text=text, completed=False)
    return _swap(tasks, replace(task, subtasks=(*task.subtasks, subtask)))


def delete_subtask(tasks, task_id: str, subtask_id: str) -> tuple[Task, ...]:
    """
    Remove a subtask.

    Removing the last one turns the task back into a simple task that keeps
    the completion it had just before.
    """
    task = _find(tasks, task_id)
    if not any(st.id == subtask_id for st in task.subtasks):
        raise InvalidReference(f"Unknown subtask: {subtask_id}")
    subtasks = tuple(st for st in task.subtasks if st.id != subtask_id)
    done = task.completed if not subtasks else task.done
    return _swap(tasks, replace(task, subtasks=subtasks, done=done))
