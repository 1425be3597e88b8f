"""Task board: UI-ready task and category state kept in step with the record store."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel

from app.core.exceptions import TaskboardError
from app.crud.category import CRUDCategory
from app.crud.task import CRUDTask
from app.schemas.category import Category, CategoryCreate
from app.schemas.common import WriteResult
from app.schemas.notification import NotificationCode
from app.schemas.task import Task, TaskFilter, TaskForm
from app.services.auth_service import AuthSession, AuthState
from app.services.notification_service import NotificationService
from app.utils.dates import start_of_day, utcnow, utcnow_iso

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: Tuple[Category, ...] = (
    Category(id="default-1", name="Personal", color="#3b82f6"),
    Category(id="default-2", name="Work", color="#8b5cf6"),
    Category(id="default-3", name="Shopping", color="#10b981"),
    Category(id="default-4", name="Health", color="#f59e0b"),
)


class CollectionState(str, Enum):
    """Load state of a board collection."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


class BoardStats(BaseModel):
    """Dashboard counters."""

    total: int
    completed: int
    pending: int
    completion_rate: int


def filter_tasks(
    tasks: Iterable[Task],
    *,
    category_id: str = "",
    mode: TaskFilter = TaskFilter.ALL,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Displayed subset: category intersection first, then the filter mode."""
    now = now or datetime.now().astimezone()
    filtered = list(tasks)

    if category_id:
        filtered = [task for task in filtered if task.category_id == category_id]

    if mode == TaskFilter.COMPLETED:
        return [task for task in filtered if task.is_completed]
    if mode == TaskFilter.PENDING:
        return [task for task in filtered if not task.is_completed]
    if mode == TaskFilter.TODAY:
        today = now.date()
        return [task for task in filtered if task.due_date is not None and task.due_date == today]
    if mode == TaskFilter.OVERDUE:
        return [
            task
            for task in filtered
            if task.due_date is not None
            and start_of_day(task.due_date, like=now) < now
            and not task.is_completed
        ]
    return filtered


def compute_category_counts(tasks: Sequence[Task], categories: Sequence[Category]) -> Dict[str, int]:
    """Open (not completed) tasks per category id."""
    counts = {category.id: 0 for category in categories}
    for task in tasks:
        if not task.is_completed and task.category_id in counts:
            counts[task.category_id] += 1
    return counts


def compute_stats(tasks: Sequence[Task]) -> BoardStats:
    total = len(tasks)
    completed = sum(1 for task in tasks if task.is_completed)
    return BoardStats(
        total=total,
        completed=completed,
        pending=total - completed,
        completion_rate=round(completed / total * 100) if total else 0,
    )


class TaskBoard:
    """In-memory tasks and categories for the signed-in user.

    Collections are immutable tuples replaced on every change, so derived
    category counts are recomputed only when either reference changes.
    Every mutation takes a per-task generation. A response is dropped only when
    a newer generation for the same task has already been applied; failed
    requests never apply, so they cannot hide an older confirmed change.
    """

    def __init__(
        self,
        tasks_repo: CRUDTask,
        categories_repo: CRUDCategory,
        notifier: NotificationService,
        auth: Optional[AuthSession] = None,
    ):
        self.tasks_repo = tasks_repo
        self.categories_repo = categories_repo
        self.notifier = notifier
        self.auth = auth

        self.tasks_state = CollectionState.UNLOADED
        self.categories_state = CollectionState.UNLOADED
        self._tasks: Tuple[Task, ...] = ()
        self._categories: Tuple[Category, ...] = ()

        self.form = TaskForm()
        self.editing_task_id: Optional[str] = None
        self.selected_category = ""
        self.filter_mode = TaskFilter.ALL

        self._generations: Dict[str, int] = {}
        self._applied: Dict[str, int] = {}
        self._counts_source: Tuple[Optional[tuple], Optional[tuple]] = (None, None)
        self._counted_categories: Tuple[Category, ...] = ()
        self.category_counts: Dict[str, int] = {}
        self.counts_revision = 0

    # -- state ---------------------------------------------------------------

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def categories(self) -> Tuple[Category, ...]:
        """Categories with their derived ``task_count`` filled in."""
        return self._counted_categories

    @property
    def owner(self) -> str:
        return self.auth.email_address if self.auth else ""

    def _set_tasks(self, tasks: Iterable[Task]) -> None:
        self._tasks = tuple(tasks)
        self._refresh_counts()

    def _set_categories(self, categories: Iterable[Category]) -> None:
        self._categories = tuple(categories)
        self._refresh_counts()

    def _refresh_counts(self) -> None:
        tasks_ref, categories_ref = self._counts_source
        if tasks_ref is self._tasks and categories_ref is self._categories:
            return
        self._counts_source = (self._tasks, self._categories)

        counts = compute_category_counts(self._tasks, self._categories)
        categories_changed = categories_ref is not self._categories
        if counts == self.category_counts and not categories_changed:
            return

        self._counted_categories = tuple(
            category.model_copy(update={"task_count": counts.get(category.id, 0)})
            for category in self._categories
        )
        if counts != self.category_counts:
            self.category_counts = counts
            self.counts_revision += 1

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((task for task in self._tasks if task.id == task_id), None)

    def get_category(self, category_id: str) -> Optional[Category]:
        return next((category for category in self._counted_categories if category.id == category_id), None)

    def filtered_tasks(
        self,
        mode: Optional[TaskFilter] = None,
        category_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Task]:
        return filter_tasks(
            self._tasks,
            category_id=self.selected_category if category_id is None else category_id,
            mode=self.filter_mode if mode is None else mode,
            now=now,
        )

    @property
    def stats(self) -> BoardStats:
        return compute_stats(self._tasks)

    def _next_generation(self, task_id: str) -> int:
        generation = self._generations.get(task_id, 0) + 1
        self._generations[task_id] = generation
        return generation

    def _is_stale(self, task_id: str, generation: int) -> bool:
        if self._applied.get(task_id, 0) > generation:
            logger.debug(f"Dropping stale response for task {task_id} (generation {generation})")
            return True
        return False

    def _forget_task(self, task_id: str) -> None:
        self._generations.pop(task_id, None)
        self._applied.pop(task_id, None)

    def _current_or_missing(self, task_id: str) -> Optional[Task]:
        """Task still on the board, or None after a not-found notification."""
        current = self.get_task(task_id)
        if current is None:
            logger.warning(f"Task {task_id} left the board while its update was in flight")
            self.notifier.error("tasks.not_found", code=NotificationCode.NOT_FOUND)
        return current

    def _replace_task(self, updated: Task, generation: int) -> None:
        self._applied[updated.id] = generation
        self._set_tasks(updated if task.id == updated.id else task for task in self._tasks)

    # -- lifecycle -----------------------------------------------------------

    def reset(self) -> None:
        """Discard local copies, e.g. after sign-out."""
        self.tasks_state = CollectionState.UNLOADED
        self.categories_state = CollectionState.UNLOADED
        self._generations.clear()
        self._applied.clear()
        self._set_tasks(())
        self._set_categories(())
        self.cancel_edit()

    async def handle_auth_change(self, previous: AuthState, current: AuthState) -> None:
        if current == AuthState.AUTHENTICATED and previous != AuthState.AUTHENTICATED:
            await self.load_all()
        elif previous == AuthState.AUTHENTICATED and current != AuthState.AUTHENTICATED:
            self.reset()

    async def load_all(self) -> None:
        await asyncio.gather(self.load_tasks(), self.load_categories())

    async def load_tasks(self) -> None:
        self.tasks_state = CollectionState.LOADING
        try:
            result = await self.tasks_repo.fetch()
        except TaskboardError as exc:
            logger.error(f"Failed to load tasks: {exc}")
            self.notifier.error("tasks.load_failed")
            self._set_tasks(())
            self.tasks_state = CollectionState.LOAD_FAILED
            return

        self._set_tasks(Task.from_record(record) for record in result.records)
        self.tasks_state = CollectionState.LOADED
        logger.info(f"Loaded {len(self._tasks)} of {result.total} tasks")

    async def load_categories(self) -> None:
        self.categories_state = CollectionState.LOADING
        try:
            result = await self.categories_repo.fetch()
        except TaskboardError as exc:
            logger.error(f"Failed to load categories: {exc}")
            self.notifier.error("categories.load_failed")
            self._set_categories(DEFAULT_CATEGORIES)
            self.categories_state = CollectionState.LOAD_FAILED
            return

        categories = [Category.from_record(record) for record in result.records]
        if not categories:
            logger.info("No categories stored, using defaults")
            categories = list(DEFAULT_CATEGORIES)
        self._set_categories(categories)
        self.categories_state = CollectionState.LOADED

    # -- form ----------------------------------------------------------------

    def start_edit(self, task_id: str) -> Optional[TaskForm]:
        task = self.get_task(task_id)
        if task is None:
            return None
        self.editing_task_id = task_id
        self.form = TaskForm.from_task(task)
        return self.form

    def cancel_edit(self) -> None:
        self.editing_task_id = None
        self.form = TaskForm()

    def _validate_title(self, form: TaskForm) -> bool:
        if form.title.strip():
            return True
        self.notifier.error("tasks.title_required", code=NotificationCode.VALIDATION)
        return False

    def _report_rejection(self, result: WriteResult, fallback_key: str) -> None:
        if result.failures and result.failures[0].message:
            self.notifier.error("tasks.write_rejected", reason=result.failures[0].message)
        else:
            self.notifier.error(fallback_key)

    # -- task mutations ------------------------------------------------------

    async def create_task(self, form: Optional[TaskForm] = None) -> Optional[Task]:
        """Create a task from the form; prepended locally once the store confirms it."""
        form = form if form is not None else self.form
        self.form = form
        if not self._validate_title(form):
            return None

        try:
            result = await self.tasks_repo.create(form.to_create_record(owner=self.owner))
        except TaskboardError as exc:
            logger.error(f"Failed to create task: {exc}")
            self.notifier.error("tasks.create_failed")
            return None

        if not result.records:
            self._report_rejection(result, "tasks.create_failed")
            return None

        task = Task.from_record(result.first)
        self._set_tasks((task,) + self._tasks)
        self.cancel_edit()
        self.notifier.success("tasks.created")
        return task

    async def edit_task(self, task_id: Optional[str] = None, form: Optional[TaskForm] = None) -> Optional[Task]:
        """Save the form over an existing task, keeping its position."""
        task_id = task_id or self.editing_task_id
        form = form if form is not None else self.form
        self.form = form
        if not task_id or self.get_task(task_id) is None:
            self.notifier.error("tasks.not_found", code=NotificationCode.NOT_FOUND)
            return None
        if not self._validate_title(form):
            return None

        generation = self._next_generation(task_id)
        try:
            result = await self.tasks_repo.update(form.to_update_record(task_id))
        except TaskboardError as exc:
            logger.error(f"Failed to update task {task_id}: {exc}")
            self.notifier.error("tasks.update_failed")
            return None

        if self._is_stale(task_id, generation):
            return self.get_task(task_id)
        if not result.records:
            self._report_rejection(result, "tasks.update_failed")
            return None

        current = self._current_or_missing(task_id)
        if current is None:
            return None
        updated = Task.from_record(result.first, base=current)
        self._replace_task(updated, generation)
        self.cancel_edit()
        self.notifier.success("tasks.updated")
        return updated

    async def toggle_completion(self, task_id: str) -> Optional[Task]:
        """Flip completion; local state follows only the store's confirmation."""
        task = self.get_task(task_id)
        if task is None:
            return None

        completed = not task.is_completed
        generation = self._next_generation(task_id)
        try:
            result = await self.tasks_repo.update(
                {"Id": task_id, "is_completed": completed, "updated_at": utcnow_iso()}
            )
        except TaskboardError as exc:
            logger.error(f"Failed to toggle task {task_id}: {exc}")
            self.notifier.error("tasks.toggle_failed")
            return None

        if self._is_stale(task_id, generation):
            return self.get_task(task_id)
        if not result.records:
            self._report_rejection(result, "tasks.toggle_failed")
            return None

        current = self._current_or_missing(task_id)
        if current is None:
            return None
        updated = Task.from_record(result.first, base=current).model_copy(
            update={"is_completed": completed, "updated_at": utcnow()}
        )
        self._replace_task(updated, generation)
        self.notifier.success("tasks.completed" if completed else "tasks.reopened")
        return updated

    async def delete_task(self, task_id: str) -> bool:
        """Remove a task locally after the store accepts the delete."""
        try:
            await self.tasks_repo.delete(task_id)
        except TaskboardError as exc:
            logger.error(f"Failed to delete task {task_id}: {exc}")
            self.notifier.error("tasks.delete_failed")
            return False

        self._set_tasks(task for task in self._tasks if task.id != task_id)
        self._forget_task(task_id)
        if self.editing_task_id == task_id:
            self.cancel_edit()
        self.notifier.success("tasks.deleted")
        return True

    async def search_tasks(self, term: str) -> List[Task]:
        """Store-side search; the board's own collection is left untouched."""
        try:
            result = await self.tasks_repo.search(term)
        except TaskboardError as exc:
            logger.error(f"Failed to search tasks for {term!r}: {exc}")
            self.notifier.error("tasks.search_failed")
            return []
        return [Task.from_record(record) for record in result.records]

    # -- category mutations --------------------------------------------------

    async def create_category(self, data: CategoryCreate) -> Optional[Category]:
        if not data.name.strip():
            self.notifier.error("categories.name_required", code=NotificationCode.VALIDATION)
            return None

        try:
            result = await self.categories_repo.create(data.to_record(owner=self.owner))
        except TaskboardError as exc:
            logger.error(f"Failed to create category: {exc}")
            self.notifier.error("categories.create_failed")
            return None

        if not result.records:
            self.notifier.error("categories.create_failed")
            return None

        category = Category.from_record(result.first)
        self._set_categories(
            sorted(self._categories + (category,), key=lambda item: item.name.lower())
        )
        self.notifier.success("categories.created")
        return self.get_category(category.id)

    async def delete_category(self, category_id: str) -> bool:
        """Tasks keep their now-dangling category reference."""
        try:
            await self.categories_repo.delete(category_id)
        except TaskboardError as exc:
            logger.error(f"Failed to delete category {category_id}: {exc}")
            self.notifier.error("categories.delete_failed")
            return False

        self._set_categories(category for category in self._categories if category.id != category_id)
        if self.selected_category == category_id:
            self.selected_category = ""
        self.notifier.success("categories.deleted")
        return True
