import pytest
from fastapi import BackgroundTasks

from app.models import BookStatus
from app.services import notification_trigger
from app.services.notification_service import process_wishlist_notifications
from app.services.notification_trigger import (
    schedule_wishlist_notifications,
    should_trigger_notifications,
    submit_celery_run,
    trigger_wishlist_notifications,
)

BOOK_ID = "0b6f3c52-8a4e-4f0e-9c61-3d2b7e5a9f10"

STATUSES = [None, BookStatus.AVAILABLE, BookStatus.BORROWED]


class FakeTask:
    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def delay(self, *args):
        if self.error:
            raise self.error
        self.calls.append(args)


@pytest.mark.parametrize("previous", STATUSES)
@pytest.mark.parametrize("new", STATUSES)
def test_only_borrowed_to_available_triggers(previous, new):
    expected = previous == BookStatus.BORROWED and new == BookStatus.AVAILABLE
    assert should_trigger_notifications(previous, new) is expected


def test_transition_schedules_exactly_one_run(session_factory, notifier):
    tasks = BackgroundTasks()

    scheduled = trigger_wishlist_notifications(
        tasks,
        BookStatus.BORROWED,
        BookStatus.AVAILABLE,
        BOOK_ID,
        session_factory,
        notifier,
    )

    assert scheduled is True
    assert len(tasks.tasks) == 1
    task = tasks.tasks[0]
    assert task.func is process_wishlist_notifications
    assert task.args == (BOOK_ID, session_factory, notifier)


@pytest.mark.parametrize(
    "previous, new",
    [
        (BookStatus.AVAILABLE, BookStatus.BORROWED),
        (BookStatus.AVAILABLE, BookStatus.AVAILABLE),
        (BookStatus.BORROWED, BookStatus.BORROWED),
        (BookStatus.BORROWED, None),
    ],
)
def test_other_transitions_schedule_nothing(session_factory, notifier, previous, new):
    tasks = BackgroundTasks()

    scheduled = trigger_wishlist_notifications(
        tasks,
        previous,
        new,
        BOOK_ID,
        session_factory,
        notifier,
    )

    assert scheduled is False
    assert tasks.tasks == []


@pytest.mark.asyncio
async def test_celery_backend_publishes_after_the_response(monkeypatch, session_factory, notifier):
    fake_task = FakeTask()
    monkeypatch.setattr(notification_trigger, "process_wishlist_notifications_task", fake_task)
    tasks = BackgroundTasks()

    scheduled = schedule_wishlist_notifications(
        tasks,
        BOOK_ID,
        session_factory,
        notifier,
        backend="celery",
    )

    assert scheduled is True
    assert fake_task.calls == []
    assert len(tasks.tasks) == 1
    assert tasks.tasks[0].func is submit_celery_run

    await tasks()

    assert fake_task.calls == [(BOOK_ID,)]


@pytest.mark.asyncio
async def test_failed_publish_does_not_raise(monkeypatch, session_factory, notifier):
    fake_task = FakeTask(error=ConnectionError("broker is down"))
    monkeypatch.setattr(notification_trigger, "process_wishlist_notifications_task", fake_task)
    tasks = BackgroundTasks()

    scheduled = schedule_wishlist_notifications(
        tasks,
        BOOK_ID,
        session_factory,
        notifier,
        backend="celery",
    )
    await tasks()

    assert scheduled is True
    assert fake_task.calls == []
    assert submit_celery_run(BOOK_ID) is False


def test_failed_scheduling_does_not_raise(session_factory, notifier):
    class BrokenTasks:
        def add_task(self, *args, **kwargs):
            raise RuntimeError("response already sent")

    scheduled = schedule_wishlist_notifications(
        BrokenTasks(),
        BOOK_ID,
        session_factory,
        notifier,
        backend="background",
    )

    assert scheduled is False
