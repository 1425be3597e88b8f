"""Tests for notifications and message lookup."""
from app.localization.helpers import get_translation, supported_locale
from app.schemas.notification import NotificationCode, NotificationLevel
from app.services.notification_service import NotificationService


def test_locale_resolution():
    assert supported_locale("ru-RU") == "ru"
    assert supported_locale("de") == "en"
    assert get_translation("tasks.deleted", "ru") == "Задача удалена"


def test_missing_keys_fall_back():
    assert get_translation("tasks.write_rejected", "ru", reason="quota") != "tasks.write_rejected"
    assert get_translation("no.such.key") == "no.such.key"
    assert get_translation("tasks.write_rejected", reason="quota").endswith(": quota")


def test_queue_keeps_newest_and_latest_survives_drain():
    notifier = NotificationService(locale="en", max_pending=2)
    notifier.success("tasks.created")
    notifier.success("tasks.updated")
    notifier.error("tasks.title_required", code=NotificationCode.VALIDATION)

    pending = notifier.drain()

    assert [n.message for n in pending] == ["Task updated successfully!", "Please enter a task title"]
    assert pending[-1].level == NotificationLevel.ERROR
    assert notifier.pending == []
    assert notifier.latest.code == NotificationCode.VALIDATION


def test_errors_default_to_remote_code():
    notifier = NotificationService(locale="en")

    assert notifier.error("tasks.delete_failed").code == NotificationCode.REMOTE
    assert notifier.success("tasks.deleted").code is None
