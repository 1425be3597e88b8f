"""User-facing message catalogue."""

TRANSLATIONS = {
    "en": {
        "errors.resource_not_found": "Resource not found",
        "errors.not_authenticated": "Not authenticated",
        "errors.validation_error": "Validation error",
        "errors.upstream_failure": "The record store could not complete the request",
        "tasks.title_required": "Please enter a task title",
        "tasks.load_failed": "Failed to load tasks. Please try again.",
        "tasks.created": "Task created successfully!",
        "tasks.create_failed": "Failed to create task. Please try again.",
        "tasks.updated": "Task updated successfully!",
        "tasks.update_failed": "Failed to update task. Please try again.",
        "tasks.completed": "Task completed! 🎉",
        "tasks.reopened": "Task marked as pending",
        "tasks.toggle_failed": "Failed to update task status. Please try again.",
        "tasks.deleted": "Task deleted successfully",
        "tasks.delete_failed": "Failed to delete task. Please try again.",
        "tasks.search_failed": "Failed to search tasks. Please try again.",
        "tasks.not_found": "Task not found",
        "tasks.write_rejected": "The record store rejected the task: {reason}",
        "categories.name_required": "Please enter a category name",
        "categories.load_failed": "Failed to load categories. Using default categories.",
        "categories.created": "Category created successfully!",
        "categories.create_failed": "Failed to create category. Please try again.",
        "categories.deleted": "Category deleted successfully",
        "categories.delete_failed": "Failed to delete category. Please try again.",
        "auth.failed": "Authentication failed. Please try again.",
    },
    "ru": {
        "errors.resource_not_found": "Ресурс не найден",
        "errors.not_authenticated": "Требуется аутентификация",
        "errors.validation_error": "Ошибка валидации",
        "errors.upstream_failure": "Хранилище записей не смогло выполнить запрос",
        "tasks.title_required": "Введите название задачи",
        "tasks.load_failed": "Не удалось загрузить задачи. Попробуйте ещё раз.",
        "tasks.created": "Задача создана!",
        "tasks.create_failed": "Не удалось создать задачу. Попробуйте ещё раз.",
        "tasks.updated": "Задача обновлена!",
        "tasks.update_failed": "Не удалось обновить задачу. Попробуйте ещё раз.",
        "tasks.completed": "Задача выполнена! 🎉",
        "tasks.reopened": "Задача снова в работе",
        "tasks.toggle_failed": "Не удалось изменить статус задачи.",
        "tasks.deleted": "Задача удалена",
        "tasks.delete_failed": "Не удалось удалить задачу. Попробуйте ещё раз.",
        "categories.load_failed": "Не удалось загрузить категории. Используются категории по умолчанию.",
    },
}
