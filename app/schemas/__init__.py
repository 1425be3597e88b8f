"""Schema modules."""
from app.schemas.auth import AuthUser, AuthCallbackRequest, AuthErrorRequest, AuthStatusResponse
from app.schemas.category import Category, CategoryCreate
from app.schemas.common import FetchResult, PagingInfo, RecordFailure, WriteResult
from app.schemas.notification import Notification, NotificationCode, NotificationLevel
from app.schemas.record import FetchResponse, FieldError, MutationResponse, RecordResponse, RecordResult
from app.schemas.task import Task, TaskFilter, TaskForm, TaskPriority, TaskResponse
