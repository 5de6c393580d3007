"""Text helpers shared by the engine and its log lines."""

from .constants import MAX_CONTEXT_MESSAGE_LENGTH, MAX_MESSAGE_PREVIEW_LENGTH
from .models import User, UserProfile


def truncate(text: str, limit: int = MAX_CONTEXT_MESSAGE_LENGTH) -> str:
    """Cut text to at most `limit` characters."""
    return text[:limit]


def preview(text: str | None, limit: int = MAX_MESSAGE_PREVIEW_LENGTH) -> str:
    """Short single-line rendering of a message for log lines."""
    if not text:
        return ""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1] + "…"


def format_user(user: User | UserProfile) -> str:
    """`First Last (@handle)` style author label."""
    name = " ".join(part for part in (user.first_name, user.last_name) if part)
    if user.username:
        return f"{name} (@{user.username})"
    return name


def format_user_detailed(user: User | UserProfile) -> str:
    parts = []
    if user.first_name:
        parts.append(f"Имя: {user.first_name}")
    if user.last_name:
        parts.append(f"Фамилия: {user.last_name}")
    if user.username:
        parts.append(f"Тэг: @{user.username}")
    if user.is_bot is not None:
        parts.append(f"Бот: {'Да' if user.is_bot else 'Нет'}")
    return ", ".join(parts)
