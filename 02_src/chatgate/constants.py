"""Bounds, probabilities and catalogs used by the routing engine."""

MAX_CHAT_HISTORY = 20
CONTEXT_MESSAGE_LIMIT = 10
MAX_CONTEXT_MESSAGE_LENGTH = 300
MAX_MESSAGE_PREVIEW_LENGTH = 50

REACTION_PROBABILITY = 0.15
TROLL_COMMENT_PROBABILITY = 0.08

TRANSCRIPTION_LANGUAGE = "ru"

# Reactions accepted by the Telegram Bot API
AVAILABLE_REACTIONS = (
    "👍", "👎", "❤", "🔥", "🥰", "👏", "😁", "🤔", "🤯", "😱",
    "🤬", "😢", "🎉", "🤩", "🤮", "💩", "🙏", "👌", "🕊", "🤡",
    "🥱", "🥴", "😍", "🐳", "❤‍🔥", "🌚", "🌭", "💯", "🤣", "⚡",
    "🍌", "🏆", "💔", "🤨", "😐", "🍓", "🍾", "💋", "🖕", "😈",
    "😴", "😭", "🤓", "👻", "👨‍💻", "👀", "🎃", "🙈", "😇", "😨",
    "🤝", "✍", "🤗", "🫡", "🎅", "🎄", "☃", "💅", "🤪", "🗿",
    "🆒", "💘", "🙉", "🦄", "😘", "💊", "🙊", "😎", "👾", "🤷‍♂",
    "🤷", "🤷‍♀", "😡",
)

GENERATION_ERROR_REPLY = "Извините, произошла ошибка при обработке запроса."
TRANSCRIPTION_FAILED_REPLY = "Не удалось расшифровать это сообщение 😔"

# Telegram Bot API limit for one text message
MAX_MESSAGE_LENGTH = 4096
