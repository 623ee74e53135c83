# themes.py
# Icons for practice themes, plus the sharpen actions suggested in /help.

THEME_ICONS = {
    "code": "💻",
    "music": "🎹",
    "writing": "✍️",
    "fitness": "🏋️",
    "language": "🌐",
    "book": "📖",
}

DEFAULT_ICON = "book"

SUGGESTED_ACTIONS = [
    "open the flashcards",
    "one push-up position",
    "write one line",
    "play one scale",
]


def icon_for(name: str) -> str:
    return THEME_ICONS.get((name or "").lower(), THEME_ICONS[DEFAULT_ICON])
