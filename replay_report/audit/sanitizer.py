"""
Text sanitization for strings that leave the server.

Player names, chat and report reasons are user-controlled. Before they
are embedded in a webhook message they are escaped so chat markup cannot
change the formatting of the report, and the sender name is normalized so
it is accepted by the webhook endpoint.
"""

import re
from typing import Optional

SENSITIVE_CHARACTERS = ("\\", "*", "_", "~", "`", "|", ">", ":", "@")

# https://discord.com/developers/docs/resources/webhook#create-webhook
FORBIDDEN_NAME_SUBSTRINGS = ("clyde", "discord", "@", "#", ":", "```")
FORBIDDEN_NAMES = ("everyone", "here")

MAX_DISPLAY_NAME_LENGTH = 80

_MARKUP_PATTERN = re.compile("|".join(re.escape(char) for char in SENSITIVE_CHARACTERS))
_FORBIDDEN_PATTERNS = tuple(
    re.compile(re.escape(substring), re.IGNORECASE) for substring in FORBIDDEN_NAME_SUBSTRINGS
)


def escape_markup(text: Optional[str]) -> str:
    """
    Prefix every markup-sensitive character with a backslash.

    Each occurrence in the original text is escaped exactly once, so
    escaping already escaped text adds a backslash in front of the
    existing ones instead of collapsing them.

    Args:
        text: Text to escape; None is treated as empty

    Returns:
        Escaped text
    """
    if not text:
        return ""
    return _MARKUP_PATTERN.sub(lambda match: "\\" + match.group(0), text)


def normalize_display_name(name: Optional[str]) -> str:
    """
    Make a name acceptable as a webhook sender name.

    Exact reserved names get an underscore prefix and are returned as is.
    Otherwise forbidden substrings are masked with asterisks (case
    insensitive) and the result is cut to 80 characters.
    """
    name = name or ""

    for reserved in FORBIDDEN_NAMES:
        if name == reserved:
            return f"_{reserved}"

    for pattern, substring in zip(_FORBIDDEN_PATTERNS, FORBIDDEN_NAME_SUBSTRINGS):
        name = pattern.sub("*" * len(substring), name)

    return name[:MAX_DISPLAY_NAME_LENGTH]
