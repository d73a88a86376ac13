"""Storage and dedup key generation.

Archival keys (blob storage)::

    {YYYY-MM-DD}/{epoch_millis}_{base_name}.{extension}

Dedup keys (marker store)::

    message_processed_{message_id}
    media_group_processed_{media_group_id}
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone

MESSAGE_KEY_PREFIX = "message_processed_"
MEDIA_GROUP_KEY_PREFIX = "media_group_processed_"

_EXTENSION_RE = re.compile(r"\.[^/.]+$")


class InvalidKeyInput(ValueError):
    """Raised when a key cannot be built from the given input."""


@dataclass(frozen=True)
class Valid:
    value: object


@dataclass(frozen=True)
class Invalid:
    message: str


ValidationResult = Valid | Invalid


def validate_file_name(file_name: object) -> ValidationResult:
    """Check that *file_name* can produce an archival key."""
    if not isinstance(file_name, str):
        return Invalid("Filename must be a string")
    if not file_name:
        return Invalid("Filename cannot be empty")
    if "." not in file_name:
        return Invalid("File must have an extension")
    if file_name.endswith("."):
        return Invalid("File cannot end with dot but have no extension")
    return Valid(file_name)


def validate_message_id(message_id: object) -> ValidationResult:
    # bool is an int subclass but never a message id
    if isinstance(message_id, bool) or not isinstance(message_id, int):
        return Invalid("Message ID must be an integer")
    return Valid(message_id)


def validate_media_group_id(media_group_id: object) -> ValidationResult:
    if not isinstance(media_group_id, str):
        return Invalid("Media group ID must be a string")
    if not media_group_id:
        return Invalid("Media group ID cannot be empty")
    return Valid(media_group_id)


def _unwrap(result: ValidationResult) -> object:
    if isinstance(result, Invalid):
        raise InvalidKeyInput(result.message)
    return result.value


def generate_archive_key(file_name: str, now: datetime | None = None) -> str:
    """Build a date-foldered, timestamped blob key for *file_name*.

    Args:
        file_name: Original file name; must carry a non-empty extension.
        now: Instant to embed. Defaults to the current UTC time.

    Returns:
        A key such as ``2024-01-15/1705314600000_photo.jpg``.

    Raises:
        InvalidKeyInput: If the file name is empty or has no extension.
    """
    name = _unwrap(validate_file_name(file_name))

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    extension = name.rsplit(".", 1)[-1]
    base_name = _EXTENSION_RE.sub("", name)

    date_folder = now.astimezone(timezone.utc).strftime("%Y-%m-%d")
    timestamp = int(now.timestamp() * 1000)

    return f"{date_folder}/{timestamp}_{base_name}.{extension}"


def generate_message_key(message_id: int) -> str:
    """Dedup key for a single message. Zero and negative ids are valid."""
    return f"{MESSAGE_KEY_PREFIX}{_unwrap(validate_message_id(message_id))}"


def generate_media_group_key(media_group_id: str) -> str:
    """Dedup key for an album."""
    return f"{MEDIA_GROUP_KEY_PREFIX}{_unwrap(validate_media_group_id(media_group_id))}"
