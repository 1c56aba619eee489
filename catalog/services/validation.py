"""Field checks for inbound game payloads."""
from typing import Any, Dict, List

from ..models import PLATFORMS, STATUSES, TITLE_MAX_LENGTH


def validate_game_payload(data: Any) -> Dict[str, List[str]]:
    """Check a create/update payload.

    Rules
    -----
    * ``title`` is required, a string, not blank, at most
      ``TITLE_MAX_LENGTH`` characters.
    * ``platform`` is required and one of ``PLATFORMS``.
    * ``status`` is required and one of ``STATUSES``.

    Returns:
        ``{field: [message, ...]}`` for every failing field; an empty dict
        when the payload is valid.  A payload that is not a JSON object is
        reported under the ``body`` key.
    """
    if not isinstance(data, dict):
        return {'body': ['Request body must be a JSON object.']}

    errors: Dict[str, List[str]] = {}

    title = data.get('title')
    if title is None or (isinstance(title, str) and not title.strip()):
        errors['title'] = ['The title field is required.']
    elif not isinstance(title, str):
        errors['title'] = ['The title field must be a string.']
    elif len(title) > TITLE_MAX_LENGTH:
        errors['title'] = [f'The title field must be at most {TITLE_MAX_LENGTH} characters.']

    for field, allowed in (('platform', PLATFORMS), ('status', STATUSES)):
        value = data.get(field)
        if value is None or value == '':
            errors[field] = [f'The {field} field is required.']
        elif value not in allowed:
            errors[field] = [f"The {field} field must be one of: {', '.join(allowed)}."]

    return errors
