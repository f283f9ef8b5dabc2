import re
from typing import Optional

from tracker.database import models
from tracker.errors import InvalidColorError
from tracker.repositories.base import CrudRepository
from tracker.schemas import LabelCreate, LabelUpdate

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def normalize_color(color: Optional[str]) -> str:
    """Return ``color`` as an uppercase ``#RRGGBB`` string.

    Accepts 3 or 6 hex digits with or without a leading ``#``; the 3-digit
    shorthand is expanded (``f00`` -> ``#FF0000``).

    Raises:
        InvalidColorError: for anything else
    """
    match = _HEX_COLOR.match((color or "").strip())
    if not match:
        raise InvalidColorError(
            f'Color must be in format #RRGGBB (e.g., #FF0000). Received: "{color}"'
        )

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


class LabelRepository(CrudRepository):
    model = models.Label
    create_schema = LabelCreate
    update_schema = LabelUpdate
    entity_name = "Label"
    required_fields = frozenset({"name", "color"})
    timestamped = False
    order_by = ("name", "id")

    def prepare(self, values: dict) -> dict:
        if values.get("color") is not None:
            values["color"] = normalize_color(values["color"])
        return values
