from datetime import datetime

from .base import ApiModel

class EventOut(ApiModel):
    id: int
    request_id: int
    actor_id: int
    type: str
    from_value: str | None
    to_value: str | None
    note: str | None
    created_at: datetime | None = None
