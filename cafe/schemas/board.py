from pydantic import BaseModel
from typing import Dict, List
from datetime import datetime

from ..enums import BoardView
from .order import OrderDetail


class BoardSnapshot(BaseModel):
    """
    Orders grouped for one board. ``columns`` maps a status value to the
    orders currently in it; ``version`` changes only when the content does.
    """
    view: BoardView
    columns: Dict[str, List[OrderDetail]]
    active_count: int
    completed_count: int
    version: str
    generated_at: datetime
