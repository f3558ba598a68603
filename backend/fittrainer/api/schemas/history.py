"""Schemas for the plan action log endpoint."""
from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel


class PlanHistoryItem(BaseModel):
    id: UUID
    created_at: str
    action_type: str
    reason: Optional[str] = None
    payload: Dict[str, Any]


class PlanHistoryResponse(BaseModel):
    items: List[PlanHistoryItem]
    request_id: str
