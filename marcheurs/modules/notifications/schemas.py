from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Literal


class WebhookEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    table: str
    type: Literal["INSERT", "UPDATE", "DELETE"]
    record: Optional[Dict[str, Any]] = None
    old_record: Optional[Dict[str, Any]] = None
    db_schema: Optional[str] = Field(default=None, alias="schema")


class DispatchResult(BaseModel):
    status: Literal["sent", "skipped"]
    notices: List[str] = []
    reason: Optional[str] = None
