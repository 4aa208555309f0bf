from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Wire models use camelCase keys, python code uses snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class GeneratedSite(CamelModel):
    id: str
    pages: Dict[str, str]
    components: Optional[Dict[str, str]] = None
    styles: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    def summary(self) -> dict:
        return {
            "id": self.id,
            "pages": list(self.pages.keys()),
            "timestamp": self.created_at.isoformat(),
        }


class ElementEdit(CamelModel):
    site_id: str
    element_id: str
    content: Optional[str] = None
    styles: Optional[Dict[str, Any]] = None


class GenerateRequest(BaseModel):
    description: Optional[str] = None
    # page keys and visual style the user asked for, passed on to the prompt
    pages: Optional[List[str]] = None
    style: Optional[str] = None


class EditRequest(CamelModel):
    element_id: str
    content: Optional[str] = None
    styles: Optional[Dict[str, Any]] = None
    style_text: Optional[str] = None
