from pydantic import BaseModel, ConfigDict, Field, AnyHttpUrl, AfterValidator, TypeAdapter, field_validator, ValidationError
from datetime import datetime
from typing import Annotated, Optional, List

# Schemas pour les pages

SLUG_PATTERN = r"^[a-z0-9-]+$"

_http_url = TypeAdapter(AnyHttpUrl)

def _check_http_url(value: str) -> str:
    # on valide l'URL mais on garde la chaîne telle qu'envoyée
    try:
        _http_url.validate_python(value)
    except ValidationError as exc:
        raise ValueError(f"invalid http(s) URL: {exc.errors()[0]['msg']}")
    return value

HttpUrlString = Annotated[str, AfterValidator(_check_http_url)]

class PageCreate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    parent_id: Optional[int] = None
    icon: Optional[str] = Field(default=None, max_length=50)

class PageUpdate(BaseModel):
    """Only the fields explicitly set are written (``exclude_unset``)."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    icon: Optional[str] = Field(default=None, max_length=50)
    cover_url: Optional[HttpUrlString] = None
    is_public: Optional[bool] = None
    public_slug: Optional[str] = Field(default=None, min_length=3, max_length=100, pattern=SLUG_PATTERN)

    @field_validator("title", "is_public")
    @classmethod
    def not_null(cls, value, info):
        # colonnes NOT NULL : None explicite refusé
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)

class PageMove(BaseModel):
    """parent_id omitted keeps the current parent, explicit None moves to root."""
    parent_id: Optional[int] = None
    position: Optional[int] = Field(default=None, ge=0)

    @property
    def parent_given(self) -> bool:
        return "parent_id" in self.model_fields_set

class PageResponse(BaseModel):
    id: int
    organization_id: int
    parent_id: Optional[int]
    position: int
    title: str
    icon: Optional[str]
    cover_url: Optional[str]
    is_public: bool
    public_slug: Optional[str]
    trashed_at: Optional[datetime]
    created_by_id: int
    updated_by_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class PageNode(PageResponse):
    children: List["PageNode"] = []

PageNode.model_rebuild()
