"""
Paper models: metadata, rich-text content blocks and service inputs.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class Link(BaseModel):
    href: str


class Text(BaseModel):
    """Inline text run with optional marks."""

    type: Literal["text"] = "text"
    text: str
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    code: Optional[bool] = None
    link: Optional[Link] = None


class Heading(BaseModel):
    type: Literal["heading"] = "heading"
    level: int = Field(1, ge=1, le=6)
    content: List[Text] = []


class Paragraph(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    content: List[Text] = []


class Blockquote(BaseModel):
    type: Literal["blockquote"] = "blockquote"
    content: List["Block"] = []


class ListItem(BaseModel):
    type: Literal["list_item"] = "list_item"
    content: List["Block"] = []


class OrderedList(BaseModel):
    type: Literal["ordered_list"] = "ordered_list"
    content: List[ListItem] = []


class BulletList(BaseModel):
    type: Literal["bullet_list"] = "bullet_list"
    content: List[ListItem] = []


class TodoItem(BaseModel):
    type: Literal["todo_item"] = "todo_item"
    checked: Optional[bool] = None
    content: List["Block"] = []


class TodoList(BaseModel):
    type: Literal["todo_list"] = "todo_list"
    content: List[TodoItem] = []


class CodeBlock(BaseModel):
    type: Literal["code_block"] = "code_block"
    language: Optional[str] = None
    content: List[Text] = []


Block = Annotated[
    Union[Heading, Paragraph, Blockquote, OrderedList, BulletList, TodoList, CodeBlock],
    Field(discriminator="type"),
]

for _model in (Blockquote, ListItem, TodoItem, OrderedList, BulletList, TodoList):
    _model.model_rebuild()


class Paper(BaseModel):
    """Paper metadata. Content lives in its own collection."""

    id: str
    owner_id: str
    created_at: int
    updated_at: int
    deleted_at: Optional[int] = None
    title: Optional[str] = None

    @model_validator(mode="after")
    def updated_after_created(self) -> "Paper":
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not precede created_at")
        return self

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class PaperContent(BaseModel):
    id: str
    content: Optional[List[Block]] = None


class CreatePaperInput(BaseModel):
    title: Optional[str] = None
    content: Optional[List[Block]] = None


class UpdatePaperInput(BaseModel):
    """Unset fields are left untouched."""

    title: Optional[str] = None
    content: Optional[List[Block]] = None


class PaperOrderField(str, Enum):
    """Sortable paper fields."""
    ID = "ID"
    UPDATED_AT = "UPDATED_AT"

    @property
    def storage_field(self) -> str:
        return _ORDER_STORAGE_FIELDS[self]


_ORDER_STORAGE_FIELDS = {
    PaperOrderField.ID: "_id",
    PaperOrderField.UPDATED_AT: "updated_at",
}

PAPER_PROJECTION = {
    "_id": 1,
    "owner_id": 1,
    "created_at": 1,
    "updated_at": 1,
    "deleted_at": 1,
    "title": 1,
}

PAPER_CONTENT_PROJECTION = {
    "_id": 1,
    "content": 1,
}
