"""
Post-related Pydantic models
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class AuthorName(BaseModel):
    firstName: str
    lastName: str

    @property
    def full_name(self) -> str:
        return f"{self.firstName} {self.lastName}"


class Post(BaseModel):
    """A persisted blog post"""
    id: str
    author: AuthorName
    title: str
    content: str

    def serialize(self) -> Dict[str, Any]:
        """Public representation with the author collapsed to one string"""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author.full_name,
        }


class PostCreateRequest(BaseModel):
    author: AuthorName
    title: str
    content: str


class PostUpdateRequest(BaseModel):
    id: Optional[str] = None
    author: Optional[AuthorName] = None
    title: Optional[str] = None
    content: Optional[str] = None


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    author: str


class PostListResponse(BaseModel):
    posts: List[PostResponse] = Field(default_factory=list)


# Fields a PUT request may change
UPDATABLE_FIELDS = ("title", "content", "author")
