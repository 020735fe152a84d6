"""
Post model serialization tests
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from blog_api.models.post import AuthorName, Post, PostCreateRequest, PostUpdateRequest


def test_serialize_joins_author_names():
    post = Post(id="abc", author=AuthorName(firstName="Jane", lastName="Doe"), title="T", content="C")

    assert post.serialize() == {"id": "abc", "title": "T", "content": "C", "author": "Jane Doe"}


def test_create_request_requires_every_field():
    with pytest.raises(PydanticValidationError):
        PostCreateRequest(author={"firstName": "Jane", "lastName": "Doe"}, title="T")


def test_update_request_tracks_only_set_fields():
    request = PostUpdateRequest(id="abc", title="No more Christmases")

    assert request.model_dump(exclude_unset=True, exclude={"id"}) == {"title": "No more Christmases"}
