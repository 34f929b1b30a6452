# book_catalogue/models.py
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr
from pydantic.alias_generators import to_camel


class CreateRequest(BaseModel):
    # Presence checks happen in the repository, so every field is optional here.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateBookRequest(CreateRequest):
    title: Optional[str] = None
    author: Optional[str] = None
    isbn: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[int, float]] = None
    genre: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    date_published: Optional[str] = None
    pages: Optional[Union[int, float]] = None
    language: Optional[str] = None
    publisher: Optional[str] = None


class CreateReviewRequest(CreateRequest):
    book_id: Optional[str] = None
    author: Optional[str] = None
    # Number or numeric string; coerced to an int by the repository
    rating: Optional[Union[StrictInt, StrictFloat, StrictStr]] = None
    title: Optional[str] = None
    comment: Optional[str] = None
