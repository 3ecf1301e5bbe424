from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class FeedItem(BaseModel):
    guid: str
    guid_is_permalink: bool = False
    categories: List[str]
    link: str
    title: str
    description: str


class Channel(BaseModel):
    title: str
    link: str
    description: Optional[str] = None
    generator: Optional[str] = None
    docs: Optional[str] = None
    ttl: Optional[int] = None
    last_build_date: Optional[datetime] = None
    items: List[FeedItem] = []


class ErrorResponse(BaseModel):
    code: int
    message: str
