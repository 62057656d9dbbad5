from typing import Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field


class PageContent(BaseModel):
    """Content downloaded from a recipe page."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str
    final_url: str
    status_code: int
    html: str
    text: str
    title: str = ""
    soup: Optional[BeautifulSoup] = Field(default=None, exclude=True, repr=False, description="Parsed html, shared with the extraction stages")
