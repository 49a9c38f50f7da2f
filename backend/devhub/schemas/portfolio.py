"""
Portfolio link schema: an external profile or project link shown on the portfolio page.
"""

from typing import Optional

from pydantic import Field

from devhub.schemas.common import RecordModel


class PortfolioLink(RecordModel):
    """
    A link (GitHub, LinkedIn, blog, ...) with its display position.

    Required fields (title, url, order) are optional at the type level so that
    the validation pass can report them as a 400 with the field name.
    `order` defines display sequence; uniqueness is not enforced.
    """

    title: Optional[str] = Field(default=None, description="Link label")
    url: Optional[str] = Field(default=None, description="Target URL")
    order: Optional[int] = Field(default=None, description="Display position, ascending")
    category: Optional[str] = Field(default=None, description="e.g. GitHub, LinkedIn, Blog")
    icon: Optional[str] = Field(default=None, description="Icon name or URL")
    description: Optional[str] = None
