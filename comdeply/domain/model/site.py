"""Site entity.

Sites are managed by the administration backend; the comment engine only
reads them to check that a thread is open and to find whose quota a new
comment counts against.
"""

from datetime import datetime

from pydantic import Field

from comdeply.domain.model.common import DomainModel
from comdeply.domain.value import SiteId, UserId
from comdeply.util.clock import utc_now


class Site(DomainModel):
    """Site that embeds the comment widget."""

    id: SiteId
    site_key: str = Field(min_length=1, max_length=100)
    owner_id: UserId
    name: str = Field(min_length=1, max_length=255)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
