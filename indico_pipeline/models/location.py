"""Where an agenda lives: site, optional subdirectory and an identifier."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_SITE = "indico.cern.ch"


class AgendaLocation(BaseModel):
    """Normalized reference to a conference or a category on an Indico site."""

    model_config = ConfigDict(frozen=True)

    site: str  # e.g. "indico.cern.ch"
    subdirectory: str = ""  # e.g. "indico" for "https://host/indico/event/1"
    identifier: str  # conference id or category id

    @classmethod
    def from_conference_id(cls, conference_id: int | str, site: str = DEFAULT_SITE) -> "AgendaLocation":
        """Location for a conference whose id is already known."""
        return cls(site=site, identifier=str(conference_id))

    def base_url(self, https: bool = True) -> str:
        """Scheme, site and subdirectory, without a trailing slash."""
        url = f"http{'s' if https else ''}://{self.site}"
        if self.subdirectory.strip():
            url += f"/{self.subdirectory}"
        return url

    def __str__(self) -> str:
        return f"Agenda at {self.site} with id {self.identifier}"


class AgendaEvent(BaseModel):
    """One meeting listed in a category feed."""

    model_config = ConfigDict(frozen=True)

    location: AgendaLocation
    title: str
    url: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
