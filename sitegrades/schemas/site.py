from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sitegrades.models.site import Site
from sitegrades.models.server import Server


class ServerOut(BaseModel):
    """One machine serving a site, as rendered in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    address: str
    ssl_grade: str = Field("", description="Per-server SSL grade")
    country: str = ""
    owner: str = ""


class SiteOut(BaseModel):
    """A site with its grading metadata and, when hydrated, its servers."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    domain: str
    title: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    grade: str = ""
    previous_grade: str = ""
    logo: str = ""
    is_down: bool = False
    servers_changed: bool = False
    servers: List[ServerOut] = Field(default_factory=list)

    @classmethod
    def from_row(cls, site: Site, servers: Optional[List[Server]] = None) -> "SiteOut":
        """Map a `site` row (and optionally its `server` rows) to the read model."""
        return cls(
            domain=site.domain,
            title=site.title or "",
            created_at=site.created_at,
            updated_at=site.updated_at,
            grade=site.ssl_grade or "",
            previous_grade=site.previous_ssl_grade or "",
            logo=site.logo or "",
            is_down=bool(site.is_down),
            servers_changed=bool(site.servers_changed),
            servers=[ServerOut.model_validate(s) for s in servers or []],
        )


class ErrorOut(BaseModel):
    detail: str
