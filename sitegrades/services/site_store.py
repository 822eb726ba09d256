from datetime import datetime
from typing import List

from fastapi import Depends
from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlmodel import select

from sitegrades.core.exceptions.exceptions import (
    SiteAlreadyExistsError,
    SiteNotFoundError,
    StoreError,
)
from sitegrades.models.server import Server
from sitegrades.models.site import Site
from sitegrades.schemas.site import SiteOut
from sitegrades.services.database import get_db
from sitegrades.utils.log import app_logger

# fixed size of the "latest sites" listing
LATEST_SITES_LIMIT = 15


def site_key(domain: str) -> str:
    """Canonical form of a domain as stored in `site.domain` and `server.domain`."""
    return (domain or "").strip().lower().rstrip(".")


class SiteStore:
    """Data access for the `site` and `server` tables.

    Every operation runs on the session given at construction, so callers
    decide its lifetime (one per request in the API, one per test in tests).
    Failures are raised as `SiteNotFoundError` for a missing site and
    `StoreError` for anything the database rejects; writes roll the session
    back before raising.
    """

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, operation: str, exc: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        app_logger.error("store.error", operation=operation, exc_type=type(exc).__name__, error=str(exc))
        return StoreError(operation, str(exc))

    def fetch_site(self, domain: str) -> Site:
        """Return the site row for `domain`. Servers are not loaded."""
        domain = site_key(domain)
        stmt = select(Site).where(Site.domain == domain)
        try:
            return self.db.execute(stmt).scalar_one()
        except NoResultFound:
            raise SiteNotFoundError(domain)
        except SQLAlchemyError as e:
            raise self._fail("fetch_site", e) from e

    def insert_site(self, site: Site) -> Site:
        """Persist `site` with both timestamps set to now and return it."""
        site.domain = site_key(site.domain)
        now = datetime.now()
        site.created_at = now
        site.updated_at = now
        try:
            self.db.add(site)
            self.db.commit()
        except IntegrityError as e:
            self._fail("insert_site", e)
            raise SiteAlreadyExistsError(site.domain) from e
        except SQLAlchemyError as e:
            raise self._fail("insert_site", e) from e

        self.db.refresh(site)
        app_logger.debug("store.insert_site", domain=site.domain)
        return site

    def fetch_servers(self, domain: str) -> List[Server]:
        """Servers of `domain` in insertion order; empty when there are none."""
        domain = site_key(domain)
        stmt = select(Server).where(Server.domain == domain).order_by(Server.id)
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail("fetch_servers", e) from e

    def insert_servers(self, domain: str, *servers: Server) -> List[Server]:
        """Insert `servers` under `domain` in one transaction.

        Either every row is stored or, when one of them is rejected, none is.
        """
        domain = site_key(domain)
        for s in servers:
            s.domain = domain
        try:
            self.db.add_all(servers)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("insert_servers", e) from e

        app_logger.debug("store.insert_servers", domain=domain, count=len(servers))
        return list(servers)

    def delete_all_servers(self, domain: str) -> int:
        """Remove every server of `domain` and return how many rows went away."""
        domain = site_key(domain)
        stmt = delete(Server).where(Server.domain == domain)
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete_all_servers", e) from e

        app_logger.debug("store.delete_all_servers", domain=domain, deleted=result.rowcount)
        return result.rowcount

    def partial_update_site(self, site: Site, previous_grade: str) -> None:
        """Update only the fields that change between scans of `site`.

        An empty `previous_grade` marks the first grading: the grade stored so
        far moves to `previous_ssl_grade` and `updated_at` is left alone.
        Otherwise the site is being re-graded: `updated_at` moves to now and
        `previous_ssl_grade` is kept.
        """
        domain = site_key(site.domain)
        stmt = update(Site).where(Site.domain == domain)
        if previous_grade == "":
            # SET expressions read the row as it was before the update
            stmt = stmt.values(
                ssl_grade=site.ssl_grade,
                previous_ssl_grade=Site.ssl_grade,
                servers_changed=site.servers_changed,
            )
        else:
            stmt = stmt.values(
                ssl_grade=site.ssl_grade,
                servers_changed=site.servers_changed,
                updated_at=datetime.now(),
            )

        try:
            result = self.db.execute(stmt.execution_options(synchronize_session=False))
            if result.rowcount == 0:
                self.db.rollback()
                raise SiteNotFoundError(domain)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("partial_update_site", e) from e

        app_logger.debug("store.partial_update_site", domain=domain, first_grading=previous_grade == "")

    def retrieve_latest_sites(self) -> List[SiteOut]:
        """The most recently updated sites, newest first, servers included.

        Servers are loaded with one query per site.
        """
        stmt = select(Site).order_by(Site.updated_at.desc()).limit(LATEST_SITES_LIMIT)
        try:
            rows = self.db.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise self._fail("retrieve_latest_sites", e) from e

        return [SiteOut.from_row(row, self.fetch_servers(row.domain)) for row in rows]


def get_site_store(db: Session = Depends(get_db)) -> SiteStore:
    return SiteStore(db)
