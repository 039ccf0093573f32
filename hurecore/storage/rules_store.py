"""
Statutory Rules Store - Versioned Rules with Injected Repositories

Every update archives the active version and writes a new one, so the full
history stays queryable. Callers pass the repository in; the in-memory
repository backs tests and the DuckDB repository backs the CLI.
"""

import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Protocol

import duckdb
import logging

from hurecore.coreutils.errors import NoActiveRules
from hurecore.coreutils.time import KENYA_TZ
from hurecore.payroll.schemas import DEFAULT_RULES, StatutoryRules
from hurecore.payroll.validators import validate_rules

logger = logging.getLogger(__name__)

COUNTRY = "Kenya"
SYSTEM_USER = "system"
SYSTEM_EMAIL = "system@hurecore.com"


@dataclass(frozen=True)
class RulesVersion:
    version: int
    rules: StatutoryRules
    is_active: bool
    effective_from: str
    updated_by: str
    updated_by_email: Optional[str] = None
    effective_until: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[str] = None
    country: str = COUNTRY


class RulesRepository(Protocol):
    def list_versions(self) -> List[RulesVersion]: ...

    def add_version(self, version: RulesVersion) -> None: ...

    def deactivate(self, version: int, effective_until: str) -> None: ...

    def supersede(
        self, old_version: Optional[int], effective_until: str, new_version: RulesVersion
    ) -> None: ...


class InMemoryRulesRepository:
    """Rules versions held in a list"""

    def __init__(self, versions: Optional[List[RulesVersion]] = None):
        self._versions = list(versions or [])

    def list_versions(self) -> List[RulesVersion]:
        return list(self._versions)

    def add_version(self, version: RulesVersion) -> None:
        self._versions.append(version)

    def deactivate(self, version: int, effective_until: str) -> None:
        self._versions = [
            replace(v, is_active=False, effective_until=effective_until)
            if v.version == version
            else v
            for v in self._versions
        ]

    def supersede(
        self, old_version: Optional[int], effective_until: str, new_version: RulesVersion
    ) -> None:
        """Archive old_version and add new_version in one step"""
        if any(v.version == new_version.version for v in self._versions):
            raise ValueError(f"Rules version {new_version.version} already exists")
        self.deactivate(old_version, effective_until)
        self._versions.append(new_version)


class DuckDBRulesRepository:
    """Rules versions persisted in a DuckDB table"""

    def __init__(self, database: str = ":memory:"):
        self.database = database
        self.conn = duckdb.connect(database)
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS statutory_rules (
                version INTEGER PRIMARY KEY
                , country VARCHAR
                , is_active BOOLEAN
                , effective_from VARCHAR
                , effective_until VARCHAR
                , rules_json VARCHAR
                , updated_by VARCHAR
                , updated_by_email VARCHAR
                , notes VARCHAR
                , updated_at VARCHAR
            )
            """
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.conn.close()

    def list_versions(self) -> List[RulesVersion]:
        rows = self.conn.execute(
            """
            SELECT
                version
                , country
                , is_active
                , effective_from
                , effective_until
                , rules_json
                , updated_by
                , updated_by_email
                , notes
                , updated_at
            FROM statutory_rules
            WHERE country = ?
            ORDER BY version
            """,
            [COUNTRY],
        ).fetchall()

        return [
            RulesVersion(
                version=row[0],
                country=row[1],
                is_active=row[2],
                effective_from=row[3],
                effective_until=row[4],
                rules=StatutoryRules.from_dict(json.loads(row[5])),
                updated_by=row[6],
                updated_by_email=row[7],
                notes=row[8],
                updated_at=row[9],
            )
            for row in rows
        ]

    def add_version(self, version: RulesVersion) -> None:
        self.conn.execute(
            "INSERT INTO statutory_rules VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                version.version,
                version.country,
                version.is_active,
                version.effective_from,
                version.effective_until,
                json.dumps(version.rules.to_dict()),
                version.updated_by,
                version.updated_by_email,
                version.notes,
                version.updated_at,
            ],
        )

    def deactivate(self, version: int, effective_until: str) -> None:
        self.conn.execute(
            """
            UPDATE statutory_rules
            SET is_active = false, effective_until = ?
            WHERE version = ?
            """,
            [effective_until, version],
        )

    def supersede(
        self, old_version: Optional[int], effective_until: str, new_version: RulesVersion
    ) -> None:
        """Archive old_version and insert new_version in a single transaction"""
        self.conn.begin()
        try:
            if old_version is not None:
                self.deactivate(old_version, effective_until)
            self.add_version(new_version)
        except duckdb.Error as e:
            self.conn.rollback()
            logger.error(f"Rules version {new_version.version} not written, rolled back: {e}")
            raise
        self.conn.commit()


def _now() -> str:
    return datetime.now(KENYA_TZ).isoformat()


def _default_version(
    version: int, updated_by: str, updated_by_email: Optional[str], notes: str, now: str
) -> RulesVersion:
    return RulesVersion(
        version=version,
        rules=DEFAULT_RULES,
        is_active=True,
        effective_from=now,
        updated_by=updated_by,
        updated_by_email=updated_by_email,
        notes=notes,
        updated_at=now,
    )


def get_rules_history(repo: RulesRepository) -> List[RulesVersion]:
    """All versions, newest first"""
    return sorted(repo.list_versions(), key=lambda v: v.version, reverse=True)


def create_default_rules(
    repo: RulesRepository,
    version: int = 1,
    updated_by: str = SYSTEM_USER,
    updated_by_email: str = SYSTEM_EMAIL,
    notes: str = "Initial Kenya statutory rules",
) -> RulesVersion:
    """Write the default rules as a new active version"""
    new_version = _default_version(version, updated_by, updated_by_email, notes, _now())
    repo.add_version(new_version)
    logger.info(f"Created default statutory rules version {version}")
    return new_version


def get_current_rules(
    repo: RulesRepository, create_if_missing: bool = True
) -> Optional[RulesVersion]:
    """
    Highest active rules version

    Returns:
        Optional[RulesVersion]: The active version. An empty store gets the
        defaults written as version 1; a store with history but nothing
        active returns None.
    """
    versions = repo.list_versions()

    if not versions:
        if not create_if_missing:
            return None
        logger.info("No statutory rules found, creating defaults...")
        return create_default_rules(repo)

    active = [v for v in versions if v.is_active]
    if not active:
        logger.warning("Statutory rules history exists but no version is active")
        return None

    return max(active, key=lambda v: v.version)


def update_rules(
    repo: RulesRepository,
    updated_by: str,
    updated_by_email: Optional[str] = None,
    effective_from: Optional[str] = None,
    notes: Optional[str] = None,
    **changes,
) -> RulesVersion:
    """
    Publish a new rules version

    Args:
        repo: Rules repository
        updated_by: Admin user id
        updated_by_email: Admin email
        effective_from: ISO date the new rules apply from (defaults to now)
        notes: Free-text change note
        **changes: StatutoryRules fields to change

    Returns:
        RulesVersion: The new active version

    Raises:
        NoActiveRules: if there is no active version to supersede
        InvalidConfiguration: if the changed rules are invalid
    """
    current = get_current_rules(repo)
    if current is None:
        raise NoActiveRules("No current rules found")

    new_rules = current.rules.with_changes(**changes)
    validate_rules(new_rules)

    now = _now()
    new_version = RulesVersion(
        version=current.version + 1,
        rules=new_rules,
        is_active=True,
        effective_from=effective_from or now,
        updated_by=updated_by,
        updated_by_email=updated_by_email,
        notes=notes,
        updated_at=now,
    )
    repo.supersede(current.version, now, new_version)

    logger.info(
        f"Statutory rules updated to version {new_version.version} by {updated_by}"
    )
    return new_version


def revert_to_defaults(
    repo: RulesRepository, updated_by: str, updated_by_email: Optional[str] = None
) -> RulesVersion:
    """Archive the active version, if any, and publish the defaults as a new version"""
    current = get_current_rules(repo, create_if_missing=False)
    history = repo.list_versions()

    now = _now()
    new_version = _default_version(
        max((v.version for v in history), default=0) + 1,
        updated_by,
        updated_by_email,
        "Reverted to default statutory rules",
        now,
    )
    repo.supersede(current.version if current else None, now, new_version)

    logger.info(f"Statutory rules reverted to defaults as version {new_version.version}")
    return new_version
