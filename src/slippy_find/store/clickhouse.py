"""ClickHouse slip store.

Looks routing slips up through the ClickHouse HTTP interface with a single
parameterised query per call. Values are sent as query parameters, never
interpolated into SQL.
"""

import json
import logging
import re
from typing import Dict, List, Optional, Tuple

import httpx

from ..config import ClickHouseConfig
from ..exceptions import ConfigurationError, StoreQueryError
from ..models import Slip
from ..pipeline.models import PipelineConfig
from .base import SlipStore

logger = logging.getLogger(__name__)

SLIPS_TABLE = "routing_slips"

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

FIND_BY_COMMITS_QUERY = (
    f"SELECT correlation_id, commit_sha FROM {SLIPS_TABLE} "
    "WHERE repository = {repository:String} "
    "AND commit_sha IN {commits:Array(String)} "
    "ORDER BY created_at DESC "
    "FORMAT JSONEachRow"
)


def _array_literal(values: List[str]) -> str:
    """Format values as a ClickHouse Array(String) parameter literal."""
    escaped = (v.replace("\\", "\\\\").replace("'", "\\'") for v in values)
    return "[" + ",".join(f"'{v}'" for v in escaped) + "]"


class ClickHouseSlipStore(SlipStore):
    """SlipStore backed by the ClickHouse HTTP interface."""

    def __init__(
        self,
        config: ClickHouseConfig,
        database: str,
        pipeline_config: PipelineConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the store.

        Args:
            config: ClickHouse connection settings
            database: Database holding the routing_slips table
            pipeline_config: Pipeline definition the slips were written with.
                Only logged; the lookup query does not depend on it.
            transport: Optional httpx transport (used by tests)

        Raises:
            ConfigurationError: If the database name is not a plain identifier
        """
        if not _IDENTIFIER_PATTERN.match(database):
            raise ConfigurationError("invalid ClickHouse database name", database)

        self.config = config
        self.database = database
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            verify=not config.skip_verify,
            headers={
                "X-ClickHouse-User": config.username,
                "X-ClickHouse-Key": config.password,
            },
            transport=transport,
        )
        logger.debug(
            f"ClickHouse slip store ready: {config.base_url} database={database} "
            f"pipeline={pipeline_config.name}"
        )

    def find_by_commits(
        self, repository: str, commits: List[str]
    ) -> Tuple[Optional[Slip], str]:
        if not commits:
            return None, ""

        params = {
            "database": self.database,
            "param_repository": repository,
            "param_commits": _array_literal(commits),
        }
        try:
            response = self._client.post(
                "/", params=params, content=FIND_BY_COMMITS_QUERY
            )
        except httpx.HTTPError as e:
            raise StoreQueryError("slip store query failed", str(e)) from e

        if response.status_code != 200:
            raise StoreQueryError(
                "slip store query failed",
                f"HTTP {response.status_code}: {response.text.strip()[:500]}",
            )

        # Rows are newest first; keep the newest slip per commit
        slips_by_commit: Dict[str, str] = {}
        for line in response.text.splitlines():
            if not line.strip():
                continue
            try:
                row = json.loads(line)
                commit_sha = row["commit_sha"]
                correlation_id = row["correlation_id"]
            except (ValueError, KeyError, TypeError) as e:
                raise StoreQueryError(
                    "unexpected slip store response", line[:200]
                ) from e
            slips_by_commit.setdefault(commit_sha, correlation_id)

        for commit in commits:
            if commit in slips_by_commit:
                return Slip(correlation_id=slips_by_commit[commit]), commit

        return None, ""

    def close(self) -> None:
        self._client.close()
