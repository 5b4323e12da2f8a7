"""Document-index storage: one Elasticsearch document per draw."""

from __future__ import annotations

import logging
from typing import Any, Optional

from elasticsearch import ApiError, Elasticsearch, TransportError

from ..draw.assignment import validate_group_count
from ..errors import StorageError
from ..results import DrawResult
from .base import DrawRepository

logger = logging.getLogger(__name__)

_KEYWORD = {"type": "keyword"}

DRAW_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "long"},
        "drawnBy": _KEYWORD,
        "createdAt": {"type": "date"},
        "numberOfGroups": {"type": "integer"},
        "groups": {
            "type": "nested",
            "properties": {
                "groupName": _KEYWORD,
                "teams": {
                    "type": "nested",
                    "properties": {
                        "name": _KEYWORD,
                        "country": _KEYWORD,
                        "city": _KEYWORD,
                    },
                },
            },
        },
    }
}

# Listing is capped like any single search request.
MAX_RESULTS = 1000


class ElasticsearchDrawRepository(DrawRepository):
    """Stores each draw, with its nested groups and teams, as one document.

    Writing a single document is atomic, so a draw is never visible without
    its groups. Ids are allocated as ``count + 1`` and written with
    ``op_type="create"``; a concurrent writer that grabbed the same id makes
    the create fail with 409 and the next id is tried.

    Parameters
    ----------
    client : Elasticsearch
        Configured client.
    index : str, default: "draws"
        Index holding draw documents. Created on first use.
    refresh : bool, default: True
        Refresh the index after writes so saved draws are immediately
        searchable.
    max_id_attempts : int, default: 5
        How many ids to try before giving up on a save.
    """

    def __init__(
        self,
        client: Elasticsearch,
        index: str = "draws",
        *,
        refresh: bool = True,
        max_id_attempts: int = 5,
    ) -> None:
        self._client = client
        self._index = index
        self._refresh = refresh
        self._max_id_attempts = max_id_attempts
        self._index_ready = False

    def _ensure_index(self) -> None:
        if self._index_ready:
            return
        if not self._client.indices.exists(index=self._index):
            logger.info(f"Creating Elasticsearch index {self._index}")
            self._client.options(ignore_status=400).indices.create(
                index=self._index, mappings=DRAW_MAPPINGS
            )
        self._index_ready = True

    def save(self, result: DrawResult, number_of_groups: int) -> DrawResult:
        validate_group_count(number_of_groups)
        try:
            self._ensure_index()
            next_id = int(self._client.count(index=self._index)["count"]) + 1
            for _attempt in range(self._max_id_attempts):
                stored = result.with_id(next_id, number_of_groups)
                response = self._client.options(ignore_status=409).index(
                    index=self._index,
                    id=str(next_id),
                    document=stored.to_json(),
                    op_type="create",
                    refresh=self._refresh,
                )
                if response.body.get("result") == "created":
                    return stored
                logger.debug(f"Draw id {next_id} already taken, retrying")
                next_id += 1
        except (ApiError, TransportError) as e:
            raise StorageError(f"Error saving draw to Elasticsearch: {e}") from e

        raise StorageError(
            f"Could not allocate a draw id after {self._max_id_attempts} attempts"
        )

    def get_all(self) -> list[DrawResult]:
        try:
            self._ensure_index()
            response = self._client.search(
                index=self._index,
                query={"match_all": {}},
                sort=[{"createdAt": {"order": "desc"}}, {"id": {"order": "desc"}}],
                size=MAX_RESULTS,
            )
        except (ApiError, TransportError) as e:
            raise StorageError(f"Error retrieving draws from Elasticsearch: {e}") from e

        return [DrawResult.from_json(hit["_source"]) for hit in response["hits"]["hits"]]

    def get_by_id(self, draw_id: int) -> Optional[DrawResult]:
        try:
            self._ensure_index()
            response = self._client.options(ignore_status=404).get(
                index=self._index, id=str(draw_id)
            )
        except (ApiError, TransportError) as e:
            raise StorageError(
                f"Error retrieving draw {draw_id} from Elasticsearch: {e}"
            ) from e

        if not response.body.get("found"):
            return None
        return DrawResult.from_json(response["_source"])
