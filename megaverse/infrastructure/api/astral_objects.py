"""Concrete implementation of the ObjectClient interface over the challenge API.

A single parametric create/delete pair serves every astral object kind.
Per-kind differences (resource path, attribute field and its allowed values)
live in the ENTITY_SPECS strategy table.

Creates go through the ApiRetryService and are retried while rate limited;
deletes are sent once. Both assume the API is idempotent per coordinate,
so repeating a create after a throttled attempt places the same object.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from megaverse.domain.exceptions import MegaverseError
from megaverse.domain.interfaces.object_client import ObjectClient
from megaverse.domain.models.common import CandidateId, Color, Direction, EntityKind
from megaverse.domain.models.placement import Attribute
from megaverse.infrastructure.api.http_client import MegaverseHttpClient
from megaverse.infrastructure.resilience.api_retry import ApiRetryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitySpec:
    """How one entity kind is addressed and which attribute it carries."""
    attribute_field: Optional[str] = None
    attribute_type: Optional[Type[Attribute]] = None

    def validate(self, kind: EntityKind, attribute: Optional[Attribute]) -> Dict[str, Any]:
        """Returns the attribute part of the request body.

        Raises:
            ValueError: If the attribute is missing, unexpected or of the wrong type.
        """
        if self.attribute_type is None:
            if attribute is not None:
                raise ValueError(f"{kind.display_name} takes no attribute, got {attribute!r}")
            return {}
        if not isinstance(attribute, self.attribute_type):
            raise ValueError(
                f"{kind.display_name} requires a {self.attribute_type.__name__}, got {attribute!r}"
            )
        return {self.attribute_field: attribute.value}


ENTITY_SPECS: Dict[EntityKind, EntitySpec] = {
    EntityKind.POLYANET: EntitySpec(),
    EntityKind.SOLOON: EntitySpec(attribute_field="color", attribute_type=Color),
    EntityKind.COMETH: EntitySpec(attribute_field="direction", attribute_type=Direction),
}


class AstralObjectClient(ObjectClient):
    """Creates and deletes polyanets, soloons and comeths."""

    def __init__(
        self,
        http: MegaverseHttpClient,
        candidate_id: CandidateId,
        retry_service: ApiRetryService,
    ):
        """Initializes the AstralObjectClient.

        Args:
            http: HTTP client bound to the API base URL.
            candidate_id: Identity sent with every request.
            retry_service: Retrier wrapping create requests.
        """
        self.http = http
        self.candidate_id = candidate_id
        self.retry_service = retry_service

    def _body(self, row: int, column: int) -> Dict[str, Any]:
        return {"candidateId": self.candidate_id, "row": row, "column": column}

    async def create_at(
        self,
        kind: EntityKind,
        row: int,
        column: int,
        attribute: Optional[Attribute] = None,
    ) -> None:
        params: Dict[str, Any] = {"row": row, "column": column}
        try:
            attribute_params = ENTITY_SPECS[kind].validate(kind, attribute)
            params.update(attribute_params)
            body = {**self._body(row, column), **attribute_params}
            await self.retry_service.execute_with_retry(
                self.http.send, "POST", kind.value, body,
                endpoint_name=f"POST /{kind.value}",
            )
        except (MegaverseError, ValueError) as e:
            logger.error(f"Failed to create {kind.display_name} with params {params}: {e}")
            return
        logger.info(f"{kind.display_name} created with params: {params}")

    async def delete_at(self, kind: EntityKind, row: int, column: int) -> None:
        params = {"row": row, "column": column}
        try:
            await self.http.send("DELETE", kind.value, self._body(row, column))
        except MegaverseError as e:
            logger.error(f"Failed to delete {kind.display_name} with params {params}: {e}")
            return
        logger.info(f"{kind.display_name} deleted with params: {params}")
