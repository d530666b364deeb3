"""Read-only listings of cluster resources through kubectl."""

import json
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from pydantic import BaseModel, ValidationError

from .errors import DecodeError, ExecutionError, QueryError
from .executor import ProcessExecutor
from ..utils.logging import LoggerMixin


class ObjectMeta(BaseModel):
    """The part of ``metadata`` the driver reads."""

    name: str


class ResourceItem(BaseModel):
    metadata: ObjectMeta


class ResourceList(BaseModel):
    """``kubectl get -o json`` envelope. Unknown fields are ignored."""

    items: Optional[List[ResourceItem]] = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """A single listed resource."""
    name: str


@dataclass
class ResourceListing:
    """Snapshot of one resource kind in one namespace."""
    kind: str
    namespace: str
    items: List[ResourceDescriptor] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ResourceDescriptor]:
        return iter(self.items)

    @property
    def names(self) -> List[str]:
        return [item.name for item in self.items]

    @property
    def empty(self) -> bool:
        return not self.items


def decode_listing(text: str, kind: str, namespace: str) -> ResourceListing:
    """Decode a listing envelope; a missing ``items`` field is an empty listing.

    Raises:
        DecodeError: If ``text`` is not JSON or does not match the envelope
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise DecodeError(kind, namespace, str(e)) from e

    if not isinstance(data, dict):
        raise DecodeError(kind, namespace, f"expected a JSON object, got {type(data).__name__}")

    try:
        envelope = ResourceList(**data)
    except ValidationError as e:
        raise DecodeError(kind, namespace, str(e)) from e

    items = [ResourceDescriptor(name=item.metadata.name) for item in envelope.items or []]
    return ResourceListing(kind=kind, namespace=namespace, items=items)


class ClusterReader(LoggerMixin):
    """Queries resource collections with ``kubectl get <kind> -n <ns> -o json``."""

    def __init__(self, executor: Optional[ProcessExecutor] = None, command: str = "kubectl"):
        super().__init__()
        self.executor = executor or ProcessExecutor()
        self.command = command

    def list(self, kind: str, namespace: str) -> ResourceListing:
        """List every resource of ``kind`` in ``namespace``.

        Raises:
            QueryError: If the query itself fails
            DecodeError: If the response is malformed
        """
        try:
            output = self.executor.run(self.command, ["get", kind, "-n", namespace, "-o", "json"])
        except ExecutionError as e:
            raise QueryError(f"failed to list {kind} in {namespace}: {e}") from e

        listing = decode_listing(output, kind, namespace)
        self.logger.debug(f"Listed {len(listing)} {kind} in {namespace}")
        return listing
