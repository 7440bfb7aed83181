"""Trust network file management."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import ValidationError

from .exceptions import StoreError
from .models import KnownNodes, TrustNode
from .scaffold import KNOWN_NODES
from .store import FileStore


def load_known_nodes(store: FileStore) -> KnownNodes:
    """Load trust/known_nodes.yaml, or an empty network if it is absent.

    Raises:
        StoreError: If the file exists but does not hold a valid network
    """
    data = store.read_yaml(KNOWN_NODES)
    if data is None:
        return KnownNodes()

    try:
        return KnownNodes.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid trust network in {store.path(KNOWN_NODES)}: {e}"
        raise StoreError(msg) from e


def add_trust_nodes(store: FileStore, nodes: Iterable[TrustNode]) -> KnownNodes:
    """Merge nodes into trust/known_nodes.yaml, keyed by URL.

    An incoming node with a URL already present updates that entry in
    place (fields it leaves unset are kept); new URLs are appended.
    Top-level keys and per-node fields not modelled by ``KnownNodes``
    are written back as loaded.

    Returns:
        The network as written
    """
    network = load_known_nodes(store)
    by_url = {node.url: i for i, node in enumerate(network.nodes)}

    for node in nodes:
        if node.url in by_url:
            index = by_url[node.url]
            merged = network.nodes[index].model_dump()
            merged.update(node.model_dump(exclude_none=True))
            network.nodes[index] = TrustNode.model_validate(merged)
        else:
            by_url[node.url] = len(network.nodes)
            network.nodes.append(node)

    network.last_updated = datetime.now().isoformat()
    store.write_yaml(KNOWN_NODES, network.model_dump(exclude_none=True))
    return network
