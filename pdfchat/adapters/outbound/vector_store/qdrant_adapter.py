"""In-process Qdrant vector index for a single document.

Each index owns one in-memory collection. Nodes are embedded through the
configured embedding port and stored with their text and metadata in the
point payload.
"""

import logging
import uuid
from typing import TYPE_CHECKING, Any

from qdrant_client.models import Distance, PointStruct, VectorParams

from ....core.domain import Node, SearchResult
from ....core.domain.exceptions import VectorStoreQueryError
from ....core.ports.embedding_port import EmbeddingPort
from ....core.ports.vector_store_port import VectorStorePort

if TYPE_CHECKING:
    from qdrant_client import QdrantClient

logger = logging.getLogger(__name__)

COLLECTION_NAME = "pdf_pages"
UPSERT_BATCH_SIZE = 100


def _point_id(node_id: str) -> str:
    """Stable Qdrant point id for a node id."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, node_id))


def _clamp_score(score: float) -> float:
    return min(1.0, max(0.0, float(score)))


class QdrantAdapter(VectorStorePort):
    """Vector index backed by an in-memory Qdrant collection."""

    def __init__(
        self,
        embedding: EmbeddingPort,
        location: str = ":memory:",
        collection_name: str = COLLECTION_NAME,
    ) -> None:
        """Initialize the index.

        Args:
            embedding: Embedding function used for nodes and queries.
            location: Qdrant location, ``":memory:"`` for an in-process store.
            collection_name: Collection holding the document's nodes.
        """
        self.location = location
        self.collection_name = collection_name
        self._embedding = embedding
        self._client: QdrantClient | None = None
        self._dimension: int | None = None
        self._nodes: dict[str, Node] = {}

    def _get_client(self) -> "QdrantClient":
        """Get or create the Qdrant client."""
        if self._client is None:
            from qdrant_client import QdrantClient

            self._client = QdrantClient(location=self.location)
            logger.debug("Created Qdrant client at %s", self.location)
        return self._client

    def _ensure_collection(self, dimension: int) -> None:
        if self._dimension is not None:
            if dimension != self._dimension:
                raise VectorStoreQueryError(
                    f"Embedding dimension {dimension} does not match index dimension {self._dimension}",
                    context={"expected": self._dimension, "received": dimension},
                )
            return

        client = self._get_client()
        if client.collection_exists(self.collection_name):
            client.delete_collection(self.collection_name)
        client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(size=dimension, distance=Distance.COSINE),
        )
        self._dimension = dimension
        logger.debug("Created collection %s with dimension %d", self.collection_name, dimension)

    def add_nodes(self, nodes: list[Node]) -> int:
        """Embed nodes and upsert them into the collection.

        Args:
            nodes: Nodes to add. Nodes with an existing id replace the old one.

        Returns:
            Number of nodes added.
        """
        if not nodes:
            return 0

        logger.debug("Generating embeddings for %d nodes...", len(nodes))
        embeddings = self._embedding.embed_documents([node.text for node in nodes])
        if not embeddings or any(not vector for vector in embeddings):
            raise VectorStoreQueryError(
                "Embedding service returned empty vectors",
                context={"nodes": len(nodes)},
            )

        self._ensure_collection(len(embeddings[0]))

        points = []
        for node, embedding in zip(nodes, embeddings, strict=True):
            node.embedding = embedding
            self._nodes[node.node_id] = node
            points.append(
                PointStruct(
                    id=_point_id(node.node_id),
                    vector=embedding,
                    payload={"node_id": node.node_id, "text": node.text, **node.metadata},
                )
            )

        client = self._get_client()
        for i in range(0, len(points), UPSERT_BATCH_SIZE):
            client.upsert(
                collection_name=self.collection_name,
                points=points[i : i + UPSERT_BATCH_SIZE],
            )

        logger.info("Added %d nodes to %s", len(nodes), self.collection_name)
        return len(nodes)

    def search(self, query: str, top_k: int = 2) -> list[SearchResult]:
        """Return the ``top_k`` nodes most similar to ``query``, best first."""
        if not self._nodes:
            return []

        query_embedding = self._embedding.embed_query(query)
        if self._dimension is not None and len(query_embedding) != self._dimension:
            raise VectorStoreQueryError(
                "Query embedding dimension does not match index dimension",
                context={"expected": self._dimension, "received": len(query_embedding)},
            )

        response = self._get_client().query_points(
            collection_name=self.collection_name,
            query=query_embedding,
            limit=top_k,
            with_payload=True,
        )

        results = []
        for hit in response.points:
            payload = dict(hit.payload or {})
            node = self._nodes.get(payload.get("node_id", ""))
            if node is None:
                continue
            results.append(SearchResult(node=node, score=_clamp_score(hit.score)))

        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def count(self) -> int:
        return len(self._nodes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize nodes as embedding, metadata and text maps keyed by node id."""
        return {
            "embedding_dict": {node_id: node.embedding for node_id, node in self._nodes.items()},
            "metadata_dict": {node_id: node.metadata for node_id, node in self._nodes.items()},
            "text_dict": {node_id: node.text for node_id, node in self._nodes.items()},
        }
