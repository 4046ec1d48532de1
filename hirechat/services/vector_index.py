"""CyborgDB vector index for resume embeddings."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from cyborgdb import Client

from ..config import Settings
from ..exceptions import IndexTimeout, VectorIndexError
from ..models.search import VectorMatch

logger = logging.getLogger(__name__)


class VectorIndex:
    """
    Collection of (vector, payload) points keyed by point ID.

    Every call is bounded by `timeout` seconds. A call that does not finish
    in time raises IndexTimeout; the worker thread is abandoned, not awaited.
    """

    def __init__(self, settings: Settings, client: Optional[Client] = None, timeout: Optional[float] = None):
        self.settings = settings
        self.index_name = settings.cyborgdb_index_name
        self.dimension = settings.embedding_dimension
        self.timeout = timeout if timeout is not None else settings.vector_index_timeout
        self._client: Optional[Client] = client
        self._index = None
        self._init_lock = asyncio.Lock()
        self._executor = ThreadPoolExecutor(max_workers=4)

    def _get_client(self) -> Client:
        """
        Get or create CyborgDB client.

        Returns:
            CyborgDB Client instance
        """
        if self._client is None:
            base_url = f"http://{self.settings.cyborgdb_host}:{self.settings.cyborgdb_port}"
            self._client = Client(base_url=base_url, api_key=self.settings.cyborgdb_api_key)
            logger.info(f"CyborgDB client initialized with base_url: {base_url}")
        return self._client

    def _get_index_key(self) -> bytes:
        """
        Read the index key from the configured key file.

        Raises:
            VectorIndexError: If the key file is not configured or unreadable
        """
        key_file_path = self.settings.cyborgdb_index_key_file
        if not key_file_path:
            raise VectorIndexError("CYBORGDB_INDEX_KEY_FILE is not set")

        try:
            with open(key_file_path, "rb") as key_file:
                return key_file.read().strip()
        except OSError as e:
            raise VectorIndexError(f"Failed to read index key file: {e}")

    async def _run(self, operation: str, func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(loop.run_in_executor(self._executor, func), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"CyborgDB {operation} timed out after {self.timeout}s")
            raise IndexTimeout()
        except VectorIndexError:
            raise
        except Exception as e:
            logger.error(f"CyborgDB {operation} failed: {e}")
            raise VectorIndexError()

    async def ensure_collection(
        self,
        name: Optional[str] = None,
        dimension: Optional[int] = None,
        metric: str = "cosine",
    ) -> None:
        """
        Load the named index, creating it only if it does not exist yet.

        Args:
            name: Index name (defaults to the configured name)
            dimension: Vector dimensionality (defaults to the embedding dimension)
            metric: Distance metric
        """
        async with self._init_lock:
            name = name or self.index_name
            dimension = dimension or self.dimension
            if self._index is not None and name == self.index_name:
                return

            client = self._get_client()
            index_key = self._get_index_key()

            indexes = await self._run("list_indexes", lambda: client.list_indexes())
            if indexes and name in indexes:
                index = await self._run("load_index", lambda: client.load_index(index_name=name, index_key=index_key))
                logger.info(f"Loaded existing CyborgDB index: {name}")
            else:
                logger.info(f"Index {name} not found, creating new one")
                index = await self._run(
                    "create_index",
                    lambda: client.create_index(
                        index_name=name,
                        index_key=index_key,
                        dimension=dimension,
                        metric=metric,
                    ),
                )
                logger.info(f"Created new CyborgDB index: {name} ({dimension} dims, {metric})")

            self.index_name = name
            self.dimension = dimension
            self._index = index

    async def _get_index(self):
        if self._index is None:
            await self.ensure_collection()
        return self._index

    async def upsert(self, point_id: str, vector: List[float], payload: Optional[Dict[str, Any]] = None) -> None:
        """
        Insert or overwrite the point with this ID.

        Raises:
            IndexTimeout: If the call exceeds the configured timeout
            VectorIndexError: If the upsert fails
        """
        index = await self._get_index()
        item = {
            "id": point_id,
            "vector": list(vector),
            "metadata": payload or {},
        }
        await self._run("upsert", lambda: index.upsert([item]))
        logger.info(f"Upserted vector for point {point_id}")

    async def search(
        self,
        vector: List[float],
        k: int,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[VectorMatch]:
        """
        Return up to k nearest points in the index's own order.

        An empty index returns an empty list.
        """
        index = await self._get_index()
        results = await self._run(
            "query",
            lambda: index.query(
                query_vectors=list(vector),
                top_k=k,
                filters=filters,
                include=["distance", "metadata"],
            ),
        )
        if not results:
            return []
        # Batched queries come back as one list per query vector
        if isinstance(results[0], list):
            results = results[0]

        matches = []
        for result in results:
            metadata = result.get("metadata") or {}
            point_id = result.get("id") or metadata.get("candidate_id")
            if not point_id:
                continue
            distance = result.get("distance")
            matches.append(VectorMatch(
                point_id=str(point_id),
                similarity=(1.0 - float(distance)) if distance is not None else 0.0,  # Convert distance to similarity
                payload=metadata,
            ))

        logger.info(f"Vector search returned {len(matches)} matches")
        return matches

    async def delete(self, point_id: str) -> bool:
        """
        Delete a point. Deleting a missing point is not an error.

        Returns:
            True if a point was deleted, False if none existed
        """
        index = await self._get_index()
        existing = await self._run("get", lambda: index.get([point_id]))
        if not existing:
            logger.info(f"No vector stored for point {point_id}; nothing to delete")
            return False

        await self._run("delete", lambda: index.delete([point_id]))
        logger.info(f"Deleted vector for point {point_id}")
        return True
