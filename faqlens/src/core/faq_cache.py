"""
FAQLens - FAQ Embedding Cache
==============================
Resolves a FAQ list to its embeddings, re-using the previous result
while callers keep sending the same list.

Flow of ``resolve(faqs)``:
    1. Serialise ``faqs`` into its canonical key.
    2. Hit  → the store holds an entry with that key: return it, no
       embedding calls.
    3. Miss → embed every ``question`` concurrently (bounded by
       ``EMBED_CONCURRENCY``), reassemble in list order, replace the
       store's slot, return the new entries.

A single failed embedding call cancels the calls still queued or in
flight and fails the whole refresh; the store is left untouched.
Embedding is not retried.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

from faqlens.config.settings import settings
from faqlens.src.core.models import EmbeddedFaqEntry, FaqCacheEntry, FaqEntry
from faqlens.src.core.providers import EmbedderPort
from faqlens.src.database.cache_store import CacheStore, get_process_store
from faqlens.src.utils.logger import get_logger
from faqlens.src.utils.text_utils import canonical_faq_key

logger = get_logger(__name__)


class FaqEmbeddingCache:
    """
    Single-slot cache of embedded FAQ lists.

    Parameters
    ----------
    embedder
        ``EmbedderPort`` used for FAQ questions on a cache miss.
    store
        Backend holding the slot.  Defaults to the process-wide store.
    concurrency
        Maximum in-flight embedding calls during a refresh.  Defaults
        to ``settings.EMBED_CONCURRENCY``.

    Attributes
    ----------
    hits, misses : int
        Lookup counters since construction.
    """

    __slots__ = ("_embedder", "_store", "_concurrency", "hits", "misses")

    def __init__(self, embedder: EmbedderPort, store: CacheStore | None = None, concurrency: int | None = None) -> None:
        self._embedder = embedder
        self._store: CacheStore = store if store is not None else get_process_store()
        self._concurrency: int = concurrency or settings.EMBED_CONCURRENCY
        self.hits: int = 0
        self.misses: int = 0


    @property
    def store(self) -> CacheStore:
        return self._store


    async def resolve(self, faqs: Sequence[FaqEntry]) -> list[EmbeddedFaqEntry]:
        """
        Return embeddings for *faqs*, positionally aligned with it.

        Raises
        ------
        ValueError
            If *faqs* is empty (an empty list is never cached).
        ProviderError
            If any embedding call fails.
        """
        if not faqs:
            raise ValueError("Cannot resolve embeddings for an empty FAQ list.")

        key = canonical_faq_key(faqs)
        cached = self._store.get(key)
        if cached is not None:
            self.hits += 1
            logger.info("[FAQ] Using cached FAQ embeddings (%d entries).", len(cached.entries))
            return list(cached.entries)

        self.misses += 1
        logger.info("[FAQ] Generating and caching FAQ embeddings (%d entries).", len(faqs))
        t_start = time.perf_counter()

        entries = await self._embed_all(faqs)
        self._store.put(FaqCacheEntry(key=key, entries=tuple(entries)))

        logger.debug("[FAQ] Cache refreshed in %.1fms", (time.perf_counter() - t_start) * 1000)
        return entries


    async def _embed_all(self, faqs: Sequence[FaqEntry]) -> list[EmbeddedFaqEntry]:
        semaphore = asyncio.Semaphore(self._concurrency)
        tasks: list[asyncio.Task[EmbeddedFaqEntry]] = []

        async def _embed_one(faq: FaqEntry) -> EmbeddedFaqEntry:
            async with semaphore:
                try:
                    vector = await self._embedder.embed(faq.question)
                except Exception:
                    # Cancel siblings while this task still holds its slot,
                    # so no queued question reaches the provider.
                    current = asyncio.current_task()
                    for task in tasks:
                        if task is not current:
                            task.cancel()
                    raise
            return EmbeddedFaqEntry(question=faq.question, answer=faq.answer, embedding=vector)

        tasks.extend(asyncio.create_task(_embed_one(faq)) for faq in faqs)

        # gather() keeps argument order regardless of completion order
        results = await asyncio.gather(*tasks, return_exceptions=True)

        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            logger.warning("[CACHE] Refresh aborted after %d failed embedding call(s).", len(errors))
            raise errors[0]
        return list(results)  # type: ignore[arg-type]
