"""
Embedding-model interface consumed by parameter embedding.
"""

from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class EmbeddingModel(Protocol):
    """A named model that turns parameter text into vectors."""

    def embedding_model_type(self) -> str:
        ...

    async def embed_parameters(self, texts: Sequence[str]) -> List[List[float]]:
        """Return one vector per input text, in input order."""
        ...
