from __future__ import annotations

import numpy as np
from openai import OpenAI


def embed_texts(
    texts: list[str],
    model: str = "text-embedding-3-small",
    api_key: str | None = None,
    timeout: float = 30.0,
) -> np.ndarray:
    """Generate embedding vectors for input texts using OpenAI embeddings API.

    Args:
        texts: Input strings to embed.
        model: Embedding model name.
        api_key: Credential for the call; the client falls back to
            ``OPENAI_API_KEY`` when omitted.
        timeout: Request timeout in seconds.

    Returns:
        A `float32` NumPy matrix shaped `(len(texts), embedding_dim)`.
    """
    client = OpenAI(api_key=api_key, timeout=timeout)
    response = client.embeddings.create(model=model, input=texts)
    vectors = [row.embedding for row in response.data]
    return np.array(vectors, dtype=np.float32)
