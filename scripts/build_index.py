import argparse
import asyncio
from pathlib import Path

from knowledge_bot.embeddings import embed_texts
from knowledge_bot.logging_config import setup_logging
from knowledge_bot.settings import load_settings
from knowledge_bot.stores import EnvCredentialStore, load_text_directory, save_documents
from knowledge_bot.vector_store import build_chroma_collection, indexable_chunks


def main() -> None:
    """Chunk a text directory, save it as the JSONL corpus and index it into Chroma."""
    parser = argparse.ArgumentParser()
    parser.add_argument("--docs", default="data/docs", help="Directory with *.txt files")
    parser.add_argument("--collection", default="knowledge_base")
    args = parser.parse_args()

    logger = setup_logging()
    settings, paths = load_settings()

    credential = asyncio.run(EnvCredentialStore().get_credential())
    documents = load_text_directory(args.docs)
    save_documents(documents, Path(paths.data_dir) / "corpus.jsonl")

    texts = [text for _, text, _ in indexable_chunks(documents)]
    vectors: list[list[float]] = []
    if texts:
        vectors = embed_texts(texts, model=settings.embedding_model, api_key=credential).tolist()
    collection = build_chroma_collection(
        documents=documents,
        embeddings=vectors,
        collection_name=args.collection,
        persist_dir=str(Path(paths.artifacts_dir) / "chroma"),
    )
    logger.info("Indexed %d chunks from %d documents", collection.count(), len(documents))


if __name__ == "__main__":
    main()
