import argparse
import asyncio
from pathlib import Path

import chromadb

from knowledge_bot.logging_config import setup_logging
from knowledge_bot.pipeline import ChatPipeline
from knowledge_bot.settings import load_settings
from knowledge_bot.stores import EnvCredentialStore, InMemoryCorpus, load_text_directory
from knowledge_bot.vector_store import ChromaMatchOracle


def main() -> None:
    """Ask one question against a directory of plain-text documents."""
    parser = argparse.ArgumentParser()
    parser.add_argument("question")
    parser.add_argument("--docs", default="data/docs", help="Directory with *.txt files")
    parser.add_argument("--chroma", default=None, help="Chroma collection built by build_index.py")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(args.log_level)
    settings, paths = load_settings()

    oracle = None
    if args.chroma:
        client = chromadb.PersistentClient(path=str(Path(paths.artifacts_dir) / "chroma"))
        oracle = ChromaMatchOracle(
            client.get_collection(args.chroma),
            embedding_model=settings.embedding_model,
        )

    pipeline = ChatPipeline(
        credentials=EnvCredentialStore(),
        corpus=InMemoryCorpus(load_text_directory(args.docs)),
        match_oracle=oracle,
        settings=settings,
    )
    print(asyncio.run(pipeline.generate_response(args.question)))


if __name__ == "__main__":
    main()
