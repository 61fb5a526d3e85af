from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from dotenv import load_dotenv

from src.ingest import CURATED_ORDER, DocTreeBuilder, DocTreeBuilderConfig, load_order_table
from src.search import IndexHolder, SearchEngine, SearchIndexBuilder
from src.server.logging_config import configure_logging


def parse_args() -> argparse.Namespace:
    if Path(".env").exists():
        load_dotenv(".env", override=False)
    parser = argparse.ArgumentParser(description="Build the documentation tree and search index.")
    parser.add_argument(
        "docs_root",
        type=Path,
        nargs="?",
        default=Path(os.getenv("DOCS_ROOT", "docs")),
        help="Documentation root directory (default: $DOCS_ROOT or ./docs)",
    )
    parser.add_argument("--query", "-q", help="Run a search query against the built index")
    parser.add_argument("--limit", type=int, default=10, help="Maximum number of search results (default: 10)")
    parser.add_argument("--tree", action="store_true", help="Print the navigation tree as JSON")
    parser.add_argument(
        "--order-file",
        type=Path,
        default=Path(os.environ["DOCS_ORDER_FILE"]) if os.getenv("DOCS_ORDER_FILE") else None,
        help="YAML curated order table (default: built-in table)",
    )
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"))
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level.upper())

    order_table = load_order_table(args.order_file) if args.order_file else CURATED_ORDER
    holder = IndexHolder(args.docs_root, SearchIndexBuilder())
    holder.rebuild()
    result = holder.builder.last_result

    print(
        "Index complete",
        {
            "documents": result.documents_indexed if result else 0,
            "skipped": result.documents_skipped if result else 0,
            "docs_root": str(args.docs_root),
        },
    )

    if args.tree:
        tree = DocTreeBuilder(DocTreeBuilderConfig(order_table=order_table)).build(args.docs_root)
        print(json.dumps([node.to_dict() for node in tree], indent=2, ensure_ascii=False))

    if args.query:
        results = SearchEngine(holder).search(args.query, limit=args.limit)
        print(
            json.dumps(
                {"query": args.query, "results": [item.to_dict() for item in results]},
                indent=2,
                ensure_ascii=False,
            )
        )

    holder.close()


if __name__ == "__main__":
    main()
