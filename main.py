"""
Command line entry point: runs queries against Solr and prints the results.
"""
import argparse
from typing import List

from config.config_loader import load_search_config
from config.logging_config import logger
from config.settings import SOLR_URL
from search.models import SearchResultSet
from search.pipeline import SearchPipeline
from search.query_executor import ExecutionError
from search.solr_client import SolrClient


def explain_results(result_set: SearchResultSet) -> None:
    """Prints a readable breakdown of a result set for debugging."""
    spec = result_set.spec
    print(f"\n{'=' * 60}")
    print(f"SEARCH RESULTS FOR: '{spec.effective_query}'")
    print(f"Found {result_set.total_found} (start={spec.start}, rows={spec.rows})")
    print(f"{'=' * 60}")

    for i, item in enumerate(result_set.items, spec.start + 1):
        print(f"\n[{i}] {item.label or item.id}")
        print(f"🔗 Link: {item.canonical_url_with_params}")
        print(f"🖼  Thumbnail: {item.thumbnail_url}")
        print(f"📦 Content models: {', '.join(item.content_models) or 'N/A'}")
        for name, value in item.raw_fields.items():
            print(f"   {name}: {value}")


def main(argv: List[str] = None):
    parser = argparse.ArgumentParser(description="Run a Solr search through the query pipeline")
    parser.add_argument("query", nargs="?", default="", help="Query text (empty runs the base query)")
    parser.add_argument("--page", type=int, default=0)
    parser.add_argument("--limit", type=int, default=None)
    parser.add_argument("--sort", default=None)
    parser.add_argument("--type", choices=["dismax", "edismax"], default=None)
    parser.add_argument("--filter", action="append", dest="filters", default=None)
    parser.add_argument("--post", action="store_true", help="Send the request as POST")
    args = parser.parse_args(argv)

    url_params = {"page": args.page}
    for key in ("limit", "sort", "type"):
        if getattr(args, key) is not None:
            url_params[key] = getattr(args, key)
    if args.filters:
        url_params["f"] = args.filters

    pipeline = SearchPipeline(load_search_config(), SolrClient(SOLR_URL))
    try:
        result_set = pipeline.search(args.query, url_params, use_post=args.post)
    except ExecutionError as e:
        logger.error(e.message)
        return 1

    explain_results(result_set)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
