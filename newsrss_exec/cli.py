import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List

from newsrss.news import NewsSourceRegistry
from newsrss.news.errors import NewsRssError
from newsrss.news.extractor import extract_articles
from newsrss.news.fetcher import PageFetcher
from newsrss.news.model import Article
from newsrss_exec.controller import run_service


def setup_argparser():
    """Set up command line argument parser."""
    parser = argparse.ArgumentParser(description="Serve news sites as RSS feeds")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Scrape all sources periodically and serve their feeds")
    serve_parser.add_argument("address", nargs="?", help="host:port to listen on (default: BIND_ADDRESS or 0.0.0.0:3000)")

    scrape_parser = subparsers.add_parser("scrape", help="Scrape one source once and print its articles as JSON")
    scrape_parser.add_argument("source", help="Source name, e.g. RTE")

    subparsers.add_parser("sources", help="List registered sources and their feed routes")

    return parser


def article_to_dict(article: Article) -> Dict[str, Any]:
    return {
        "headline": article.headline,
        "link": article.link,
        "date": article.date.isoformat(),
        "image": article.image,
        "body_length": len(article.body),
    }


async def scrape(source_name: str) -> List[Dict[str, Any]]:
    source = NewsSourceRegistry.get_source_by_name(source_name)
    if source is None:
        raise ValueError(f"News source {source_name} not found")

    async with PageFetcher() as fetcher:
        articles = await extract_articles(source, fetcher)
    return [article_to_dict(article) for article in articles]


def main(argv=None):
    parser = setup_argparser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        try:
            asyncio.run(run_service(NewsSourceRegistry.get_all_sources(), args.address))
        except KeyboardInterrupt:
            pass

    elif args.command == "scrape":
        try:
            articles = asyncio.run(scrape(args.source))
        except (NewsRssError, ValueError) as e:
            print(f"❌ {e}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(articles, indent=2, ensure_ascii=False))

    elif args.command == "sources":
        for source in NewsSourceRegistry.get_all_sources():
            print(f"{source.name}\t{source.feed_path}\t{source.listing_url}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
