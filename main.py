"""
AWS毎分観測のクローラー

使い方:
    python main.py crawl data/
    python main.py report data/
"""
import argparse
import sys
import logging

from analysis.analyzer import StationAnalyzer
from database.result_writer import ResultWriter
from scrapers.aws_scraper import AwsScraper
from scrapers.errors import CrawlError

logger = logging.getLogger(__name__)


def cmd_crawl(args: argparse.Namespace) -> int:
    scraper = AwsScraper(
        url=args.url,
        delay=args.delay,
        timeout=args.timeout,
        max_attempts=args.max_attempts,
    )
    writer = ResultWriter(args.base)

    result = scraper.crawl()
    path = writer.publish(result)
    logger.info(f"done: {path}")
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    analyzer = StationAnalyzer(ResultWriter(args.base))
    print(analyzer.generate_summary_report())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aws-crawl",
        description="Crawl AWS per-minute observations into JSON files",
    )
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    crawl = sub.add_parser("crawl", help="Fetch the page and store the result")
    crawl.add_argument("base", help="base path to store result json")
    crawl.add_argument("--url", default=AwsScraper.URL)
    crawl.add_argument("--delay", type=float, default=AwsScraper.DEFAULT_DELAY,
                       help="seconds between fetch attempts")
    crawl.add_argument("--timeout", type=float, default=AwsScraper.DEFAULT_TIMEOUT)
    crawl.add_argument("--max-attempts", type=int, default=None,
                       help="give up after this many attempts (default: retry forever)")
    crawl.set_defaults(func=cmd_crawl)

    report = sub.add_parser("report", help="Summarize the latest stored result")
    report.add_argument("base", help="base path of stored result json")
    report.set_defaults(func=cmd_report)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except CrawlError as e:
        logger.error(f"error: {e}")
        return 1
    except FileNotFoundError as e:
        logger.error(f"No stored result: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
