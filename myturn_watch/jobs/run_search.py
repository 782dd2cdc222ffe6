"""CLI job: search every known coordinate, dedupe the sites found and tweet each one."""

import argparse
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from myturn_watch.core.aggregator import ResultAggregator
from myturn_watch.core.config import ConfigError, Settings, get_settings
from myturn_watch.core.dataset import DatasetError, load_points
from myturn_watch.core.models import CandidateRecord, GeoPoint
from myturn_watch.etl.render import render, with_call_to_action
from myturn_watch.vendors.myturn import AvailabilityClient, AvailabilityError
from myturn_watch.vendors.twitter import DryRunPublisher, PublishError, TwitterPublisher

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    points: int = 0
    failed_queries: int = 0
    records: int = 0
    published: int = 0
    failed_publishes: int = 0


def collect(
    points: Sequence[GeoPoint],
    client: AvailabilityClient,
    aggregator: ResultAggregator,
    workers: int = 1,
    stats: Optional[RunStats] = None,
) -> RunStats:
    """Query every point and merge the results into `aggregator`.

    A failed query is logged and skipped. With ``workers > 1`` the queries run
    on a bounded pool while merging stays on the calling thread.
    """
    stats = stats or RunStats()
    stats.points += len(points)

    if workers <= 1:
        for point in points:
            try:
                batch = client.query(point)
            except AvailabilityError as exc:
                logger.warning("Search failed for %s: %s", point, exc)
                stats.failed_queries += 1
                continue
            aggregator.add(batch)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(client.query, point): point for point in points}
            for future in as_completed(futures):
                try:
                    batch = future.result()
                except AvailabilityError as exc:
                    logger.warning("Search failed for %s: %s", futures[future], exc)
                    stats.failed_queries += 1
                    continue
                aggregator.add(batch)

    stats.records = len(aggregator)
    logger.info(
        "Searched %d points (%d failed); %d distinct sites",
        stats.points,
        stats.failed_queries,
        stats.records,
    )
    return stats


def publish_all(
    records: Iterable[CandidateRecord],
    publisher,
    signup_url: str,
    delay: float = 0.0,
    stats: Optional[RunStats] = None,
) -> RunStats:
    """Publish each record once, in ascending identity order.

    The aggregator has no ordering of its own; sorting here keeps runs
    reproducible. Publish failures are logged and the loop carries on.
    """
    stats = stats or RunStats()
    ordered = sorted(records, key=lambda record: record.identity)

    for index, record in enumerate(ordered):
        message = with_call_to_action(render(record), signup_url)
        try:
            publisher.publish(message)
        except PublishError as exc:
            logger.error("Failed to publish %s: %s", record.identity, exc)
            stats.failed_publishes += 1
        else:
            stats.published += 1

        if delay and index < len(ordered) - 1:
            time.sleep(delay)

    logger.info("Published %d messages (%d failed)", stats.published, stats.failed_publishes)
    return stats


def run_search_job(
    settings: Settings,
    *,
    publisher=None,
    client: Optional[AvailabilityClient] = None,
    dataset_path: Optional[str] = None,
    workers: Optional[int] = None,
    limit: Optional[int] = None,
    dry_run: bool = False,
) -> RunStats:
    points: List[GeoPoint] = load_points(dataset_path or settings.dataset_path)
    if limit is not None:
        points = points[:limit]

    if publisher is None:
        publisher = DryRunPublisher() if dry_run else TwitterPublisher(settings.credentials, timeout=settings.request_timeout)
    client = client or AvailabilityClient.from_settings(settings)

    aggregator = ResultAggregator()
    stats = collect(points, client, aggregator, workers=workers or settings.query_workers)
    publish_all(aggregator.all(), publisher, settings.signup_url, delay=settings.publish_delay, stats=stats)
    return stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search MyTurn for open vaccination sites and tweet them")
    parser.add_argument("--dataset", dest="dataset_path", help="Path to the zip code coordinates JSON file")
    parser.add_argument("--workers", dest="workers", type=int, help="Number of concurrent search requests")
    parser.add_argument("--limit", dest="limit", type=int, help="Only search the first N coordinates")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", help="Log messages instead of tweeting")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        run_search_job(
            settings,
            dataset_path=args.dataset_path,
            workers=args.workers,
            limit=args.limit,
            dry_run=args.dry_run,
        )
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except DatasetError as exc:
        logger.error("Failed to load coordinates: %s", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
