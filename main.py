"""
MovieLedger - Movie ratings ledger

CLI entry point for operating on a persisted ledger.
"""

import argparse
import logging
import os
import sys

from movieledger.gateway import LedgerGateway
from movieledger.registry.exceptions import AlreadyInitialized, LedgerError, NotInitialized
from movieledger.registry.movie_ledger import MovieLedger
from movieledger.reporting import RatingsReport
from movieledger.utils.storage import LedgerStorage
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MovieLedger - movie ratings ledger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a ledger owned by alice
  python main.py --caller alice init

  # Register a movie (owner only) and rate it
  python main.py --caller alice add-movie "The Father"
  python main.py --caller bob rate 1 4 "happy and blessed"

  # Read aggregates
  python main.py average 1
  python main.py report --output-dir output
        """
    )

    parser.add_argument(
        "--caller",
        default=os.getenv("MOVIELEDGER_CALLER"),
        help="Caller identity (default: $MOVIELEDGER_CALLER)"
    )

    parser.add_argument(
        "--ledger-path",
        default=str(settings.LEDGER_PATH),
        help=f"Ledger JSON file (default: {settings.LEDGER_PATH})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init", help="Create a new ledger owned by --caller")

    add_movie = commands.add_parser("add-movie", help="Register a movie (owner only)")
    add_movie.add_argument("name")

    rate = commands.add_parser("rate", help="Rate a movie as --caller")
    rate.add_argument("movie_id", type=int)
    rate.add_argument("score", type=int)
    rate.add_argument("text", nargs="?", default="")

    movie = commands.add_parser("movie", help="Show one movie")
    movie.add_argument("movie_id", type=int)

    commands.add_parser("count", help="Number of movies")

    average = commands.add_parser("average", help="Average score of a movie")
    average.add_argument("movie_id", type=int)

    review = commands.add_parser("review", help="Show the review a user left on a movie")
    review.add_argument("movie_id", type=int)
    review.add_argument("user")

    report = commands.add_parser("report", help="Export the ratings summary CSV")
    report.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )

    return parser


def run_command(args, storage: LedgerStorage) -> None:
    """Execute one parsed command against the ledger at storage."""
    if args.command == "init":
        if storage.exists():
            raise AlreadyInitialized()
        ledger = MovieLedger(owner=args.caller)
        storage.save(ledger)
        print(f"Ledger created at {storage.ledger_path} (owner: {ledger.owner})")
        return

    ledger = storage.load()
    if ledger is None:
        raise NotInitialized()

    gateway = LedgerGateway(ledger, storage)

    if args.command == "add-movie":
        movie_id = gateway.call(args.caller, "add_movie", args.name)
        print(f"Added movie {movie_id}: {args.name}")

    elif args.command == "rate":
        review_id = gateway.call(args.caller, "rate_movie", args.movie_id, args.score, args.text)
        print(f"Recorded review {review_id} for movie {args.movie_id}")

    elif args.command == "movie":
        movie = gateway.call(args.caller, "get_movie", args.movie_id)
        print(f"{movie.id}: {movie.name}")
        print(f"  Total ratings: {movie.total_ratings}")
        print(f"  Total scores: {movie.total_scores}")

    elif args.command == "count":
        print(gateway.call(args.caller, "get_movies_count"))

    elif args.command == "average":
        print(gateway.call(args.caller, "average_score", args.movie_id))

    elif args.command == "review":
        review = gateway.call(args.caller, "reviews", args.movie_id, args.user)
        print(f"Review {review.id} by {review.user}: {review.score}/5")
        if review.text:
            print(f"  {review.text}")

    elif args.command == "report":
        output_path = RatingsReport(ledger).export_csv(args.output_dir)
        print(f"Ratings summary: {output_path}")


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in ("init", "add-movie", "rate") and not args.caller:
        parser.error(f"--caller is required for {args.command}")

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    storage = LedgerStorage(args.ledger_path)

    try:
        run_command(args, storage)
        sys.exit(0)

    except LedgerError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"\n❌ {type(e).__name__}: {e}")
        sys.exit(1)

    except OSError as e:
        logger.error(f"Ledger storage failed: {e}", exc_info=True)
        print(f"\n❌ Ledger storage failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
