import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv

from content_translator.cache import CacheFactory, CacheManager
from content_translator.config import Config
from content_translator.proposals import JsonProposalSource, ProposalTranslator
from content_translator.providers import ProviderFactory

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _format_error(exc: Exception) -> str:
    return f"{type(exc).__name__}: {exc}"


def _log_context(run_id: str, proposal_id: Optional[str] = None) -> str:
    proposal_value = "-" if proposal_id is None else proposal_id
    return f"run_id={run_id} proposal_id={proposal_value}"


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Translate proposal content with a persistent translation cache",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  content-translator --proposals proposals.json --proposal-id abc123 --target es
  content-translator --provider google --proposals proposals.json --proposal-id abc123 --target pt
  content-translator --cache-stats
  content-translator --purge-older-than 720  # drop rows untouched for 30 days
  content-translator --export-cache backup.json
        """,
    )

    parser.add_argument(
        "--provider",
        choices=["deepl", "google"],
        default="deepl",
        help="Translation provider to use (default: deepl)",
    )
    parser.add_argument("--proposals", help="JSON file with proposal content")
    parser.add_argument("--proposal-id", help="Id of the proposal to translate")
    parser.add_argument("--target", help="Target platform locale (e.g. es, fr, pt)")
    parser.add_argument(
        "--output",
        help="Write the translation as JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--rate-limit",
        type=int,
        default=10,
        help="Maximum provider requests per second (default: 10)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=3,
        help="Maximum number of attempts per provider request (default: 3)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--cache-type",
        choices=["sqlite", "memory"],
        default="sqlite",
        help="Type of cache store to use (default: sqlite)",
    )
    parser.add_argument("--cache-db", help="SQLite cache path (default: user cache dir)")
    parser.add_argument(
        "--cache-stats",
        action="store_true",
        help="Show cache statistics after the run",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Clear cache before starting",
    )
    parser.add_argument(
        "--purge-older-than",
        type=float,
        metavar="HOURS",
        help="Delete cache rows not written within HOURS",
    )
    parser.add_argument("--export-cache", metavar="PATH", help="Export cached rows to a JSON file")
    parser.add_argument("--import-cache", metavar="PATH", help="Import cached rows from a JSON file")

    return parser.parse_args(argv)


def _write_translation(payload: dict, output_path: Optional[str]) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output_path is None:
        print(text)
        return
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


async def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    load_dotenv()
    args = parse_arguments(argv)
    run_id = uuid4().hex[:12]

    translate_requested = any([args.proposals, args.proposal_id, args.target])
    if translate_requested and not (args.proposals and args.proposal_id and args.target):
        raise ValueError("--proposals, --proposal-id and --target must be given together.")

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = Config(
        provider=args.provider,
        rate_limit=args.rate_limit,
        max_retries=args.max_retries,
        cache_type=args.cache_type,
        cache_db_path=args.cache_db or "",
    )

    try:
        api_key = config.resolve_api_key() if translate_requested else None
        store = CacheFactory.create_store(config.cache_type, db_path=config.cache_db_path)
        logger.info(
            "%s event=cache_init cache_type=%s",
            _log_context(run_id),
            config.cache_type,
        )
        manager = CacheManager(store)

        if args.clear_cache:
            await store.clear()
            logger.info("%s event=cache_cleared", _log_context(run_id))
        if args.import_cache:
            imported = await manager.import_cache(args.import_cache)
            logger.info("%s event=cache_imported records=%s", _log_context(run_id), imported)
        if args.purge_older_than is not None:
            purged = await store.purge_older_than(args.purge_older_than)
            logger.info("%s event=cache_purged records=%s", _log_context(run_id), purged)

        if translate_requested:
            provider = ProviderFactory.create_provider(
                config.provider,
                api_key=api_key,
                rate_limit=config.rate_limit,
                max_retries=config.max_retries,
            )
            translator = ProposalTranslator(
                JsonProposalSource(args.proposals),
                provider,
                store,
                config.locale_map,
            )
            logger.info(
                "%s event=translation_start target=%s provider=%s",
                _log_context(run_id, args.proposal_id),
                args.target,
                config.provider,
            )
            translation = await translator.translate_proposal(args.proposal_id, args.target)
            _write_translation(translation.to_dict(), args.output)
            logger.info(
                "%s event=translation_done fields=%s source_locale=%s",
                _log_context(run_id, args.proposal_id),
                len(translation.translated),
                translation.source_locale or "-",
            )

        if args.export_cache:
            await manager.export_cache(args.export_cache)
        if args.cache_stats:
            await manager.print_stats()

    except Exception as exc:
        logger.error("%s event=run_failed error=%s", _log_context(run_id), _format_error(exc))
        raise


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
