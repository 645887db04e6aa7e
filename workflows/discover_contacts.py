"""Contact discovery workflow - find a person's profile, emails and phones.

USAGE:
    # Single person (free text)
    uv run python workflows/discover_contacts.py run "Steven Lowy, Principal, LFG, Sydney Australia"
    uv run python workflows/discover_contacts.py run "Jane Doe (CFO) at TechCorp" --json
    uv run python workflows/discover_contacts.py run "John Smith @ Acme Corp" --threshold 50

    # Batch (one person per line, blank lines and # comments ignored)
    uv run python workflows/discover_contacts.py batch --file contacts.txt
    uv run python workflows/discover_contacts.py batch --file contacts.txt --json --delay 2

API keys are read from the environment / .env:
    SERP_API_KEY or SERPER_API_KEY, APOLLO_API_KEY, LUSHA_API_KEY,
    FIRMABLE_API_KEY, NUMVERIFY_API_KEY, HUNTER_API_KEY
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import argparse
import json
from typing import Optional

import httpx
from loguru import logger

from lib.contact_discovery.errors import InvalidIdentityError
from lib.contact_discovery.models import ConsolidatedFact, EmailValidation, ResolutionResult
from services.discovery.config import DiscoveryConfig, build_service
from services.discovery.input_parser import parse_identity


def _format_fact(fact: ConsolidatedFact) -> str:
    line = (
        f"    {fact.value:<32} {fact.kind:<9} {fact.confidence:.0%}  "
        f"[{', '.join(fact.sources)}]"
    )
    if fact.flags:
        line += f"  ({', '.join(fact.flags)})"
    if fact.validation:
        v = fact.validation
        status = "valid" if v.valid else "invalid"
        detail = v.reason if isinstance(v, EmailValidation) else (v.line_type or "unknown")
        line += f"  {status}/{detail} via {v.method}"
    return line


def print_result(result: ResolutionResult) -> None:
    q = result.query
    print(f"\n=== {q.full_name} ===")
    if q.title or q.company:
        print(f"  {q.title or ''}{' @ ' if q.title and q.company else ''}{q.company or ''}")
    print(f"  Location: {q.location or '-'}   Domain: {result.domain or '-'}")

    if result.profile_url:
        conf = f" ({result.profile_confidence:.0%})" if result.profile_confidence is not None else ""
        print(f"  Profile:  {result.profile_url}{conf} via {result.profile_source}")
    else:
        print("  Profile:  not found")

    print(f"  Emails ({len(result.emails)}):")
    for fact in result.emails:
        print(_format_fact(fact))
    print(f"  Phones ({len(result.phones)}):")
    for fact in result.phones:
        print(_format_fact(fact))

    print("  Sources:")
    for name, source in result.sources.items():
        detail = f" - {source.error}" if source.error else ""
        print(f"    {name:<10} {source.status}{detail}")
    for note in result.notes:
        print(f"  ! {note.stage}: {note.message}")
    print(f"  Took {result.duration_ms / 1000:.1f}s")


async def run_single(text: str, as_json: bool = False, threshold: Optional[int] = None) -> int:
    """Resolve one free-text identity."""
    overrides = {"match_threshold": threshold} if threshold is not None else {}
    config = DiscoveryConfig.from_env(**overrides)
    try:
        query = parse_identity(text)
    except InvalidIdentityError as e:
        logger.error(str(e))
        return 2

    async with httpx.AsyncClient() as client:
        service = build_service(config, client)
        result = await service.resolve(query)

    if as_json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print_result(result)
    return 0


async def run_batch(file: str, as_json: bool = False, delay: Optional[float] = None) -> int:
    """Resolve every line of a file, sequentially."""
    overrides = {"batch_delay": delay} if delay is not None else {}
    config = DiscoveryConfig.from_env(**overrides)

    lines = [
        line.strip() for line in Path(file).read_text().splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    queries, rejected = [], []
    for line in lines:
        try:
            queries.append(parse_identity(line))
        except InvalidIdentityError as e:
            logger.warning(f"Skipping line: {e}")
            rejected.append({"input": line, "error": str(e)})

    if not queries:
        logger.info("No valid identities to resolve")
        return 1

    async with httpx.AsyncClient() as client:
        service = build_service(config, client)
        batch = await service.resolve_batch(queries)

    batch.errors = rejected + batch.errors
    batch.failed += len(rejected)
    batch.total += len(rejected)

    if as_json:
        print(json.dumps(batch.model_dump(mode="json"), indent=2))
    else:
        for result in batch.results:
            print_result(result)
        found = sum(1 for r in batch.results if r.found_any)
        logger.info(
            f"\nContact Discovery Complete:\n"
            f"  Identities:        {batch.total}\n"
            f"  Resolved:          {batch.succeeded}\n"
            f"  Rejected:          {batch.failed}\n"
            f"  With contacts:     {found}\n"
            f"  Took:              {batch.duration_ms / 1000:.1f}s"
        )
    return 0


def main():
    parser = argparse.ArgumentParser(description="Contact discovery pipeline")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    run_parser = subparsers.add_parser("run", help="Resolve a single person")
    run_parser.add_argument("text", help='e.g. "Jane Doe, CFO, TechCorp, Sydney"')
    run_parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    run_parser.add_argument("--threshold", type=int, default=None, help="Profile match early-exit score (0-100)")

    batch_parser = subparsers.add_parser("batch", help="Resolve one person per line of a file")
    batch_parser.add_argument("--file", required=True, help="Text file, one person per line")
    batch_parser.add_argument("--json", action="store_true", help="Print the batch result as JSON")
    batch_parser.add_argument("--delay", type=float, default=None, help="Seconds between people")

    args = parser.parse_args()

    if args.command == "run":
        sys.exit(asyncio.run(run_single(args.text, as_json=args.json, threshold=args.threshold)))
    elif args.command == "batch":
        sys.exit(asyncio.run(run_batch(args.file, as_json=args.json, delay=args.delay)))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
