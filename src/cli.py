"""Command-line interface for the company information tools."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from src import datasets
from src.config import Settings
from src.dispatcher import DEFAULT_VARIANT, VARIANTS, ToolDispatcher
from src.errors import ToolError
from src.models import ToolRequest
from src.providers import bright_data_client


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="company-info",
        description="Look up companies, job postings and work emails from the terminal.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose / debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    tools = sub.add_parser("tools", help="List the tools of a variant.")
    tools.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT)

    call = sub.add_parser("call", help="Invoke a tool by name.")
    call.add_argument("name", help="Tool name, e.g. get_employee_work_email.")
    call.add_argument(
        "arguments",
        nargs="?",
        default="{}",
        help="Tool arguments as a JSON object (default: {}).",
    )
    call.add_argument("--variant", choices=sorted(VARIANTS), default=DEFAULT_VARIANT)

    collect = sub.add_parser(
        "collect",
        help="Run a dataset collection end to end, waiting for the result.",
    )
    kinds = collect.add_subparsers(dest="dataset", required=True)

    companies = kinds.add_parser("companies", help="LinkedIn company profiles.")
    companies.add_argument("urls", nargs="+", help="LinkedIn company URLs.")

    posts = kinds.add_parser("posts", help="Recent posts of a LinkedIn company.")
    posts.add_argument("url", help="LinkedIn company URL.")

    jobs = kinds.add_parser("jobs", help="Technical job postings of a company.")
    jobs.add_argument("--company", required=True)
    jobs.add_argument("--location", choices=["The Netherlands", "Belgium"], required=True)
    jobs.add_argument("--country", choices=["NL", "BE"], required=True)
    jobs.add_argument(
        "--time-range",
        choices=["Past 24 hours", "Past week", "Past month", "Any time"],
        default="Past month",
    )
    return parser


async def _collect(args: argparse.Namespace, settings: Settings) -> dict:
    client = bright_data_client(settings)
    if args.dataset == "companies":
        return await datasets.collect_companies_data(client, settings, args.urls)
    if args.dataset == "posts":
        return await datasets.collect_company_posts(client, settings, args.url)
    return await datasets.collect_company_job_postings(
        client, settings, args.location, args.country, args.time_range, args.company
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    settings = Settings.from_env()

    if args.command == "tools":
        dispatcher = ToolDispatcher.for_variant(args.variant, settings)
        for tool in dispatcher.tools:
            print(f"{tool.name}\n    {tool.description}")
        return

    try:
        if args.command == "call":
            try:
                arguments = json.loads(args.arguments)
            except json.JSONDecodeError as exc:
                parser.error(f"arguments must be a JSON object: {exc}")
            if not isinstance(arguments, dict):
                parser.error("arguments must be a JSON object")
            dispatcher = ToolDispatcher.for_variant(args.variant, settings)
            result = asyncio.run(dispatcher.execute(ToolRequest(name=args.name, arguments=arguments)))
        else:
            result = asyncio.run(_collect(args, settings))
    except ToolError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
