#!/usr/bin/env python3
"""
Command-line interface for recipe-pipeline.

Usage:
    recipe-pipeline https://example.com/banana-bread/
    recipe-pipeline URL1 URL2 --json
    recipe-pipeline URL --endpoint http://localhost:3000/api/call-llm -v
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ingredient_extractor.models.recipe import ParseResult
from ingredient_extractor.services.normalizer import format_amount, format_unit
from page_fetcher import PageFetcher

from .batch import BatchRunner, BatchSummary
from .pipeline import RecipePipeline
from .settings import load_settings

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()]
    )

    if not verbose:
        logging.getLogger("ingredient_extractor").setLevel(logging.WARNING)
        logging.getLogger("page_fetcher").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def _score_color(score: Optional[int]) -> str:
    if score is None:
        return "dim"
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def _print_result(result: ParseResult) -> None:
    """Pretty-print one recipe's ingredients."""
    recipe = result.recipe
    if not result.success:
        console.print(f"\n  [red]ERROR[/red] {recipe.source_url}: {result.error}")
        return

    source = result.source.value if result.source else "?"
    console.print(f"\n  [bold]{recipe.name or recipe.source_url}[/bold]  [dim]({source})[/dim]")
    if result.confidence_score is not None:
        c = _score_color(result.confidence_score)
        v = _score_color(result.verification_score)
        console.print(
            f"  confidence [{c}]{result.confidence_score}[/{c}]  "
            f"verification [{v}]{result.verification_score}[/{v}]"
        )

    table = Table(show_header=True, header_style="bold", padding=(0, 1))
    table.add_column("Ingredient", min_width=28)
    table.add_column("Amount", justify="right")
    table.add_column("Unit")
    table.add_column("Category")
    for ingredient in recipe.ingredients:
        table.add_row(
            ingredient.name,
            format_amount(ingredient.amount),
            format_unit(ingredient.unit, ingredient.amount),
            ingredient.category.value,
        )
    console.print(table)

    for warning in result.warnings:
        console.print(f"  [yellow]![/yellow] {warning}")


def _print_summary(summary: BatchSummary) -> None:
    color = "green" if summary.is_acceptable else "red"
    console.print(
        f"\n[bold]Batch Summary[/bold]  [{color}]{summary.succeeded}/{summary.total} succeeded "
        f"({summary.success_rate:.0%})[/{color}]"
    )
    if summary.failed:
        console.print(f"  [red]{summary.failure_message()}[/red]")


async def main_async(args: argparse.Namespace) -> int:
    """Run the batch and report it."""
    settings = load_settings()
    if args.endpoint:
        settings = settings.model_copy(update={"llm_endpoint": args.endpoint})

    async with PageFetcher(timeout=settings.fetch_timeout) as fetcher:
        pipeline = RecipePipeline(settings=settings, fetcher=fetcher)
        summary = await BatchRunner(pipeline).run(args.urls)

    if args.json:
        output = {
            "total": summary.total,
            "succeeded": summary.succeeded,
            "success_rate": summary.success_rate,
            "acceptable": summary.is_acceptable,
            "errors": summary.errors,
            "results": [result.model_dump(mode="json") for result in summary.results],
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        for result in summary.results:
            _print_result(result)
        _print_summary(summary)

    return 0 if summary.is_acceptable else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the command-line interface."""
    parser = argparse.ArgumentParser(
        description="Extract shopping-ready ingredient lists from recipe web pages"
    )
    parser.add_argument(
        "urls",
        nargs="+",
        help="One or more recipe URLs"
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="LLM backend URL (default: RECIPE_LLM_ENDPOINT)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    return asyncio.run(main_async(args))


if __name__ == "__main__":
    sys.exit(main())
