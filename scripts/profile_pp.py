#!/usr/bin/env python3
"""
Compute the total performance (pp) of a profile and compare it with the live total
"""
import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from config.settings import (
    CACHE_DIR,
    DEFAULT_EVALUATOR,
    LOG_LEVEL,
    OSU_API_KEY,
    OSU_API_TIMEOUT,
    OSU_BASE_URL,
    PROFILE_CONFIG,
    PROJECT_NAME,
    RULESETS,
    VERSION,
)
from src.evaluators import load_evaluator
from src.profile import ProfileReport, compute_profile
from src.providers import OsuApiClient
from src.totals import ProfileTotalConfig
import logging

logger = logging.getLogger(__name__)

console = Console()


def format_position_change(change: int) -> str:
    """+N / -N, '-' when the play kept its position"""
    if change == 0:
        return "-"
    return f"{change:+d}"


def build_plays_table(report: ProfileReport) -> Table:
    table = Table(title=f"Top {len(report.plays)} plays")
    table.add_column("beatmap", style="cyan")
    table.add_column("live pp", style="yellow", justify="right")
    table.add_column("local pp", style="green", justify="right")
    table.add_column("pp change", justify="right")
    table.add_column("position change", justify="center")

    for _, row in report.comparison.iterrows():
        table.add_row(
            escape(str(row["beatmap"])),
            f"{row['live_pp']:.1f}",
            f"{row['local_pp']:.1f}",
            f"{row['pp_change']:.1f}",
            format_position_change(int(row["position_change"])),
        )

    return table


def render_report(report: ProfileReport, out: Console = console):
    total = report.total
    summary_text = (
        f"User:     [bold]{escape(report.user.username)}[/bold]\n"
        f"Live PP:  [yellow]{report.live_pp:.1f}[/yellow] "
        f"(including {report.playcount_bonus_pp:.1f}pp from playcount)\n"
        f"Local PP: [green]{report.local_pp:.1f}[/green]\n"
        f"[dim]Extrapolated tail: local {total.computed.extrapolated_tail:.1f}pp, "
        f"live {total.reference.extrapolated_tail:.1f}pp[/dim]"
    )
    ruleset_name = RULESETS[report.ruleset]
    out.print(Panel(summary_text, title=f"Profile ({ruleset_name})", border_style="bright_blue"))
    out.print(build_plays_table(report))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Computes the total performance (pp) of a profile.")
    parser.add_argument('user', help='User ID is preferred, but username should also work.')
    parser.add_argument('api_key', nargs='?', default=OSU_API_KEY,
                        help='API key from https://osu.ppy.sh/p/api (defaults to OSU_API_KEY)')
    parser.add_argument('-r', '--ruleset', type=int, choices=sorted(RULESETS), default=0,
                        help='0 - osu!, 1 - osu!taiko, 2 - osu!catch, 3 - osu!mania. Defaults to osu!.')
    parser.add_argument('--username', action='store_true',
                        help='Treat the user argument as a username even when it is all digits')
    parser.add_argument('--limit', type=int, default=PROFILE_CONFIG['best_limit'],
                        help='Number of top scores to fetch (max 100)')
    parser.add_argument('--evaluator', default=DEFAULT_EVALUATOR,
                        help="Per-play pp formula as 'module:Name'")
    parser.add_argument('--cache-dir', type=Path, default=CACHE_DIR,
                        help='Directory for downloaded .osu files')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--version', action='version', version=f"{PROJECT_NAME} {VERSION}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format='%(message)s',
        handlers=[logging.StreamHandler()]
    )

    if not args.api_key:
        console.print("[red]An API key is required (argument or OSU_API_KEY)[/red]")
        return 1

    if not 1 <= args.limit <= 100:
        console.print(f"[red]--limit must be between 1 and 100, got {args.limit}[/red]")
        return 1

    evaluator = load_evaluator(args.evaluator)
    client = OsuApiClient(
        api_key=args.api_key,
        cache_dir=args.cache_dir,
        base_url=OSU_BASE_URL,
        timeout=OSU_API_TIMEOUT,
    )

    report = compute_profile(
        client,
        args.user,
        ruleset=args.ruleset,
        evaluator=evaluator,
        cfg=ProfileTotalConfig.from_settings(PROFILE_CONFIG),
        limit=args.limit,
        by_username=args.username,
    )
    render_report(report)
    return 0


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[red]Profile calculation failed: {escape(str(e))}[/red]")
        logger.debug("Traceback:", exc_info=True)
        sys.exit(1)
