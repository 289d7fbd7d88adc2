#!/usr/bin/env python3
"""
TCG Deck Analyzer - Score Pokémon TCG decklists
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from analyzer import DeckAnalyzer, Report, load_deck_json, pick_fun_fact, report_to_dict
from config import load_settings
from deck_parser import parse_decklist, resolve_deck
from deck_warnings import Severity
from format_checker import DEFAULT_FORMAT, FORMAT_RULES
from logger_config import analyzer_logger, log_analysis, serialize_deck, setup_logging
from pokemon_tcg_api import PokemonTCGAPI
from utils import format_percent

SEVERITY_ICONS = {
    Severity.CRITICAL: "🛑",
    Severity.HIGH: "⚠️ ",
    Severity.MEDIUM: "🔸",
    Severity.LOW: "🔹",
    Severity.INFO: "✅",
}


def print_report(report: Report, fun_fact: str = None):
    """Print a formatted deck report."""

    print("\n" + "=" * 60)
    print("🃏 DECK ANALYSIS RESULTS")
    print("=" * 60)

    print(f"\n🏆 SCORE: {report.score}/100 ({report.summary.label})")
    print(f"   Cards: {report.total_cards}")
    print(f"   Estimated win-rate impact: {report.summary.estimated_win_rate_impact:.1f}%")

    probs = report.probabilities
    print("\n🎲 DRAW ODDS")
    print(f"   Mulligan rate: {format_percent(probs.mulligan_rate)}")
    print(f"   Dead opening hand: {format_percent(probs.dead_draw_rate)}")
    for turn, probability in probs.setup_by_turn:
        bar = "█" * int(probability * 20)
        print(f"   Turn {turn} setup: {format_percent(probability):>6} |{bar}")

    evolving = [line for line in report.evolution_lines if line.is_evolution]
    if evolving:
        print("\n🧬 EVOLUTION LINES")
        for line in evolving:
            flag = ""
            if line.has_bottleneck:
                flag = f"  ({line.bottleneck.value} bottleneck{', covered' if line.bottleneck_suppressed else ''})"
            branches = ""
            if line.is_branched:
                branches = f" [{'/'.join(line.stage1_names + line.stage2_names)}]"
            print(f"   {line.name}: {line.structure}{branches}{flag}")

    print(f"\n📋 WARNINGS ({len(report.warnings)})")
    counts = [
        f"{SEVERITY_ICONS[severity].strip()} {report.summary.count_for(severity)}"
        for severity in Severity if report.summary.count_for(severity)
    ]
    if counts:
        print("   " + "  ".join(counts))
    if not report.warnings:
        print("   No warnings detected - deck looks clean!")
    for w in report.warnings:
        print(f"   {SEVERITY_ICONS[w.severity]} [{w.category.value}] {w.title}")
        print(f"      {w.description}")
        for suggestion in w.suggestions[:2]:
            print(f"      💡 {suggestion}")

    if fun_fact:
        print(f"\n{fun_fact}")

    print("\n" + "=" * 60)


def load_deck(path: Path, verbose: bool = False):
    """Load a JSON deck directly, or parse a text decklist and fetch its cards."""
    if path.suffix.lower() == ".json":
        return load_deck_json(path), []

    print(f"📄 Parsing decklist: {path.name}")
    decklist = parse_decklist(path)
    if verbose:
        print(f"Found {len(decklist.lines)} card lines, {decklist.total_cards} total cards")

    print("🌐 Fetching card data...")
    api = PokemonTCGAPI(load_settings())
    return resolve_deck(decklist, api)


def main():
    """Main entry point for the deck analyzer."""

    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Analyze Pokémon TCG decklists",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py charizard.txt
  python main.py deck.json --json
  python main.py charizard.txt --seed 7 --log-level DEBUG

Supported formats:
  - PTCGL export ("4 Charizard ex OBF 125", with Pokémon/Trainer/Energy headers)
  - "4 Card Name" or "4x Card Name"
  - JSON list of {"card": {...}, "quantity": n}

Text decklists fetch card data from the Pokémon TCG API.
        """
    )

    parser.add_argument('deck', help='Path to a decklist (.txt) or deck JSON (.json)')
    parser.add_argument('--json', action='store_true', help='Print the report as JSON')
    parser.add_argument('--format', default=DEFAULT_FORMAT, choices=sorted(FORMAT_RULES),
                        help='Format to check legality against')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the fun fact')
    parser.add_argument('--log-level', default=settings.log_level, help='Logging level')
    parser.add_argument('--log-file', default=None, help='Append JSON-lines analysis events to this file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show detailed progress information')

    args = parser.parse_args()

    setup_logging(args.log_level, json_file=args.log_file)

    deck_path = Path(args.deck)
    if not deck_path.exists():
        print(f"Error: Deck file '{args.deck}' not found.")
        sys.exit(1)

    try:
        deck, missing = load_deck(deck_path, verbose=args.verbose)
        result = DeckAnalyzer(args.format).run(deck)
        report = result.report
    except (OSError, ValueError) as e:
        print(f"❌ Error: {e}")
        if args.verbose:
            analyzer_logger.exception("Analysis failed")
        sys.exit(1)

    extra = {"missing_cards": missing, "check_failures": [f.check for f in result.failures]}
    if args.verbose:
        extra["deck"] = serialize_deck(deck)
    log_analysis(analyzer_logger, report, **extra)

    if args.json:
        print(json.dumps(report_to_dict(report), indent=2))
        return

    fact = pick_fun_fact(random.Random(args.seed))
    print_report(report, fun_fact=fact)

    if missing:
        print(f"\n⚠️  MISSING CARDS")
        print(f"   Could not find card data for {len(missing)} cards:")
        for name in missing:
            print(f"   - {name}")

    if result.failures:
        logging.getLogger(__name__).warning("%d checks failed; see log for details", len(result.failures))

    print(f"✅ Analysis complete! {deck.total_cards} cards analyzed.")


if __name__ == "__main__":
    main()
