"""
Deck analysis entry point.

``analyze(deck)`` runs the whole pipeline (context, checks, scoring) and
returns an immutable Report. The same deck always yields an identical
Report; the only random output, the fun fact, lives outside it.
"""
from __future__ import annotations

import json
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from deck_warnings import (
    CheckFailure,
    Category,
    Severity,
    WarningCheck,
    WarningItem,
    aggregate_win_rate_impact,
    build_context,
    evaluate_warnings,
)
from evolution import EvolutionLine
from format_checker import DEFAULT_FORMAT, FormatChecker
from models import Deck, DeckEntry
from probability import DeckProbabilities
from scoring import TierCounts, count_tiers, score_from_counts, score_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSummary:
    """Headline numbers for a report"""
    severity_counts: Tuple[Tuple[str, int], ...]  # (severity, count) in severity order
    estimated_win_rate_impact: float
    tiers: TierCounts
    label: str
    legal: bool

    @property
    def positives(self) -> int:
        return self.tiers.positives

    def count_for(self, severity: Severity) -> int:
        return dict(self.severity_counts).get(severity.value, 0)


@dataclass(frozen=True)
class Report:
    """Complete analysis output for one deck"""
    deck_name: Optional[str]
    total_cards: int
    score: int
    warnings: Tuple[WarningItem, ...]
    evolution_lines: Tuple[EvolutionLine, ...]
    probabilities: DeckProbabilities
    summary: ReportSummary

    def warnings_in(self, category: Category) -> List[WarningItem]:
        return [w for w in self.warnings if w.category == category]


@dataclass(frozen=True)
class AnalysisResult:
    """A report plus the checks that failed while building it"""
    report: Report
    failures: Tuple[CheckFailure, ...] = field(default_factory=tuple)


class DeckAnalyzer:
    """Runs the analysis pipeline with a fixed format and check set."""

    def __init__(self, format_name: str = DEFAULT_FORMAT,
                 checks: Optional[List[Tuple[Category, WarningCheck]]] = None,
                 checker: Optional[FormatChecker] = None):
        self.format_name = format_name
        self.checks = checks
        self.checker = checker or FormatChecker()

    def run(self, deck: Deck) -> AnalysisResult:
        """Analyze ``deck`` and keep any check failures for diagnostics."""
        ctx = build_context(deck, self.format_name, self.checker)
        warnings_report = evaluate_warnings(ctx, self.checks)

        tiers = count_tiers(warnings_report.items)
        score = score_from_counts(tiers.tier1, tiers.tier2, tiers.tier3, tiers.tier4, tiers.positives)

        severity_counts = tuple(
            (severity.value, sum(1 for w in warnings_report.items if w.severity == severity))
            for severity in Severity
        )

        summary = ReportSummary(
            severity_counts=severity_counts,
            estimated_win_rate_impact=aggregate_win_rate_impact(warnings_report.items),
            tiers=tiers,
            label=score_label(score),
            legal=ctx.legality.legal,
        )
        report = Report(
            deck_name=deck.name,
            total_cards=deck.total_cards,
            score=score,
            warnings=warnings_report.items,
            evolution_lines=ctx.evolution_lines,
            probabilities=ctx.probabilities,
            summary=summary,
        )

        logger.debug(
            "Analyzed %s: score=%d warnings=%d failures=%d",
            deck.name or "deck", score, len(report.warnings), len(warnings_report.failures),
        )
        return AnalysisResult(report=report, failures=warnings_report.failures)

    def analyze(self, deck: Deck) -> Report:
        return self.run(deck).report

    def analyze_batch(self, decks: Iterable[Deck], max_workers: Optional[int] = None) -> List[Report]:
        """
        Analyze independent decks concurrently.

        Reports come back in the same order as ``decks``.
        """
        decks = list(decks)
        if not decks:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(self.analyze, decks))


def analyze(deck: Deck, format_name: str = DEFAULT_FORMAT) -> Report:
    """Analyze a single deck with the default checks."""
    return DeckAnalyzer(format_name).analyze(deck)


def analyze_batch(decks: Iterable[Deck], max_workers: Optional[int] = None,
                  format_name: str = DEFAULT_FORMAT) -> List[Report]:
    """Analyze many decks on a thread pool, preserving input order."""
    return DeckAnalyzer(format_name).analyze_batch(decks, max_workers)


# ===== SERIALIZATION =====

def _entry_to_dict(entry: Optional[DeckEntry]) -> Optional[Dict[str, Any]]:
    if entry is None:
        return None
    return {"name": entry.card.name, "quantity": entry.quantity}


def _warning_to_dict(w: WarningItem) -> Dict[str, Any]:
    return {
        "id": w.id,
        "code": w.code,
        "severity": w.severity.value,
        "category": w.category.value,
        "title": w.title,
        "description": w.description,
        "suggestions": list(w.suggestions),
        "priority": w.priority,
        "estimated_impact": {
            "win_rate": w.estimated_impact.win_rate,
            "consistency": w.estimated_impact.consistency,
            "speed_turns": w.estimated_impact.speed_turns,
        },
        "cards": list(w.cards),
    }


def _line_to_dict(line: EvolutionLine) -> Dict[str, Any]:
    return {
        "name": line.name,
        "basic": _entry_to_dict(line.basic),
        "stage1": _entry_to_dict(line.stage1),
        "stage2": _entry_to_dict(line.stage2),
        "stage1_branches": [_entry_to_dict(entry) for entry in line.stage1_branches],
        "stage2_branches": [_entry_to_dict(entry) for entry in line.stage2_branches],
        "structure": line.structure,
        "line_type": line.line_type.value,
        "bottleneck": line.bottleneck.value,
        "bottleneck_suppressed": line.bottleneck_suppressed,
        "issues": list(line.issues),
        "recommendations": list(line.recommendations),
        "consistency": {
            "turn_two_stage1": line.consistency.turn_two_stage1,
            "turn_three_stage2": line.consistency.turn_three_stage2,
        },
    }


def report_to_dict(report: Report) -> Dict[str, Any]:
    """
    JSON-safe view of a report.

    Numbers stay plain ints and floats; ``setup_by_turn`` becomes an ordered
    list of ``{"turn", "probability"}`` objects.
    """
    tiers = report.summary.tiers
    return {
        "deck_name": report.deck_name,
        "total_cards": report.total_cards,
        "score": report.score,
        "warnings": [_warning_to_dict(w) for w in report.warnings],
        "evolution_lines": [_line_to_dict(line) for line in report.evolution_lines],
        "probabilities": {
            "mulligan_rate": report.probabilities.mulligan_rate,
            "dead_draw_rate": report.probabilities.dead_draw_rate,
            "setup_by_turn": [
                {"turn": turn, "probability": probability}
                for turn, probability in report.probabilities.setup_by_turn
            ],
        },
        "summary": {
            "severity_counts": dict(report.summary.severity_counts),
            "estimated_win_rate_impact": report.summary.estimated_win_rate_impact,
            "tiers": {
                "tier1": tiers.tier1,
                "tier2": tiers.tier2,
                "tier3": tiers.tier3,
                "tier4": tiers.tier4,
                "positives": tiers.positives,
            },
            "label": report.summary.label,
            "legal": report.summary.legal,
        },
    }


def load_deck_json(path: Union[str, Path]) -> Deck:
    """
    Load a deck from a JSON file of ``{"card": {...}, "quantity": n}`` entries.

    Raises:
        pydantic.ValidationError: if any card or quantity is malformed
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return Deck.from_json(data, name=None if isinstance(data, dict) and data.get("name") else path.stem)


# ===== FUN FACTS =====

FUN_FACTS: Tuple[str, ...] = (
    "💡 Fun fact: there are over 1,000 different creatures to build around!",
    "💡 Cool tip: Basic creatures are super important - you need one to start every game!",
    "💡 Did you know? The first cards of this kind came out in 1996!",
    "💡 Pro tip: drawing extra cards helps you find what you need faster!",
    "💡 Fun fact: shiny cards are extra sparkly and rare!",
    "💡 Remember: energy cards are like food for your creatures' attacks!",
    "💡 Cool fact: some creatures can evolve twice to become super strong!",
)


def pick_fun_fact(rng: random.Random) -> str:
    """Pick a fun fact with the caller's random source; never part of a Report."""
    return rng.choice(FUN_FACTS)
