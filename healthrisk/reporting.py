"""
Console rendering of analytics results with rich.

Every renderer takes an optional ``Console`` so callers (and tests) can
direct output to a recording console instead of the terminal.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from healthrisk.domain.family import FamilyHealthSummary, FamilyRiskAssessment
from healthrisk.domain.models import (
    AlertLevel,
    HealthDeteriorationPattern,
    HealthRiskPrediction,
    RiskFactorAnalysis,
    RiskLevel,
)

RISK_LEVEL_STYLES: dict[RiskLevel, str] = {
    RiskLevel.LOW: "green",
    RiskLevel.MODERATE: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.VERY_HIGH: "bold red",
}

ALERT_LEVEL_STYLES: dict[AlertLevel, str] = {
    AlertLevel.INFO: "cyan",
    AlertLevel.WARNING: "yellow",
    AlertLevel.CRITICAL: "bold red",
}


def _level(level: RiskLevel) -> str:
    style = RISK_LEVEL_STYLES[level]
    return f"[{style}]{level.value.replace('_', ' ').upper()}[/{style}]"


def render_assessments(
    assessments: Sequence[FamilyRiskAssessment], console: Console | None = None
) -> None:
    console = console or Console()
    if not assessments:
        console.print("No hereditary risks identified", style="green")
        return

    table = Table(title="Hereditary Risk Assessments")
    table.add_column("Condition", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Level")
    table.add_column("Affected Relatives", justify="right")
    table.add_column("Top Recommendation", style="white")

    for assessment in assessments:
        table.add_row(
            assessment.condition_name,
            f"{assessment.family_risk_score:.2f}",
            _level(assessment.risk_level),
            str(assessment.affected_relatives),
            assessment.recommendations[0] if assessment.recommendations else "-",
        )
    console.print(table)


def render_family_summary(summary: FamilyHealthSummary, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Family Health Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Family Members", str(summary.total_members))
    table.add_row("Living / Deceased", f"{summary.living_members} / {summary.deceased_members}")
    table.add_row("Generations Tracked", str(summary.generations_tracked))
    table.add_row("High-Risk Conditions", str(summary.high_risk_conditions))
    table.add_row("Very High Hereditary Risks", str(summary.hereditary_risk))
    if summary.common_conditions:
        table.add_row(
            "Most Common Condition",
            f"{summary.common_conditions[0].condition} ({summary.common_conditions[0].count})",
        )
    console.print(table)


def render_prediction(prediction: HealthRiskPrediction, console: Console | None = None) -> None:
    console = console or Console()
    factors = prediction.contributing_factors

    lines = [
        f"Risk: {prediction.risk_score:.0%} ({_level(prediction.risk_level)})",
        f"Timeframe: {prediction.timeframe.replace('_', ' ')}",
        f"Confidence: {prediction.confidence:.0%}",
        (
            f"Factors: lifestyle {factors.lifestyle:.2f}, medical {factors.medical_history:.2f}, "
            f"family {factors.family_history:.2f}"
        ),
    ]
    if prediction.triggered_factors:
        lines.append("Triggered by: " + ", ".join(prediction.triggered_factors))
    lines.append("")
    lines.extend(f"  • {recommendation}" for recommendation in prediction.recommendations)

    title = prediction.disease_type.value.replace("_", " ").title()
    console.print(Panel("\n".join(lines), title=title, style="blue"))


def render_patterns(
    patterns: Sequence[HealthDeteriorationPattern], console: Console | None = None
) -> None:
    console = console or Console()
    if not patterns:
        console.print("No deterioration patterns detected", style="green")
        return

    table = Table(title="Health Trends")
    table.add_column("Pattern", style="cyan")
    table.add_column("Metrics", style="magenta")
    table.add_column("Direction")
    table.add_column("Severity")
    table.add_column("Alert")
    table.add_column("Confidence", justify="right")

    for pattern in patterns:
        alert_style = ALERT_LEVEL_STYLES[pattern.alert_level]
        table.add_row(
            pattern.pattern_type,
            ", ".join(pattern.affected_metrics),
            pattern.trend_direction.value,
            pattern.severity.value,
            f"[{alert_style}]{pattern.alert_level.value.upper()}[/{alert_style}]",
            f"{pattern.confidence:.0%}",
        )
    console.print(table)


def render_risk_factor_analysis(
    analysis: RiskFactorAnalysis, console: Console | None = None
) -> None:
    console = console or Console()

    title = f"Risk Factors (total {analysis.total_risk_score:.2f}, {analysis.risk_trend.value})"
    table = Table(title=title)
    table.add_column("Factor", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Severity")
    table.add_column("Impact", justify="right")
    table.add_column("Modifiable")

    for factor in analysis.risk_factors:
        table.add_row(
            factor.name,
            factor.category.value,
            factor.severity.value,
            f"{factor.impact:.1f}",
            "yes" if factor.modifiable else "no",
        )
    for factor in analysis.protective_factors:
        table.add_row(
            f"[green]{factor.name}[/green]",
            factor.category.value,
            "protective",
            f"-{factor.impact:.1f}",
            "yes" if factor.modifiable else "no",
        )
    console.print(table)

    if analysis.priority_actions:
        actions = "\n".join(
            f"{index}. {action}" for index, action in enumerate(analysis.priority_actions, 1)
        )
        console.print(Panel(actions, title="Priority Actions", style="yellow"))
