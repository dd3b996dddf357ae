"""Alert rules and risk scoring for the real estate portfolio."""

from collections.abc import Sequence
from datetime import datetime

from .models import TrafficLight
from .schemas import AlertThresholdsValues, PropertyKPIs, RealEstateAlert, RiskBoardEntry

SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}


def _severity(
    value: float, critical: float, warning: float, below: bool = False
) -> str | None:
    """Classify ``value`` against a critical and a warning limit.

    With ``below`` the alert fires when the value drops under the limits,
    otherwise when it reaches them.
    """
    if below:
        if value < critical:
            return "critical"
        if value < warning:
            return "warning"
        return None
    if value >= critical:
        return "critical"
    if value >= warning:
        return "warning"
    return None


def _property_alerts(
    kpi: PropertyKPIs, t: AlertThresholdsValues
) -> list[tuple[str, str, str, str, float | None, float | None]]:
    """(type, severity, title, message, value, threshold) for one property."""
    name = kpi.property_name
    found = []

    severity = _severity(kpi.dscr, t.dscr_critical, t.dscr_warning, below=True)
    if severity:
        limit = t.dscr_critical if severity == "critical" else t.dscr_warning
        title = "DSCR kritisch" if severity == "critical" else "DSCR niedrig"
        found.append(
            (
                "dscr_low",
                severity,
                f"{title}: {name}",
                f"DSCR von {kpi.dscr:.2f} liegt unter {limit}",
                kpi.dscr,
                limit,
            )
        )

    months = kpi.months_until_interest_expiry
    if months is not None:
        if (
            months <= t.interest_expiry_critical_months
            and kpi.ltv > t.ltv_high_threshold
        ):
            found.append(
                (
                    "high_ltv_refinancing",
                    "critical",
                    f"Refinanzierungsrisiko: {name}",
                    f"Zinsbindung endet in {months} Monaten bei LTV {kpi.ltv:.1f}%",
                    months,
                    t.interest_expiry_critical_months,
                )
            )
        elif months <= t.interest_expiry_warning_months:
            found.append(
                (
                    "interest_expiring",
                    "warning",
                    f"Zinsbindung endet: {name}",
                    f"Zinsbindung endet in {months} Monaten",
                    months,
                    t.interest_expiry_warning_months,
                )
            )

    arrears_months = kpi.arrears_months
    severity = _severity(
        arrears_months, t.arrears_critical_months, t.arrears_warning_months
    )
    if severity:
        critical = severity == "critical"
        found.append(
            (
                "rent_arrears",
                severity,
                f"{'Mietrückstände kritisch' if critical else 'Mietrückstände'}: {name}",
                f"Rückstände von {kpi.rent_arrears:.0f} € "
                f"({arrears_months:.1f} Monatsmieten)",
                arrears_months,
                t.arrears_critical_months if critical else t.arrears_warning_months,
            )
        )

    severity = _severity(
        kpi.vacancy_days, t.vacancy_critical_days, t.vacancy_warning_days
    )
    if severity:
        critical = severity == "critical"
        found.append(
            (
                "vacancy_long",
                severity,
                f"{'Langer Leerstand' if critical else 'Leerstand'}: {name}",
                f"{kpi.vacancy_days} Tage Leerstand",
                kpi.vacancy_days,
                t.vacancy_critical_days if critical else t.vacancy_warning_days,
            )
        )

    if kpi.capex_planned > 0:
        severity = _severity(
            kpi.capex_budget_used, t.capex_critical_percent, t.capex_warning_percent
        )
        if severity:
            critical = severity == "critical"
            title = "CapEx-Budget überschritten" if critical else "CapEx-Budget hoch"
            found.append(
                (
                    "capex_budget_high",
                    severity,
                    f"{title}: {name}",
                    f"{kpi.capex_budget_used:.0f}% des CapEx-Budgets verbraucht",
                    kpi.capex_budget_used,
                    t.capex_critical_percent if critical else t.capex_warning_percent,
                )
            )

    if kpi.worst_technical_status == TrafficLight.RED:
        found.append(
            (
                "technical_issue",
                "critical",
                f"Technisches Problem: {name}",
                "Kritischer technischer Zustand erfordert Aufmerksamkeit",
                None,
                None,
            )
        )
    elif kpi.worst_technical_status == TrafficLight.YELLOW:
        found.append(
            (
                "technical_issue",
                "warning",
                f"Technische Prüfung: {name}",
                "Technischer Zustand sollte überprüft werden",
                None,
                None,
            )
        )

    return found


def build_alerts(
    kpis: Sequence[PropertyKPIs],
    thresholds: AlertThresholdsValues,
    now: datetime,
) -> list[RealEstateAlert]:
    """Evaluate every alert rule for every property, most severe first."""
    alerts: list[RealEstateAlert] = []
    for kpi in kpis:
        for alert_type, severity, title, message, value, threshold in _property_alerts(
            kpi, thresholds
        ):
            alerts.append(
                RealEstateAlert(
                    id=f"alert-{len(alerts) + 1}",
                    type=alert_type,
                    severity=severity,
                    title=title,
                    message=message,
                    property_id=kpi.property_id,
                    property_name=kpi.property_name,
                    value=value,
                    threshold=threshold,
                    action_url=f"/wealth/properties/{kpi.property_id}",
                    created_at=now,
                )
            )
    return sorted(alerts, key=lambda a: SEVERITY_ORDER[a.severity])


def risk_score(kpi: PropertyKPIs) -> int:
    """Score 0-100 built from DSCR, refinancing, arrears, condition and LTV."""
    score = 0

    if kpi.dscr < 1.0:
        score += 30
    elif kpi.dscr < 1.1:
        score += 25
    elif kpi.dscr < 1.2:
        score += 15
    elif kpi.dscr < 1.5:
        score += 5

    months = kpi.months_until_interest_expiry
    if months is not None:
        if months <= 12 and kpi.ltv > 80:
            score += 25
        elif months <= 18:
            score += 20
        elif months <= 24:
            score += 15
        elif months <= 36:
            score += 5

    arrears_months = kpi.arrears_months
    if arrears_months >= 2:
        score += 20
    elif arrears_months >= 1:
        score += 15
    elif arrears_months >= 0.5:
        score += 8

    if kpi.worst_technical_status == TrafficLight.RED:
        score += 15
    elif kpi.worst_technical_status == TrafficLight.YELLOW:
        score += 7

    if kpi.ltv > 90:
        score += 10
    elif kpi.ltv > 80:
        score += 6
    elif kpi.ltv > 70:
        score += 3

    return min(100, score)


def build_risk_board(
    kpis: Sequence[PropertyKPIs],
    alerts: Sequence[RealEstateAlert],
    limit: int = 10,
) -> list[RiskBoardEntry]:
    """Properties ranked by risk score, highest first."""
    entries = [
        RiskBoardEntry(
            property_id=kpi.property_id,
            property_name=kpi.property_name,
            property_address=kpi.property_address,
            risk_score=risk_score(kpi),
            interest_expiring_months=kpi.months_until_interest_expiry,
            dscr=kpi.dscr,
            arrears=kpi.rent_arrears,
            arrears_months=kpi.arrears_months,
            ltv=kpi.ltv,
            technical_worst_status=kpi.worst_technical_status,
            alerts=[a for a in alerts if a.property_id == kpi.property_id],
        )
        for kpi in kpis
    ]
    entries.sort(key=lambda e: e.risk_score, reverse=True)
    return entries[:limit]
