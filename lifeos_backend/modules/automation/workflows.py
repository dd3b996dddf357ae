"""Catalogue of the n8n workflows a complete Life OS deployment provides."""

from collections.abc import Iterable

from .schemas import N8nWorkflow, TriggerType, WorkflowCheck, WorkflowSpec


def _cron(name: str, area: str, schedule: str) -> WorkflowSpec:
    return WorkflowSpec(name=name, area=area, type=TriggerType.CRON, schedule=schedule)


def _webhook(name: str, area: str) -> WorkflowSpec:
    return WorkflowSpec(name=name, area=area, type=TriggerType.WEBHOOK)


EXPECTED_WORKFLOWS: dict[str, list[WorkflowSpec]] = {
    "wealth": [
        _cron("sync-bhb-accounts", "wealth", "06:00"),
        _cron("sync-bhb-transactions", "wealth", "06:15"),
        _cron("sync-gmi-invoices", "wealth", "06:30"),
        _cron("sync-trade-republic", "wealth", "07:00"),
        _cron("fetch-etf-prices", "wealth", "20:00"),
        _cron("create-daily-snapshot", "wealth", "23:00"),
        _cron("check-rent-payments", "wealth", "5th of month"),
        _cron("check-loan-milestones", "wealth", "monthly"),
    ],
    "productivity": [
        _cron("sync-microsoft-todo", "productivity", "10min"),
        _webhook("process-plaud-meeting", "productivity"),
        _cron("check-outlook-inbox", "productivity", "30min"),
        _webhook("process-scan-inbox", "productivity"),
    ],
    "health": [
        _cron("sync-garmin-daily", "health", "08:00"),
        _cron("send-supplement-reminder", "health", "daily"),
        _cron("send-training-reminder", "health", "daily"),
        _cron("calculate-readiness", "health", "07:00"),
    ],
    "ai": [
        _cron("generate-morning-briefing", "ai", "06:30"),
        _cron("generate-weekly-review", "ai", "Sunday 18:00"),
        _cron("generate-insights", "ai", "22:00"),
        _webhook("process-telegram-message", "ai"),
    ],
    "documents": [
        _webhook("index-document", "documents"),
    ],
}


def all_expected() -> list[WorkflowSpec]:
    return [spec for specs in EXPECTED_WORKFLOWS.values() for spec in specs]


def check_workflows(deployed: Iterable[N8nWorkflow]) -> WorkflowCheck:
    """Compare deployed workflows with the catalogue by name.

    A deployed workflow matches an entry when its name contains the entry name,
    so prefixes such as ``[Wealth] create-daily-snapshot`` still count.
    """
    deployed_names = [w.name for w in deployed]
    expected = all_expected()

    missing = [
        spec
        for spec in expected
        if not any(spec.name in name for name in deployed_names)
    ]
    unexpected = [
        name
        for name in deployed_names
        if not any(spec.name in name for spec in expected)
    ]

    return WorkflowCheck(
        expected=len(expected),
        deployed=len(deployed_names),
        missing=missing,
        unexpected=unexpected,
    )
