"""Employee metrics dashboard panels built from Jira and Slack metric families"""
from typing import Any, Dict, Iterable, Sequence
from metrics.models import MetricFamily, format_value
from metrics.presentation import DisplayNames, category_rows
from metrics.query import first_value


JIRA_KPIS = {
    "tickets_completed": "jira_tickets_completed_total",
    "open_tickets": "jira_open_tickets_total",
    "hours_logged": "jira_hours_logged_total",
    "avg_hours_per_ticket": "jira_avg_hours_per_ticket",
}

SLACK_PANELS = {
    "messages": "slack_messages_total",
    "reactions": "slack_reactions_total",
    "mentions": "slack_mentions_total",
    "active_minutes": "slack_active_minutes_total",
    "positive_messages": "slack_positive_messages_total",
}

UNASSIGNED = "Unassigned"


def build_jira_section(families: Sequence[MetricFamily], display_names: DisplayNames) -> Dict[str, Any]:
    kpis = {key: first_value(families, name) for key, name in JIRA_KPIS.items()}
    kpis["avg_hours_per_ticket"] = round(kpis["avg_hours_per_ticket"], 1)

    return {
        "kpis": {key: format_value(value) for key, value in kpis.items()},
        "tickets_by_status": category_rows(
            families, "jira_tickets_by_status", "status", hide_zero=False, aggregate=False
        ),
        "tickets_by_assignee": category_rows(
            families, "jira_tickets_by_assignee", "assignee",
            display_names=display_names, hide_zero=False, passthrough=[UNASSIGNED],
            aggregate=False
        ),
    }


def build_slack_section(families: Sequence[MetricFamily], display_names: DisplayNames,
                        hidden_users: Iterable[str]) -> Dict[str, Any]:
    """Per-user Slack panels; panels with no active users are omitted"""
    hidden_users = list(hidden_users)
    section = {}
    for key, name in SLACK_PANELS.items():
        rows = category_rows(
            families, name, "user",
            display_names=display_names, hidden=hidden_users
        )
        if rows:
            section[key] = rows
    return section


def build_employee_dashboard(families: Sequence[MetricFamily],
                             display_names: DisplayNames = None,
                             hidden_users: Iterable[str] = ()) -> Dict[str, Any]:
    display_names = display_names or DisplayNames()
    return {
        "jira": build_jira_section(families, display_names),
        "slack": build_slack_section(families, display_names, hidden_users),
    }
