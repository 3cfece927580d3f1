"""Shared fixtures for dashboard tests"""
import pytest


EXAMPLE_TEXT = """# HELP jira_open_tickets_total Number of open tickets
# TYPE jira_open_tickets_total gauge
jira_open_tickets_total 7
# HELP slack_messages_total Messages sent
# TYPE slack_messages_total counter
slack_messages_total{user="U1"} 3
slack_messages_total{user="U2"} 5
"""


DASHBOARD_TEXT = """# HELP jira_tickets_completed_total Tickets completed
# TYPE jira_tickets_completed_total counter
jira_tickets_completed_total 42
# HELP jira_open_tickets_total Number of open tickets
# TYPE jira_open_tickets_total gauge
jira_open_tickets_total 7
# HELP jira_hours_logged_total Hours logged
# TYPE jira_hours_logged_total counter
jira_hours_logged_total 120.5
# HELP jira_avg_hours_per_ticket Average hours per ticket
# TYPE jira_avg_hours_per_ticket gauge
jira_avg_hours_per_ticket 2.8690476
# HELP jira_tickets_by_status Tickets by status
# TYPE jira_tickets_by_status gauge
jira_tickets_by_status{status="To Do"} 4
jira_tickets_by_status{status="In Progress"} 3
jira_tickets_by_status{status="Done"} 0
# HELP jira_tickets_by_assignee Tickets by assignee
# TYPE jira_tickets_by_assignee gauge
jira_tickets_by_assignee{assignee="U09ANKW5H0A"} 5
jira_tickets_by_assignee{assignee="Unassigned"} 2
# HELP slack_messages_total Messages sent
# TYPE slack_messages_total counter
slack_messages_total{user="USLACKBOT"} 50
slack_messages_total{user="U09ALTU98N9"} 12
slack_messages_total{user="U09ANKW5H0A"} 0
slack_messages_total{user="U0UNKNOWN"} 3
# HELP slack_reactions_total Reactions added
# TYPE slack_reactions_total counter
slack_reactions_total{user="U09ANKW5H0A"} 0
"""


@pytest.fixture
def example_text():
    return EXAMPLE_TEXT


@pytest.fixture
def dashboard_text():
    return DASHBOARD_TEXT
