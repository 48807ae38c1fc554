"""Ticket Publisher - Creates Jira tickets from extracted bug records."""

from bugbridge.jira.client import JiraClient
from bugbridge.jira.exceptions import JiraAuthError, JiraError, JiraRequestError
from bugbridge.jira.formatter import build_description
from bugbridge.jira.models import CreatedTicket

__all__ = [
    "CreatedTicket",
    "JiraAuthError",
    "JiraClient",
    "JiraError",
    "JiraRequestError",
    "build_description",
]
