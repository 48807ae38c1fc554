"""bugbridge - Sync labelled GitHub bug reports into Jira tickets."""

__version__ = "0.1.0"
