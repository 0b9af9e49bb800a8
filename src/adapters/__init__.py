"""Integration adapters for ticketscope.

Adapters translate between Slack/Jira and the core ports and models.
"""
