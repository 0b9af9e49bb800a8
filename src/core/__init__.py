"""Core domain package for ticketscope.

Core contains reference matching, issue resolution, rendering and the event
loop without any Slack or Jira specific code, keeping the business logic
portable.
"""
