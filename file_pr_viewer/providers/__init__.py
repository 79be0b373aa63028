"""Hosting-service providers.

Key Components:
    - PullRequestProvider: Abstract commit-to-pull-request lookup
    - GitHubRestClient: GitHub REST API implementation (httpx)
    - GitHubPullPayload: Validation model for the API's pull objects
"""

from file_pr_viewer.providers.base import PullRequestProvider
from file_pr_viewer.providers.github_rest import GitHubPullPayload, GitHubRestClient

__all__ = [
    "GitHubPullPayload",
    "GitHubRestClient",
    "PullRequestProvider",
]
