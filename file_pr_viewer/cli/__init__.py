"""Command groups attached to the ``file-prs`` entry point.

credentials (file_pr_viewer.cli.credentials):
    Store, delete and test the GitHub token kept in the OS keyring.
"""

from file_pr_viewer.cli.credentials import credentials_group

__all__ = ["credentials_group"]
