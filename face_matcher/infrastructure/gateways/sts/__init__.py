"""STS Gateway"""
from .sts_gateway import CredentialsIssueError, StsGateway, to_iso_timestamp

__all__ = ["CredentialsIssueError", "StsGateway", "to_iso_timestamp"]
