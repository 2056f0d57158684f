"""Strongly typed identifiers for remark domain entities.

Users are keyed by the identity provider's integer id so that an
identity maps to exactly one account. Everything created by this
service is keyed by a UUID.
"""

from typing import NewType
from uuid import UUID

# Provider-issued identifiers
UserId = NewType("UserId", int)
MediaId = NewType("MediaId", int)

# Service-issued identifiers
CommentId = NewType("CommentId", UUID)
VoteId = NewType("VoteId", UUID)
ReportId = NewType("ReportId", UUID)
ModerationRecordId = NewType("ModerationRecordId", UUID)
AuditEntryId = NewType("AuditEntryId", UUID)
