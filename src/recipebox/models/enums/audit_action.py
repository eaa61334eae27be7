import enum


class AuditAction(str, enum.Enum):
    share = "share"
    revoke = "revoke"
    create_link = "create_link"
    revoke_link = "revoke_link"
