"""Typed errors raised before any notification is sent."""


class DispatchError(Exception):
    """Fatal dispatch failure with a machine-readable kind.

    Raised only for conditions that make every channel fail (unknown tenant,
    unusable mail-relay credentials). Per-recipient send failures are collected
    on the dispatch result instead.
    """

    kind = "dispatch_failed"

    def __init__(self, detail: str, kind: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "details": self.detail}


class TenantNotFoundError(DispatchError):
    """No active tenant owns the given hostname."""

    kind = "tenant_not_found"

    def __init__(self, hostname: str | None) -> None:
        super().__init__(f"Tenant not found for domain {hostname or '<none>'}")
        self.hostname = hostname


class CategoryNotFoundError(DispatchError):
    """Service category slug does not exist."""

    kind = "category_not_found"

    def __init__(self, slug: str) -> None:
        super().__init__(f"Service category '{slug}' not found")
        self.slug = slug


class SubmissionNotFoundError(DispatchError):
    """Lead submission record does not exist for the tenant."""

    kind = "submission_not_found"

    def __init__(self, submission_id: str) -> None:
        super().__init__(f"Submission data not found for {submission_id}")
        self.submission_id = submission_id
