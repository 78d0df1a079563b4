from caseflow.models.enums import ContentType

# ── Document store collections ───────────────────────────────────────────────
VERIFICATION_REQUESTS = "verificationRequests"
REPORTED_CONTENT = "reportedContent"
USERS = "users"
NOTIFICATIONS = "notifications"
CASES = "cases"
COMMENTS = "comments"

# Collection that owns the primary record for each reportable content type.
CONTENT_COLLECTIONS: dict[ContentType, str] = {
    ContentType.CASE: CASES,
    ContentType.COMMENT: COMMENTS,
    ContentType.PROFILE: USERS,
}

# Fields that name the author of a content record, in lookup order.
AUTHOR_FIELDS: tuple[str, ...] = ("author_id", "user_id")
