"""Error taxonomy shared by the stores, the volunteer workflow and the AI tools."""


class AccessHubError(Exception):
    """Base class for errors surfaced to the UI."""


class NotAuthenticated(AccessHubError):
    """The operation needs a signed-in caller and none was supplied."""


class PermissionDenied(AccessHubError):
    """The caller lacks rights on the target document."""


class PreconditionFailed(AccessHubError):
    """A status changed before commit. Re-fetch and retry."""


class ValidationError(AccessHubError):
    """A required field is missing or empty, or a response did not match its schema."""


class DocumentNotFound(AccessHubError):
    """No document exists with the requested id."""

    def __init__(self, collection: str, doc_id: str):
        super().__init__(f"{collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class ConfigurationError(AccessHubError):
    """A required API key is missing or a setting holds an unknown value."""
