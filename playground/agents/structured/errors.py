"""
Error taxonomy for the structured (schema-validated) invocation.

Each failure category has its own exception class and a stable ``code`` so
the analysis service and routes can react differently (retry, surface to the
user, fix the schema) without parsing messages.
"""


class InvocationError(Exception):
    """Base class for every failure of a structured invocation."""

    code = "invocation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(InvocationError):
    """The provider credential is missing."""

    code = "configuration_error"


class SchemaCompilationError(InvocationError):
    """The schema-source could not be turned into a validator."""

    code = "schema_error"


class ProviderError(InvocationError):
    """The provider call itself failed (network, auth, quota)."""

    code = "provider_error"


class EmptyResponseError(InvocationError):
    """The provider answered but returned no content."""

    code = "empty_response"


class MalformedJSONError(InvocationError):
    """The provider content was not parseable JSON."""

    code = "invalid_json"


class SchemaMismatchError(InvocationError):
    """The parsed reply did not satisfy the compiled schema."""

    code = "response_mismatch"

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []
