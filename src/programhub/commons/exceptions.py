"""Error taxonomy shared by the query engine, the geo resolver and the webservice.

Each error carries the HTTP status the webservice renders it with. Client-side
problems (bad query syntax, unknown ids, addresses with no match) map to 4xx;
upstream or store failures map to 5xx.
"""


class ProgramHubError(Exception):
    """Base class for every error raised by ProgramHub."""

    status_code = 500

    def __init__(self, message: str):
        super(ProgramHubError, self).__init__(message)
        self.message = message


class ValidationError(ProgramHubError):
    """Malformed query syntax or an uncoercible value provided by the client."""

    status_code = 400


class NotFoundError(ProgramHubError):
    """An id-addressed lookup matched no document."""

    status_code = 404

    def __init__(self, resource: str, resource_id):
        self.resource = resource
        self.resource_id = resource_id
        super(NotFoundError, self).__init__(f"{resource} not found with id '{resource_id}'")


class ConfigurationError(ProgramHubError):
    """A static binding (e.g. a population target) is wrong. Raised at registration time."""


class GeocodingError(ProgramHubError):
    """Address resolution failed."""


class GeocodingNoMatchError(GeocodingError):
    """The geocoder returned no result for the given address."""

    status_code = 400

    def __init__(self, address: str):
        self.address = address
        super(GeocodingNoMatchError, self).__init__(f"Could not geocode address '{address}'")


class GeocodingUnavailableError(GeocodingError):
    """The geocoding service is unreachable or answered with an error."""

    status_code = 503


class StoreError(ProgramHubError):
    """Connectivity problem or constraint violation reported by the document store."""


class CascadeIntegrityError(ProgramHubError):
    """A cascade delete could not complete.

    ``children_deleted`` tells how many child documents were already removed and
    ``parent_removed`` is always ``False``: the parent is either untouched (child
    deletion failed) or still present with some of its children gone.
    """

    def __init__(self, message: str, parent_id, children_deleted: int = 0):
        self.parent_id = parent_id
        self.children_deleted = children_deleted
        self.parent_removed = False
        super(CascadeIntegrityError, self).__init__(message)
