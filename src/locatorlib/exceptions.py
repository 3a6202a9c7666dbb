"""Custom exception hierarchy for locatorlib."""


class LocatorError(Exception):
    """Base exception for all locatorlib errors.

    ``message`` is short and suitable for direct display to a user.
    """

    message = "Location error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class PermissionDenied(LocatorError):
    """The user denied location access to this app."""

    message = "Locations are turned off. Please turn it on in Settings"


class PermissionRestricted(LocatorError):
    """Location access is restricted, e.g. by parental controls."""

    message = "Locations are restricted"


class PermissionUndetermined(LocatorError):
    """The user has not decided yet. Recoverable: a fresh prompt is shown."""

    message = "Locations are not determined yet"


class SensorFailure(LocatorError):
    """The location sensor reported an error instead of a fix."""

    message = "Unable to fetch location"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class InvalidLocation(LocatorError):
    """Latitude or longitude is outside its valid range."""

    message = "Invalid Location"

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__()

    def __str__(self) -> str:
        return f"{self.message}: ({self.latitude}, {self.longitude})"


class ReverseGeocodingFailed(LocatorError):
    """The device geocoder returned no placemark or failed."""

    message = "Reverse Geocoding Failed"


class GeoCodingFailed(LocatorError):
    """The remote geocoding provider returned no usable result."""

    message = "GeoCoding Failed"


class TransportFailure(LocatorError):
    """A remote call could not be completed."""

    message = "Network request failed"

    def __init__(self, url: str, detail: str):
        self.url = url
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        return f"{self.message} for {self.url}: {self.detail}"


class ParseFailure(LocatorError):
    """A provider response did not have the expected shape."""

    message = "Unexpected response from provider"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        return f"{self.message}: {self.detail}"


class ConfigurationError(LocatorError):
    """A configuration source exists but cannot be used."""

    message = "Invalid configuration"

    def __init__(self, source: str, detail: str):
        self.source = source
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        return f"{self.message} in {self.source}: {self.detail}"
