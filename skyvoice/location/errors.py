"""User-facing location errors. Each carries an actionable message."""


class LocationError(Exception):
    title = "Location Error"
    user_message = "Unable to determine location."

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.user_message)
        self.detail = detail


class LocationServicesDisabled(LocationError):
    title = "Location Services Disabled"
    user_message = "Please enable location services in your device settings to use your current location."


class LocationPermissionDenied(LocationError):
    title = "Permission Denied"
    user_message = "Location permission is required to show weather for your current location."


class LocationTimeout(LocationError):
    title = "Location Timeout"
    user_message = "Getting your location took too long. Please try again."


class LocationUnavailable(LocationError):
    title = "Location Unavailable"
    user_message = "Your location is currently unavailable. Please try again or add a location manually."


class InvalidLocationInput(LocationError):
    title = "Error"
    user_message = "Please enter a location (zipcode, city, or city, state)"


class GeocodeNotFound(LocationError):
    title = "Error"
    user_message = "Could not find this location. Please try a different search term."
