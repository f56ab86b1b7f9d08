"""Built-in response code groups shipped with errorkit."""

from errorkit.models import CodeGroup

MainRespCode = CodeGroup.of(
    "MainRespCode",
    [
        ("AppVersionOutdated", 426, 426),
        ("AppMissingHeaders", 1000, 400),
        ("AppWrongLanguage", 1001, 406),
        ("ValidationError", 1002, 422),
        ("AppInvalidDeviceModel", 1003, 500),
        # Maintenance
        ("MaintenanceMode", 503, 503),
        ("ServiceUnavailable", 504, 503),
        # Server errors
        ("InternalServerError", 500, 500),
        ("BadGateway", 502, 502),
        ("GatewayTimeout", 505, 504),
        # Authentication
        ("Unauthorized", 401, 401),
        ("Forbidden", 403, 403),
        ("NotFound", 404, 404),
        # Rate limiting
        ("TooManyRequests", 429, 429),
        ("RateLimitExceeded", 430, 429),
    ],
    messages={
        "AppVersionOutdated": "Application version is outdated. Please update to the latest version.",
        "AppMissingHeaders": "Required headers are missing from the request.",
        "AppWrongLanguage": "Invalid or unsupported language specified.",
        "ValidationError": "The given data was invalid.",
        "AppInvalidDeviceModel": "Invalid or unsupported device model.",
        "MaintenanceMode": "The application is currently in maintenance mode. Please try again later.",
        "ServiceUnavailable": "Service is temporarily unavailable. Please try again later.",
        "InternalServerError": "An internal server error occurred. Please try again later.",
        "BadGateway": "Bad gateway. Please try again later.",
        "GatewayTimeout": "Gateway timeout. Please try again later.",
        "Unauthorized": "You are not authorized to perform this action.",
        "Forbidden": "Access to this resource is forbidden.",
        "NotFound": "The requested resource was not found.",
        "TooManyRequests": "Too many requests. Please slow down.",
        "RateLimitExceeded": "Rate limit exceeded. Please try again later.",
    },
)
