class DailyPrError(Exception):
    """Base class for every error the CLI reports and exits on."""


class ConfigError(DailyPrError):
    pass


class AuthError(DailyPrError):
    pass


class ApiError(DailyPrError):
    pass


class NotFoundError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class NetworkError(DailyPrError):
    pass


class GenerationError(DailyPrError):
    pass


class WebhookError(DailyPrError):
    pass
