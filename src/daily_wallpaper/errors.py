"""Exception types raised by the daily-wallpaper core.

Filesystem failures are not wrapped: they surface as the built-in OSError.
"""


class DailyWallpaperError(Exception):
    """Base class for daily-wallpaper errors."""


class InvalidRangeError(DailyWallpaperError, ValueError):
    """Raised when a requested fetch count is outside the allowed range."""

    def __init__(self, value: int, minimum: int, maximum: int):
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"The number of images to fetch must be in the range [{minimum}-{maximum}], got {value}"
        )


class RemoteError(DailyWallpaperError):
    """Raised when the image service returns a failure or an unreadable response."""

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class InvalidImageIdError(DailyWallpaperError, ValueError):
    """Raised when an image ID cannot be used as a file name in the cache directory."""

    def __init__(self, image_id: str):
        self.image_id = image_id
        super().__init__(f"Image ID {image_id!r} is not a plain file name")
