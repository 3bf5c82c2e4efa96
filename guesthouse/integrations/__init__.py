from guesthouse.integrations.guest_directory import (
    GuestDirectory,
    GuestDirectoryError,
    HttpGuestDirectory,
    NullGuestDirectory,
    build_guest_directory,
)

__all__ = [
    "GuestDirectory",
    "GuestDirectoryError",
    "HttpGuestDirectory",
    "NullGuestDirectory",
    "build_guest_directory",
]
