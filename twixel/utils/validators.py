"""
Input Validation Utilities

Field validators for the login and new-twix forms. Each returns the error
message to show next to the field, or None when the value is acceptable.
"""


MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MIN_TITLE_LENGTH = 3
MIN_CONTENT_LENGTH = 10


def validate_username(username: str) -> str | None:
    """
    Examples:
        >>> validate_username("kody")
        >>> validate_username("ko")
        'Usernames must be at least 3 characters long'
    """
    if len(username) < MIN_USERNAME_LENGTH:
        return f"Usernames must be at least {MIN_USERNAME_LENGTH} characters long"
    return None


def validate_password(password: str) -> str | None:
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def validate_twix_title(title: str) -> str | None:
    if len(title) < MIN_TITLE_LENGTH:
        return "That twix's title is too short"
    return None


def validate_twix_content(content: str) -> str | None:
    if len(content) < MIN_CONTENT_LENGTH:
        return "That twix is too short"
    return None
