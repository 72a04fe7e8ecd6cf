class ClipStashError(Exception):
    pass


class HotkeyRegistrationError(ClipStashError):
    """The platform refused to register a global hotkey."""


class UnsupportedPlatformError(ClipStashError, NotImplementedError):
    pass
