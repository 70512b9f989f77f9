"""Error kinds surfaced to the studio page.

Every error carries the message shown to the user as ``str(exc)``.
"""


class StudioError(Exception):
    """Base class for all errors shown in the error banner"""


class ValidationError(StudioError):
    """Rejected before any network call (empty prompt, bad file, busy...)"""


class GenerationFailed(StudioError):
    pass


class EditFailed(StudioError):
    pass


class DecodeFailed(StudioError):
    """The uploaded file could not be read into an image payload"""


class MissingApiKeyError(StudioError):
    pass
