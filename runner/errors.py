# runner/errors.py
class SpecSheetError(Exception):
    pass

class ConfigError(SpecSheetError):
    pass

class MissingAssetError(SpecSheetError):
    """A referenced screenshot (or other input file) does not exist."""

    def __init__(self, path: str, message: str = None):
        self.path = str(path)
        super().__init__(message or f"Screenshot not found: {self.path}")

class BrowserStartError(SpecSheetError):
    pass

class BrowserHealthError(SpecSheetError):
    pass

class NavigationError(SpecSheetError):
    pass

class ActionExecutionError(SpecSheetError):
    pass

class ExtractionError(SpecSheetError):
    pass

class CaptureError(SpecSheetError):
    """Screenshot capture or an image write failed."""
    pass
