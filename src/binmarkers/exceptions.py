"""Custom exceptions for binmarkers."""


class BinMarkersError(Exception):
    """Base exception for all binmarkers errors."""
    pass


class ParseError(BinMarkersError):
    """Exception raised while reading a marker matrix."""

    def __init__(self, message: str, line_number: int = None, marker: str = None):
        self.line_number = line_number
        self.marker = marker

        location = []
        if line_number is not None:
            location.append(f"Line {line_number}")
        if marker is not None:
            location.append(f"marker `{marker}`")
        if location:
            message = f"{', '.join(location)}: {message}"

        super().__init__(message)


class ConfigurationError(BinMarkersError):
    """Exception raised for invalid pass or pipeline settings."""

    def __init__(self, message: str, config_file: str = None, parameter: str = None):
        self.config_file = config_file
        self.parameter = parameter

        if parameter is not None:
            message = f"Invalid {parameter}: {message}"
        if config_file is not None:
            message = f"{config_file}: {message}"

        super().__init__(message)
