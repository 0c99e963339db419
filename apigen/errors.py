"""Exception hierarchy for the generator pipeline."""


class ApigenError(Exception):
    """Base class for every error that aborts a generation run."""


class ConfigError(ApigenError):
    """Configuration file is present but invalid."""


class FetchError(ApigenError):
    """The documentation page could not be fetched."""

    def __init__(self, url: str, reason: str, status_code: int = 0):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class ParseStructureError(ApigenError):
    """The documentation markup no longer has the shape the parser relies on."""


class SelectorSyntaxError(ParseStructureError):
    """A selector string could not be compiled."""

    def __init__(self, selector: str, reason: str):
        self.selector = selector
        super().__init__(f"Invalid selector {selector!r}: {reason}")


class ReturnTypeError(ParseStructureError):
    """No return-type template matched an operation description."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Could not parse result type from: {text}")
