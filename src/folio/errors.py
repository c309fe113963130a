"""Exception taxonomy for Folio.

Every error raised by the engine derives from FolioError. Errors raised by a
template body itself (ValueError, KeyError, ...) are never wrapped: the render
pipeline restores its state and re-raises them unchanged.
"""


class FolioError(Exception):
    """Base class for all Folio errors."""


class ConfigurationError(FolioError):
    """Raised when the engine is configured with invalid directories, folders or functions."""


class InvalidTemplateNameError(FolioError):
    """Raised when a template name cannot be parsed."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f'The template name "{name}" is not valid. {message}')


class FolderNotFoundError(FolioError):
    """Raised when a template references an unknown folder."""

    def __init__(self, folder: str) -> None:
        self.folder = folder
        super().__init__(f'The template folder "{folder}" was not found.')


class TemplateNotFoundError(FolioError):
    """Raised when a template name cannot be resolved to a file.

    Attributes:
        template: The template name as written by the caller
        paths: Every path that was tried, in order
    """

    def __init__(self, template: str, paths: list[str], message: str | None = None) -> None:
        self.template = template
        self.paths = list(paths)
        if message is None:
            tried = ", ".join(self.paths) if self.paths else "no candidate paths"
            message = f'The template "{template}" could not be found (tried: {tried}).'
        super().__init__(message)


# =============================================================================
# Template structure errors
# =============================================================================


class TemplateStructureError(FolioError):
    """A template body used sections or output capture incorrectly."""


class ReservedNameError(TemplateStructureError):
    """Raised when a template tries to start the reserved "content" section."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'The section name "{name}" is reserved.')


class NestedSectionError(TemplateStructureError):
    """Raised when a section is started while another one is still open."""

    def __init__(self, name: str, open_section: str) -> None:
        self.name = name
        self.open_section = open_section
        super().__init__(
            f'Cannot start section "{name}" inside section "{open_section}": '
            "sections cannot be nested."
        )


class NoOpenSectionError(TemplateStructureError):
    """Raised when stop() is called without a matching start()."""

    def __init__(self) -> None:
        super().__init__("You must start a section before you can stop it.")


class ImbalancedCaptureError(TemplateStructureError):
    """Raised when capture frames are exited out of order or left open."""


# =============================================================================
# Extension errors
# =============================================================================


class UnknownExtensionError(FolioError, AttributeError):
    """Raised when a template calls a function that is not registered."""

    def __init__(self, name: str) -> None:
        self.function_name = name
        super().__init__(f'The template function "{name}" was not found.')


class UnknownPipelineFunctionError(FolioError):
    """Raised when a batch/escape pipeline names a function that cannot be found."""

    def __init__(self, name: str) -> None:
        self.function_name = name
        super().__init__(f'The batch function could not find the "{name}" function.')
