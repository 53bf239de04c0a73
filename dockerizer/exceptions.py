"""Custom exceptions for dockerizer."""

from __future__ import annotations


class DockerizerError(Exception):
    """Base exception for all dockerizer errors."""


class ProjectNotFound(DockerizerError):
    """Raised when the project directory to analyze does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Project path not found: {path}")


class ManifestUnreadable(DockerizerError):
    """Raised when an indicator file is absent or cannot be parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read manifest {path}: {reason}")


class UnsupportedLanguage(DockerizerError):
    """Raised when no Dockerfile recipe is registered for a language."""

    def __init__(self, language: str):
        self.language = language
        if language:
            message = f"Unsupported language for Dockerfile generation: {language}"
        else:
            message = "Language not detected; choose one before generating a Dockerfile"
        super().__init__(message)


class UnsupportedFramework(DockerizerError):
    """Raised when a recipe only supports specific frameworks of its language."""

    def __init__(self, language: str, framework: str, supported: list[str]):
        self.language = language
        self.framework = framework
        self.supported = supported
        super().__init__(
            f"Unsupported {language} framework: {framework or '(none)'}. "
            f"Supported: {', '.join(supported)}"
        )


class EmptyRenderOutput(DockerizerError):
    """Raised when a template renders to nothing; no file is left on disk."""

    def __init__(self, path: str, language: str, framework: str):
        self.path = path
        self.language = language
        self.framework = framework
        super().__init__(
            f"Generated {path} is empty for {language}/{framework or '(none)'}, "
            "template conditions not met"
        )


class OutputWriteFailure(DockerizerError):
    """Raised when a generated file cannot be written."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class CatalogError(DockerizerError):
    """Raised when the language or database catalog is missing or invalid."""


class InvalidPort(DockerizerError, ValueError):
    """Raised when a port is not an integer in 1-65535."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid port {value!r}: port must be between 1 and 65535")
