"""Error taxonomy for grey-so.

Every failure a tool call can hit is a ``GreySoError`` subclass so the MCP
layer can name the failure class in its error text. Only
``ConfigurationError`` is fatal, and only at startup.
"""

from __future__ import annotations

from collections.abc import Iterable


class GreySoError(Exception):
    """Base class for all grey-so errors."""


class ConfigurationError(GreySoError):
    """Process-wide configuration is unusable; the server must not start."""


class InvalidParameters(GreySoError):
    """Tool-call payload failed schema validation."""

    def __init__(self, violations: Iterable[str]):
        self.violations = list(violations)
        super().__init__(f"Invalid request parameters: {', '.join(self.violations)}")


class InvalidGitRef(GreySoError):
    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Invalid git ref: {ref}")


class InvalidFilePath(GreySoError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Invalid file path: {path}")


class GitDiffFailed(GreySoError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Git diff failed: {reason}")


class FilesNotFound(GreySoError):
    def __init__(self, paths: Iterable[str]):
        self.paths = list(paths)
        super().__init__(f"Files not found: {', '.join(self.paths)}")


class SensitiveFileBlocked(GreySoError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Blocked sensitive file: {path}")


class FileTooLarge(GreySoError):
    def __init__(self, path: str, limit: int):
        self.path = path
        self.limit = limit
        super().__init__(f"File exceeds max context size ({limit} bytes): {path}")


class BinaryFileRejected(GreySoError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Binary file is not allowed in context: {path}")


class UnknownProvider(GreySoError):
    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Unable to determine LLM provider for model: {model}")


class UnknownModelAlias(GreySoError):
    def __init__(self, alias: str, known: Iterable[str] = ()):
        self.alias = alias
        known = list(known)
        message = f"Unknown model alias: {alias}"
        if known:
            message += f". Use one of: {', '.join(known)}"
        super().__init__(message)


class SpawnFailed(GreySoError):
    """CLI backend could not be started.

    ``synchronous`` distinguishes a rejected invocation (bad arguments,
    invalid options) from the OS failing to launch the executable.
    """

    def __init__(self, cli_name: str, cause: BaseException, synchronous: bool = False):
        self.cli_name = cli_name
        self.synchronous = synchronous
        if synchronous:
            message = f"Synchronous error while trying to spawn {cli_name}: {cause}"
        else:
            message = (
                f"Failed to spawn {cli_name} CLI. Is it installed and in PATH? "
                f"Error: {cause}"
            )
        super().__init__(message)


class BackendExitedNonZero(GreySoError):
    def __init__(self, label: str, code: int, stderr: str):
        self.label = label
        self.code = code
        self.stderr = stderr
        super().__init__(f"{label} CLI exited with code {code}. Error: {stderr}")


class GeminiQuotaExhausted(BackendExitedNonZero):
    """Gemini CLI reported RESOURCE_EXHAUSTED."""

    def __init__(self, code: int, stderr: str):
        self.label = "Gemini"
        self.code = code
        self.stderr = stderr
        GreySoError.__init__(
            self,
            "Gemini quota exceeded. Consider using gemini-2.0-flash model. "
            f"Error: {stderr}",
        )


class EmptyModelResponse(GreySoError):
    def __init__(self, detail: str = "No response from the model"):
        super().__init__(detail)


class MissingCredential(GreySoError):
    def __init__(self, env_var: str, provider: str):
        self.env_var = env_var
        self.provider = provider
        super().__init__(
            f"{env_var} environment variable is required for {provider} models in API mode"
        )


class UnsupportedExecutionMode(GreySoError):
    pass


class SystemPromptExistsError(GreySoError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"System prompt already exists at: {path}\n"
            "Remove it first if you want to reinitialize."
        )
