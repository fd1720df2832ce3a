"""
Tool base class and common types.

Every analysis tool inherits from AudioTool and implements execute().
Calling a tool validates its inputs first and never raises: failures come
back as ToolResult(success=False, error=...), which keeps the registry and
CLI free of per-tool error handling.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """
    Tool parameter specification.

    Attributes:
        name: Parameter name
        type: Python type (str, int, float, bool)
        description: Human-readable description
        required: Whether parameter is required
        default: Default value if not required
        choices: Allowed values, or None for any value of `type`
    """

    name: str
    type: type
    description: str
    required: bool = True
    default: Any = None
    choices: tuple[Any, ...] | None = None

    def validate(self, value: Any) -> tuple[bool, str | None]:
        """
        Validate parameter value.

        Ints are accepted for float parameters; bools are never accepted
        as numbers.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if value is None:
            if self.required:
                return False, f"Required parameter '{self.name}' is missing"
            return True, None

        numeric_ok = (
            self.type is float
            and isinstance(value, int)
            and not isinstance(value, bool)
        )
        wrong_bool = isinstance(value, bool) and self.type is not bool
        if wrong_bool or not (isinstance(value, self.type) or numeric_ok):
            return (
                False,
                f"Parameter '{self.name}' must be {self.type.__name__}, got {type(value).__name__}",
            )

        if self.choices is not None and value not in self.choices:
            allowed = ", ".join(str(c) for c in self.choices)
            return False, f"Parameter '{self.name}' must be one of: {allowed}"

        return True, None


@dataclass(frozen=True)
class ToolResult:
    """
    Result from tool execution.

    Attributes:
        success: Whether execution succeeded
        data: JSON-serialisable result data
        error: Error message if success=False
        metadata: Optional metadata (input file, settings used, timings)
    """

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for JSON output."""
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "metadata": self.metadata,
        }


class AudioTool(ABC):
    """
    Abstract base class for analysis tools.

    Subclasses must implement:
        - name: Unique tool identifier
        - description: What the tool computes and when to use it
        - parameters: List of ToolParameter specs
        - execute(): Core tool logic

    Example:
        class AnalyzeAudio(AudioTool):
            @property
            def name(self) -> str:
                return "analyze_audio"

            def execute(self, **kwargs) -> ToolResult:
                return ToolResult(success=True, data={"key": "A Minor", ...})
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool identifier (lowercase, underscores)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool returns."""

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """Parameters this tool accepts, required ones first."""

    def validate_inputs(self, **kwargs: Any) -> tuple[bool, str | None]:
        """
        Validate all input parameters.

        Unknown keyword arguments are rejected so typos surface early.

        Returns:
            Tuple of (is_valid, error_message)
        """
        known = {p.name for p in self.parameters}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            return False, f"Unknown parameter(s): {', '.join(unknown)}"

        for param in self.parameters:
            is_valid, error = param.validate(kwargs.get(param.name))
            if not is_valid:
                return False, error

        return True, None

    def resolve_inputs(self, **kwargs: Any) -> dict[str, Any]:
        """Fill in defaults for parameters that were not supplied."""
        return {
            p.name: kwargs[p.name] if kwargs.get(p.name) is not None else p.default
            for p in self.parameters
        }

    @abstractmethod
    def execute(self, **kwargs: Any) -> ToolResult:
        """
        Execute tool with validated parameters.

        Args:
            **kwargs: Tool parameters, already validated and with defaults filled

        Returns:
            ToolResult with success status and data
        """

    def __call__(self, **kwargs: Any) -> ToolResult:
        """
        Validate inputs, fill defaults, then execute.

        Returns:
            ToolResult (error if validation or execution fails)
        """
        is_valid, error = self.validate_inputs(**kwargs)
        if not is_valid:
            return ToolResult(success=False, error=error)

        try:
            return self.execute(**self.resolve_inputs(**kwargs))
        except Exception as e:
            return ToolResult(success=False, error=f"Tool execution failed: {e}")

    def to_dict(self) -> dict[str, Any]:
        """Serialise the tool signature for listings."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type.__name__,
                    "description": p.description,
                    "required": p.required,
                    "default": p.default,
                    "choices": list(p.choices) if p.choices is not None else None,
                }
                for p in self.parameters
            ],
        }
