"""
Tool registry with automatic discovery.

The registry scans the tools package for AudioTool subclasses and
provides lookup by name. Tools register themselves by existing.
"""

import importlib
import inspect
import logging
import pkgutil

from tools.base import AudioTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for analysis tools with automatic discovery.

    Usage:
        registry = ToolRegistry()
        registry.discover()

        tool = registry.get("analyze_audio")
        result = tool(file_path="/path/to/track.wav")
    """

    def __init__(self) -> None:
        self._tools: dict[str, AudioTool] = {}

    def register(self, tool: AudioTool) -> None:
        """
        Register a tool instance.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> AudioTool | None:
        """Tool by name, or None if not registered."""
        return self._tools.get(name)

    def names(self) -> list[str]:
        """Registered tool names, sorted."""
        return sorted(self._tools)

    def list_tools(self) -> list[dict]:
        """Tool signatures (name, description, parameters), sorted by name."""
        return [self._tools[name].to_dict() for name in self.names()]

    def discover(self, package_name: str = "tools") -> int:
        """
        Register every concrete AudioTool subclass found under a package.

        Modules that fail to import are logged and skipped.

        Args:
            package_name: Package to scan (default: "tools")

        Returns:
            Number of tools registered by this call
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError:
            logger.warning("Tool package %r cannot be imported", package_name)
            return 0

        if not hasattr(package, "__path__"):
            return 0

        count = 0
        for _finder, module_name, _is_pkg in pkgutil.walk_packages(
            package.__path__, prefix=f"{package_name}."
        ):
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.warning("Skipping tool module %s: %s", module_name, exc)
                continue

            for _name, obj in inspect.getmembers(module, inspect.isclass):
                if obj is AudioTool or obj.__module__ != module.__name__:
                    continue
                if issubclass(obj, AudioTool) and not inspect.isabstract(obj):
                    tool = obj()
                    if tool.name in self._tools:
                        continue
                    self.register(tool)
                    count += 1

        return count

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """
    Global tool registry singleton, discovered on first call.
    """
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
        _registry.discover()
    return _registry
