"""AgentDump - IL2CPP dump search tool."""

try:
    from importlib.metadata import version

    __version__ = version("agentdump")
except Exception:
    __version__ = "0.0.0.dev0+local"  # Fallback for development
