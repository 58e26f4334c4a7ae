# Avoid importing playwright-backed submodules at top-level to keep the CLI fast
__all__ = ["SessionManager", "Toolbox", "ServerConfig"]

__version__ = "0.1.0"


def __getattr__(name):
    if name == "SessionManager":
        from .automation.session import SessionManager
        return SessionManager
    if name == "Toolbox":
        from .tools.toolbox import Toolbox
        return Toolbox
    if name == "ServerConfig":
        from .core.config import ServerConfig
        return ServerConfig
    raise AttributeError(name)
