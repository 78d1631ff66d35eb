"""Components for a sector-based multiplayer fighting game server: protocol, sectors, sessions, sockets and frame timing."""

__version__ = "0.1.0"

__all__ = ["network", "protocol", "sector_manager", "session", "timer"]