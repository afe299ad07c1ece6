from nexus.services.prospector import Service

# Single controller shared by every request so the busy flag is global
_prospector: Service | None = None


def get_prospector() -> Service:
    """Get the shared prospector controller."""
    global _prospector
    if _prospector is None:
        _prospector = Service()
    return _prospector


def reset_prospector() -> None:
    global _prospector
    _prospector = None
