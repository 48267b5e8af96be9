__all__ = ["Caller", "require_role"]

from .context import Caller, require_role
