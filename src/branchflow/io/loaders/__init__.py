from .errors import LoaderError
from .flow_loader import load_flow
from .strings_loader import load_strings

__all__ = ["load_flow", "load_strings", "LoaderError"]
