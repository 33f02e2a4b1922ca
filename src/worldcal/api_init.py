"""Store bootstrap (import side-effect)."""
from .api import set_store
from .bootstrap import build_store
from .attributes import standard as _standard  # noqa: F401

set_store(build_store())
