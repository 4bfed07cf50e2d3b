from ._adam import Adam
from ._base import OptimMethod
from ._config import AdamConfig

__all__ = [Adam.__name__, AdamConfig.__name__, OptimMethod.__name__]
