"""
Service layer base
"""

from abc import ABC


class BaseService(ABC):
    """
    Common parent of the benchmark services.

    A service wires domain components (clients, batching, evaluation) into
    one step of a benchmark run.
    """
    pass
