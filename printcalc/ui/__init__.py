from . import calculator, common, saves

__all__ = [
    "calculator",
    "saves",
    "common",
]
