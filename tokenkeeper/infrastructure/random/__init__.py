from .randomizer import SystemClock, SystemRandomizer

__all__ = ["SystemClock", "SystemRandomizer"]
