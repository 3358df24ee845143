"""Zenni Rewards - reward economy and progression for the Zenni meditation app"""

__version__ = "1.0.0"
