"""Face Matcher: PPO number based Aadhaar face verification backend"""

__version__ = "3.0.0"
