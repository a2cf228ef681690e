"""
tutorschedule - weekly lesson calendar for a single tutor.
"""

__version__ = "0.1.0"
