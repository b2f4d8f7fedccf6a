"""
Campus complaints: routing, visibility policy and escalation of complaints
through a Student, Teacher/HOD and Admin hierarchy.
"""

__version__ = "1.0.0"
