"""Active Break - fitness check-ins, activity logging, reminders and achievements"""

__version__ = "1.0.0"
