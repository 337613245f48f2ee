"""
AutoSend App - Rotating Message Dispatch Scheduler

Periodically dispatches a sequence of outbound messages to one or more
rotating destinations with jittered timing, and suspends the schedule when
inbound events carry a verification challenge or catchlist notice until
the alert is acknowledged.
"""

__version__ = "0.1.0"
__author__ = "AutoSend Team"
