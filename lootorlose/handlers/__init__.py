"""
Handlers for Loot or Lose rounds.

- event_handler: selection and resolution of random events
"""

from .event_handler import EventOutcome, EVENT_HANDLERS, process_event, select_event
