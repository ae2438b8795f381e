"""Game domain services: board rules, session transitions, the room store
and change notification.

HTTP routes and socket handlers import from here, keeping transport
concerns separated from core game mechanics.
"""
