"""Heartbeat tracker: device beats and the absences derived from them."""
