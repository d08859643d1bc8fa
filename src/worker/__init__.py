"""Message-driven training workers.

Workers receive ``{"action": ..., **payload}`` messages, dispatch them by
action name and post progress, training log and completion messages back
through a callback.
"""
