"""NiceGUI interface - thin visualization layer over the chat controller.

Responsibilities:
    - Auth landing view with sign-up and log-in dialogs
    - Welcome screen, message list, widgets, and follow-up prompts
    - Saved-chat drawer and dark/light theme toggle
    - File attachments on outgoing messages

State and actions live in ``indie_coach.chat``; the coach itself is
reached over HTTP through ``CoachApiClient``.
"""
