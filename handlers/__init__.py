"""
handlers/ - Presentation Layer
================================
Telegram bot handlers. Each handler receives updates from Telegram,
drives the chat's SubscriptionStore and FormController, and renders the result.
No business logic lives here.
"""
