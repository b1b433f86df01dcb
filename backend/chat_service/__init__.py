"""Conversation & message delivery engine."""
