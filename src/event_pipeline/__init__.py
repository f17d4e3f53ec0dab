"""Polls a football feed, normalizes its events and forwards them to an event store."""
