"""Verification, moderation and notification workflows for a clinical case-sharing platform."""
