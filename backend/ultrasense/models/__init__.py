"""Database models."""
from .push_registration import PushRegistration
from .reading import Reading

__all__ = ["PushRegistration", "Reading"]
