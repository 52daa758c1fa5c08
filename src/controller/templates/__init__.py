"""Module template resolution bounded context."""
