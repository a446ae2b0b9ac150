# core/exceptions.py
"""
Custom exceptions for the agronomy backend
"""

class Campo360Error(Exception):
    """Base exception for the Campo360 backend"""
    pass

class AgentError(Campo360Error):
    """Agent failed and no fallback answer could be produced"""
    pass

class AgentConfigError(Campo360Error):
    """Agent is missing configuration it needs (API keys, settings)"""
    pass

class ExternalAPIError(Campo360Error):
    """Weather provider unreachable, rejected the call or sent bad data"""
    pass
