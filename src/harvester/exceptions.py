"""Custom exceptions for the ambient energy harvester."""

class HarvesterError(Exception):
    """Base exception for harvester errors."""
    pass

class ConfigurationError(HarvesterError):
    """Exception raised for invalid installation configuration."""
    pass

class NumericDomainError(HarvesterError):
    """Exception raised when a physics function receives an input outside its domain."""
    pass

class InsufficientHistoryError(HarvesterError):
    """Exception raised when too little performance history exists for an evaluation."""
    pass

class ValidationError(HarvesterError):
    """Base exception for validation errors."""
    pass

class ValidationTypeError(ValidationError):
    """Exception raised for type validation errors."""
    pass

class ValidationRangeError(ValidationError):
    """Exception raised for range validation errors."""
    pass

class SimulationError(HarvesterError):
    """Exception raised when a simulation cannot be set up or run."""
    pass
