"""Custom exceptions for the VEA portal dashboard."""


class PortalError(Exception):
	"""Base exception for portal errors."""
	pass


class PortalAuthError(PortalError):
	"""Session rejected or expired."""
	pass


class PortalAPIError(PortalError):
	"""API request failed."""
	pass


class PortalConnectionError(PortalError):
	"""Connection to the portal failed."""
	pass


class PortalDataError(PortalError):
	"""Response body could not be decoded."""
	pass


class PortalConfigError(PortalError):
	"""Configuration is missing or invalid."""
	pass
