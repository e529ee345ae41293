from abc import ABC, abstractmethod
from typing import Any


class AbstractDirectoryClient(ABC):
	"""Interface for representative directory lookups by postal code."""

	@abstractmethod
	async def lookup_postcode(self, postal_code: str) -> dict[str, Any]:
		"""Fetch the raw lookup payload for a normalized postal code.

		Args:
			postal_code: Normalized code (uppercase, no spaces), e.g. "K1A0A6".

		Returns:
			dict[str, Any]: Decoded JSON body from the directory.

		Raises:
			NotFoundAppError: The directory has no results for the code.
			InvalidInputAppError: The directory rejected the code.
			UpstreamUnavailableAppError: Network failure or unexpected status.
		"""
		...
