from projexia.client.api_client import ProjexiaAPIClient, ProjexiaAPIError, normalize_ids
from projexia.client.store import ProjectStore

__all__ = ["ProjexiaAPIClient", "ProjexiaAPIError", "normalize_ids", "ProjectStore"]
