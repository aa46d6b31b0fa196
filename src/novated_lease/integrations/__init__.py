"""External collaborators — catalog, image generation and quote delivery."""

from novated_lease.integrations.catalog import (
    StaticVehicleCatalog,
    VehicleCatalog,
    VehicleRecord,
    apply_catalog,
)
from novated_lease.integrations.images import HttpSceneImageRequester, build_scene_prompt
from novated_lease.integrations.delivery import (
    ClientDetails,
    CollaboratorOutcome,
    QuoteDelivery,
    QuoteRenderer,
    QuoteStore,
    SceneImageRequester,
    build_quote_record,
    deliver_quote,
)

__all__ = [
    "StaticVehicleCatalog",
    "VehicleCatalog",
    "VehicleRecord",
    "apply_catalog",
    "HttpSceneImageRequester",
    "build_scene_prompt",
    "ClientDetails",
    "CollaboratorOutcome",
    "QuoteDelivery",
    "QuoteRenderer",
    "QuoteStore",
    "SceneImageRequester",
    "build_quote_record",
    "deliver_quote",
]
