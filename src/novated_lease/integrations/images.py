"""Scene image generation for quote documents."""

from __future__ import annotations

import logging

import httpx

from novated_lease.config.vehicle import VehicleClass
from novated_lease.errors import CollaboratorError

logger = logging.getLogger(__name__)

_SCENES: dict[VehicleClass, str] = {
    VehicleClass.SUV: "parked on a quiet road near the coast, clear skies, no people, photorealistic",
    VehicleClass.HATCH: "driving down an empty city street at dusk, clean background, no text or people, photorealistic",
    VehicleClass.SEDAN: "parked on a residential street, soft morning light, no people, ultra-realistic",
    VehicleClass.UTE: "on a gravel track with trees in the background, no people, no signage, clean lighting",
    VehicleClass.LARGE_UTE: "parked on a country road with open landscape, no people or text, simple setting, high realism",
    VehicleClass.VAN: "parked in a work zone with minimal detail, natural lighting, photorealistic, no people",
    VehicleClass.EV: "charging at a generic EV station with modern background, clean light, no logos or people",
}
_DEFAULT_SCENE = "on a plain sealed road, bushland behind, daylight, no people"
_SUFFIX = "Australian spec vehicle, high quality, no branding, no logos, no people, no text, ultra-realistic photo"


def build_scene_prompt(
    make: str | None,
    model: str | None,
    year: int | None,
    vehicle_class: VehicleClass | None,
    variant: str | None = None,
) -> str:
    """Image prompt for a vehicle in a class-appropriate setting."""
    description = " ".join(str(p) for p in (year, make, model, variant) if p) or "A car"
    scene = _SCENES.get(vehicle_class, _DEFAULT_SCENE) if vehicle_class else _DEFAULT_SCENE
    return f"{description} {scene}, {_SUFFIX}"


class HttpSceneImageRequester:
    """Calls an OpenAI-compatible ``/images/generations`` endpoint.

    Raises ``CollaboratorError`` on timeout, HTTP error or a malformed
    response.  The caller decides whether that matters.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str = "dall-e-3",
        size: str = "1024x1024",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.size = size
        self.timeout = timeout
        self._client = client

    def request_image(self, prompt: str) -> str:
        payload = {"model": self.model, "prompt": prompt, "n": 1, "size": self.size}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        client = self._client or httpx.Client(timeout=self.timeout)
        try:
            response = client.post(self.api_url, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()["data"][0]["url"]
        except httpx.TimeoutException as e:
            raise CollaboratorError(f"Image API timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise CollaboratorError(f"Image API error: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise CollaboratorError(f"Image API request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise CollaboratorError(f"Invalid image API response: {e}") from e
        finally:
            if self._client is None:
                client.close()
