from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from segstudio.config import (
    GENERATION_GUIDANCE_RANGE,
    GENERATION_SIZES,
    GENERATION_STEPS_RANGE,
)
from segstudio.core.errors import InvalidInputError, ProviderError
from segstudio.settings.schema import GenerationDefaults

REPLICATE = "replicate"
DEEPINFRA = "deepinfra"

REPLICATE_VERSIONS = {
    "sdxl-1.0": "stability-ai/sdxl:39ed52f2a78e934b3ba6e2a89f5b1c712de7dfea535525255b1aa35c5565e08b",
    "flux-dev": "black-forest-labs/flux-dev:5b3e8162-e726-4add-bfde-053dac7dc5a4",
}
DEEPINFRA_MODELS = {
    "kandinsky-3": "kandinsky-community/kandinsky-3",
    "sdxl-turbo": "stabilityai/stable-diffusion-xl-base-1.0",
}


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    model: str
    steps: int = 30
    guidance: float = 7.5
    seed: int = -1  # -1 = random
    width: int = 1024
    height: int = 1024
    strength: float = 0.8
    use_upscale: bool = False

    @classmethod
    def from_defaults(cls, d: GenerationDefaults) -> GenerationSettings:
        return cls(
            model=d.model,
            steps=d.steps,
            guidance=d.guidance,
            seed=d.seed,
            width=d.width,
            height=d.height,
            strength=d.strength,
            use_upscale=d.use_upscale,
        )

    def validate(self) -> GenerationSettings:
        lo, hi = GENERATION_STEPS_RANGE
        if not lo <= self.steps <= hi:
            raise InvalidInputError(f"steps must be within [{lo}, {hi}], got {self.steps}")
        glo, ghi = GENERATION_GUIDANCE_RANGE
        if not glo <= self.guidance <= ghi:
            raise InvalidInputError(f"guidance must be within [{glo}, {ghi}], got {self.guidance}")
        if self.seed < -1:
            raise InvalidInputError(f"seed must be -1 (random) or >= 0, got {self.seed}")
        for name, value in (("width", self.width), ("height", self.height)):
            if value not in GENERATION_SIZES:
                raise InvalidInputError(f"{name} must be one of {GENERATION_SIZES}, got {value}")
        if not 0.0 <= self.strength <= 1.0:
            raise InvalidInputError(f"strength must be within [0, 1], got {self.strength}")
        return self

    @property
    def seed_or_none(self) -> int | None:
        return None if self.seed == -1 else self.seed


@dataclass(frozen=True, slots=True)
class ProviderRoute:
    provider: str  # "replicate" | "deepinfra"
    model_ref: str  # version hash / model path on the provider side


def resolve_provider(model: str) -> ProviderRoute:
    """Pick the provider for a model identifier.

    Identifiers naming a provider (e.g. "replicate/sdxl-1.0") route there and
    fall back to that provider's default model; bare known model names route
    to the provider that hosts them.
    """
    m = model.strip().lower()
    name = m.rsplit("/", 1)[-1]
    if REPLICATE in m:
        return ProviderRoute(REPLICATE, REPLICATE_VERSIONS.get(name, REPLICATE_VERSIONS["sdxl-1.0"]))
    if DEEPINFRA in m:
        return ProviderRoute(DEEPINFRA, DEEPINFRA_MODELS.get(name, DEEPINFRA_MODELS["sdxl-turbo"]))
    if name in REPLICATE_VERSIONS:
        return ProviderRoute(REPLICATE, REPLICATE_VERSIONS[name])
    if name in DEEPINFRA_MODELS:
        return ProviderRoute(DEEPINFRA, DEEPINFRA_MODELS[name])
    raise ProviderError(f"Unsupported model provider: {model}")


class ImageProvider(Protocol):
    """Remote text-to-image backend. Returns the URL of the generated image."""

    def generate(
        self,
        prompt: str,
        negative_prompt: str,
        settings: GenerationSettings,
        *,
        route: ProviderRoute,
        api_key: str,
    ) -> str:
        ...
