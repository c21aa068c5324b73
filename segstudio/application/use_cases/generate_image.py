"""Use case: generate an image with a remote provider and add it as a layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from segstudio.core.errors import InvalidInputError, ProviderError
from segstudio.editor.layers import Layer
from segstudio.editor.state import EditorState
from segstudio.generation.settings import GenerationSettings, ImageProvider, resolve_provider

log = logging.getLogger(__name__)

GENERATED_LAYER_NAME = "AI Generated"


@dataclass(frozen=True, slots=True)
class GenerateImageRequest:
    prompt: str
    settings: GenerationSettings
    negative_prompt: str = ""


class GenerateImageUseCase:
    def __init__(self, provider: ImageProvider, state: EditorState) -> None:
        self._provider = provider
        self._state = state

    def execute(self, req: GenerateImageRequest) -> Layer:
        if not req.prompt.strip():
            raise InvalidInputError("Enter a prompt to generate an image")
        settings = req.settings.validate()
        route = resolve_provider(settings.model)
        api_key = self._state.api_keys.for_provider(route.provider)
        if not api_key:
            raise ProviderError(f"{route.provider.capitalize()} API key not found")

        self._state.set_processing(True, "Generating with AI...")
        try:
            url = self._provider.generate(
                req.prompt,
                req.negative_prompt,
                settings,
                route=route,
                api_key=api_key,
            )
        except ProviderError:
            raise
        except Exception as e:  # noqa: BLE001
            raise ProviderError("AI generation failed", cause=e) from e
        finally:
            self._state.set_processing(False)

        log.info("Generated image via %s", route.provider)
        return self._state.layers.add(GENERATED_LAYER_NAME, thumbnail=url)
