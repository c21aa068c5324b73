"""Image generation contract: validated settings, provider routing and the provider port.

The HTTP clients for the providers are external collaborators and are not
part of this package.
"""

from segstudio.generation.settings import (
    GenerationSettings,
    ImageProvider,
    ProviderRoute,
    resolve_provider,
)

__all__ = ["GenerationSettings", "ImageProvider", "ProviderRoute", "resolve_provider"]
