"""segstudio: point-prompted object segmentation and layer splitting for an image editor."""
