"""Editor state: layers, viewport, point capture and the segmentation tool."""
